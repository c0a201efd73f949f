import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import AsyncExitStack

from app.connections import mongo_lifespan
from app.connections.redis import redis_lifespan
from app.api.auth import router as auth_router
from app.services.notifications import build_sender
from app.services.notifications.mailer import AuthMailer
from app.services.store import UserStore
from app.utils.config import settings
from app.utils.errors import AppError, app_error_handler, request_validation_handler
from app.utils.logging import configure_logging


logger = logging.getLogger(__name__)


def build_mailer() -> AuthMailer:
    return AuthMailer(
        build_sender(settings),
        client_url=settings.client_url,
        verification_minutes=settings.verification_token_expires_minutes,
        reset_minutes=settings.reset_token_expires_minutes,
    )


async def combined_lifespan(app: FastAPI):
    async with AsyncExitStack() as stack:
        await stack.enter_async_context(mongo_lifespan(app))
        await stack.enter_async_context(redis_lifespan(app))

        # Process-scoped collaborators, injected into handlers via app.state
        app.state.user_store = UserStore()
        app.state.mailer = build_mailer()
        logger.info("%s started (%s)", settings.app_name, settings.environment)

        yield


def create_app(lifespan=combined_lifespan) -> FastAPI:
    app = FastAPI(title="MERN Auth (Mongo)", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get("/")
    def root() -> dict:
        return {"message": "Hello World"}

    app.include_router(auth_router, prefix="/api/auth")
    return app


configure_logging(settings.log_level)
app = create_app()
