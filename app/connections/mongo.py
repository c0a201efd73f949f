import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import certifi
from fastapi import FastAPI
from mongoengine import connect, disconnect

from app.utils.config import settings


logger = logging.getLogger(__name__)


def init_mongo(**overrides) -> None:
    options = {"host": settings.mongo_uri, "alias": "default", "tz_aware": True}
    if settings.mongo_uri.startswith("mongodb+srv://"):
        # Atlas SRV hosts require TLS
        options["tlsCAFile"] = certifi.where()
    options.update(overrides)
    connect(**options)
    logger.info("Connected to MongoDB database %s", settings.mongo_db)


def close_mongo() -> None:
    disconnect(alias="default")
    logger.info("Disconnected from MongoDB")


@asynccontextmanager
async def mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_mongo()
    try:
        yield
    finally:
        close_mongo()
