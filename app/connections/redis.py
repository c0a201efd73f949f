import logging
import redis
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from fastapi import FastAPI

from app.utils.base import NotificationBackend
from app.utils.config import settings


logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    assert _redis_client is not None, "Redis not initialized"
    return _redis_client


def init_redis() -> None:
    global _redis_client
    # rq stores pickled job payloads, so responses must stay as bytes
    _redis_client = redis.Redis(
        db=settings.redis_db,
        port=settings.redis_port,
        host=settings.redis_host,
        password=settings.redis_password,
        socket_timeout=2.0,
    )
    logger.info("Redis client ready for queue %s", settings.notification_queue)


def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        try:
            _redis_client.close()
        finally:
            _redis_client = None


@asynccontextmanager
async def redis_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Only queued email delivery needs redis; other backends skip it."""
    if settings.notification_backend != NotificationBackend.RQ.value:
        yield
        return
    init_redis()
    try:
        yield
    finally:
        close_redis()
