from app.connections.mongo import mongo_lifespan
from app.connections.redis import redis_lifespan

__all__ = ["mongo_lifespan", "redis_lifespan"]
