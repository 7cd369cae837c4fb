"""
Picks where cafe statuses live for a request: JSON files under DATA_DIR
("local") or MongoDB ("mongodb"), per STORAGE_MODE.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from cafe_map.core.config import settings
from cafe_map.core.logger import logs
from cafe_map.repos.local_repo import LocalRepository
from cafe_map.repos.status_repo import StatusRepository

STORAGE_MODES = ("local", "mongodb")


class MongoConnection:
    """One Motor client for the whole process, created on first use."""
    _client: AsyncIOMotorClient | None = None

    @classmethod
    def database(cls) -> AsyncIOMotorDatabase:
        if cls._client is None:
            # Motor connects lazily, so this does not block the request
            cls._client = AsyncIOMotorClient(settings.MONGO_URI)
            logs.log(logging.INFO, "MongoDB client created", extra={"db": settings.MONGO_DB_NAME})
        return cls._client[settings.MONGO_DB_NAME]


async def get_repository() -> LocalRepository | StatusRepository:
    """FastAPI dependency returning the status store for the configured STORAGE_MODE."""
    if settings.STORAGE_MODE == "local":
        return LocalRepository(settings.DATA_DIR, settings.CACHE_TTL_SECONDS)
    if settings.STORAGE_MODE == "mongodb":
        return StatusRepository(MongoConnection.database(), settings.CACHE_TTL_SECONDS)
    raise RuntimeError(
        f"Unknown STORAGE_MODE {settings.STORAGE_MODE!r}, expected one of {', '.join(STORAGE_MODES)}"
    )
