from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime, timedelta

from cafe_map.models.cafe_model import CafeStatus

class StatusRepository:
    """MongoDB-backed status store and Overpass element cache."""

    def __init__(self, db: AsyncIOMotorDatabase, cache_ttl_seconds: int = 3600):
        self.statuses_collection = db["cafe_statuses"]
        self.cache_collection = db["overpass_cache"]
        self.cache_ttl_seconds = cache_ttl_seconds

    async def get_statuses(self) -> dict[str, str]:
        """Returns the flat cafe_id -> status mapping."""
        statuses = {}
        async for doc in self.statuses_collection.find({}, {"_id": 0}):
            # Hand-edited documents may carry anything here
            if isinstance(doc.get("status"), str):
                statuses[str(doc["cafe_id"])] = doc["status"]
        return statuses

    async def get_status(self, cafe_id: str) -> CafeStatus:
        doc = await self.statuses_collection.find_one({"cafe_id": str(cafe_id)})
        if not doc:
            return CafeStatus.NEW
        return CafeStatus.parse(doc.get("status"))

    async def set_status(self, cafe_id: str, status: CafeStatus) -> bool:
        """
        Upserts the status for a cafe.
        NEW is written explicitly rather than deleting the entry.
        """
        await self.statuses_collection.update_one(
            {"cafe_id": str(cafe_id)},
            {"$set": {"status": CafeStatus(status).value, "updated_at": datetime.utcnow()}},
            upsert=True
        )
        return True

    async def get_cached_elements(self) -> list | None:
        if self.cache_ttl_seconds <= 0:
            return None

        cutoff = datetime.utcnow() - timedelta(seconds=self.cache_ttl_seconds)
        doc = await self.cache_collection.find_one({
            "key": "elements",
            "timestamp": {"$gt": cutoff}
        })
        return doc["elements"] if doc else None

    async def cache_elements(self, elements: list) -> bool:
        if self.cache_ttl_seconds <= 0:
            return False

        await self.cache_collection.update_one(
            {"key": "elements"},
            {"$set": {"elements": elements, "timestamp": datetime.utcnow()}},
            upsert=True
        )
        return True
