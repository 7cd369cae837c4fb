"""
Local file-based repository for cafe statuses and cached Overpass data.
Uses JSON files instead of MongoDB.
"""
import json
from datetime import datetime, timedelta
from typing import Optional
from pathlib import Path

from cafe_map.models.cafe_model import CafeStatus
from cafe_map.core.logger import logs
import logging


class LocalRepository:
    """Repository for storing data in local JSON files."""

    STATUS_FILE = "cafe_statuses.json"
    ELEMENTS_CACHE_FILE = "overpass_elements.json"

    def __init__(self, base_dir: str | Path = "data", cache_ttl_seconds: int = 3600):
        """Initialize local storage directories."""
        self.base_dir = Path(base_dir)
        self.state_dir = self.base_dir / "state"
        self.cache_dir = self.base_dir / "cache"
        self.cache_ttl_seconds = cache_ttl_seconds

        # Create directories if they don't exist
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        logs.log(logging.DEBUG, f"Local file repository initialized at {self.base_dir}")

    @property
    def status_file(self) -> Path:
        return self.state_dir / self.STATUS_FILE

    @property
    def elements_cache_file(self) -> Path:
        return self.cache_dir / self.ELEMENTS_CACHE_FILE

    # ===== Status Methods =====

    def _read_statuses(self) -> dict[str, str]:
        if not self.status_file.exists():
            return {}

        try:
            with open(self.status_file, 'r', encoding="utf-8") as f:
                statuses = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logs.log(logging.WARNING, f"Status file unreadable, treating as empty: {str(e)}")
            return {}

        if not isinstance(statuses, dict):
            logs.log(logging.WARNING, "Status file does not hold a mapping, treating as empty")
            return {}

        valid = {key: value for key, value in statuses.items() if isinstance(value, str)}
        if len(valid) != len(statuses):
            dropped = sorted(set(statuses) - set(valid))
            logs.log(logging.WARNING, "Ignoring non-text status entries", extra={"cafe_ids": dropped})
        return valid

    async def get_statuses(self) -> dict[str, str]:
        """Returns the flat cafe_id -> status mapping."""
        return self._read_statuses()

    async def get_status(self, cafe_id: str) -> CafeStatus:
        statuses = self._read_statuses()
        return CafeStatus.parse(statuses.get(str(cafe_id), CafeStatus.NEW.value))

    async def set_status(self, cafe_id: str, status: CafeStatus) -> bool:
        """
        Read-modify-write of the status mapping.
        A corrupt file is replaced by a fresh mapping.
        """
        statuses = self._read_statuses()
        statuses[str(cafe_id)] = CafeStatus(status).value

        with open(self.status_file, 'w', encoding="utf-8") as f:
            json.dump(statuses, f, indent=2)

        return True

    # ===== Cache Methods =====

    async def get_cached_elements(self) -> Optional[list]:
        """Get cached Overpass elements if they are still fresh."""
        if self.cache_ttl_seconds <= 0 or not self.elements_cache_file.exists():
            return None

        try:
            with open(self.elements_cache_file, 'r', encoding="utf-8") as f:
                cached = json.load(f)

            cached_time = datetime.fromisoformat(cached["cached_at"])
            if datetime.now() - cached_time > timedelta(seconds=self.cache_ttl_seconds):
                self.elements_cache_file.unlink()  # Delete expired cache
                return None

            return cached["data"]
        except (OSError, KeyError, ValueError) as e:
            logs.log(logging.ERROR, f"Failed to get cached elements: {str(e)}")
            return None

    async def cache_elements(self, elements: list) -> bool:
        """Cache Overpass elements."""
        if self.cache_ttl_seconds <= 0:
            return False

        try:
            cached = {
                "data": elements,
                "cached_at": datetime.now().isoformat()
            }

            with open(self.elements_cache_file, 'w', encoding="utf-8") as f:
                json.dump(cached, f, indent=2)

            return True
        except OSError as e:
            logs.log(logging.ERROR, f"Failed to cache elements: {str(e)}")
            return False
