"""
Tests for the MongoDB status store, with Motor collections mocked out.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

from cafe_map.models.cafe_model import CafeStatus
from cafe_map.repos.status_repo import StatusRepository


class FakeCursor:
    def __init__(self, docs):
        self.docs = list(docs)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self.docs:
            raise StopAsyncIteration
        return self.docs.pop(0)


def make_repo(cache_ttl_seconds=3600):
    statuses = MagicMock()
    statuses.find_one = AsyncMock()
    statuses.update_one = AsyncMock()
    cache = MagicMock()
    cache.find_one = AsyncMock()
    cache.update_one = AsyncMock()
    db = {"cafe_statuses": statuses, "overpass_cache": cache}
    return StatusRepository(db, cache_ttl_seconds), statuses, cache


def test_get_statuses_builds_flat_mapping():
    repo, statuses, _ = make_repo()
    statuses.find.return_value = FakeCursor([
        {"cafe_id": "node/1", "status": "visited"},
        {"cafe_id": "way/2", "status": "disliked"},
        {"cafe_id": "node/9", "status": 3},
    ])

    assert asyncio.run(repo.get_statuses()) == {"node/1": "visited", "way/2": "disliked"}


def test_get_status_defaults_to_new():
    repo, statuses, _ = make_repo()
    statuses.find_one.return_value = None
    assert asyncio.run(repo.get_status("node/3")) == CafeStatus.NEW

    statuses.find_one.return_value = {"cafe_id": "node/3", "status": "weird"}
    assert asyncio.run(repo.get_status("node/3")) == CafeStatus.NEW


def test_set_status_upserts():
    repo, statuses, _ = make_repo()

    asyncio.run(repo.set_status("node/3", CafeStatus.NEW))

    args, kwargs = statuses.update_one.call_args
    assert args[0] == {"cafe_id": "node/3"}
    assert args[1]["$set"]["status"] == "new"
    assert kwargs["upsert"] is True


def test_cache_skipped_when_disabled():
    repo, _, cache = make_repo(cache_ttl_seconds=0)

    assert asyncio.run(repo.get_cached_elements()) is None
    assert asyncio.run(repo.cache_elements([{"id": 1}])) is False
    cache.find_one.assert_not_called()
    cache.update_one.assert_not_called()


def test_cache_hit_returns_elements():
    repo, _, cache = make_repo()
    cache.find_one.return_value = {"key": "elements", "elements": [{"id": 1}]}

    assert asyncio.run(repo.get_cached_elements()) == [{"id": 1}]
