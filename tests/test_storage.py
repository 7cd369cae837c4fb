"""
Tests for choosing the status store from STORAGE_MODE.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from cafe_map.core import storage
from cafe_map.core.config import settings
from cafe_map.repos.local_repo import LocalRepository
from cafe_map.repos.status_repo import StatusRepository


def test_local_mode_uses_data_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "STORAGE_MODE", "local")
    monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path / "store"))
    monkeypatch.setattr(settings, "CACHE_TTL_SECONDS", 0)

    repo = asyncio.run(storage.get_repository())

    assert isinstance(repo, LocalRepository)
    assert repo.status_file == tmp_path / "store" / "state" / "cafe_statuses.json"


def test_mongodb_mode_reuses_one_client(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(settings, "STORAGE_MODE", "mongodb")
    monkeypatch.setattr(settings, "MONGO_DB_NAME", "cafes_test")
    monkeypatch.setattr(storage.MongoConnection, "_client", client)

    first = asyncio.run(storage.get_repository())
    second = asyncio.run(storage.get_repository())

    assert isinstance(first, StatusRepository)
    assert isinstance(second, StatusRepository)
    client.__getitem__.assert_called_with("cafes_test")
    assert storage.MongoConnection._client is client


def test_unknown_mode_fails_loudly(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_MODE", "redis")

    with pytest.raises(RuntimeError, match="redis"):
        asyncio.run(storage.get_repository())
