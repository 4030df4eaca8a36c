"""Shared fixtures for HTTP endpoint tests.

The app is exercised without its lifespan: the store handle and the hub
client are swapped in through ``app.dependency_overrides``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from fitlink.dependencies import get_daily_records, get_database, get_notification_hub
from fitlink.main import app
from fitlink.records.tests.fakes import InMemoryDailyRecordStore


@pytest.fixture
def db() -> MagicMock:
    mock = MagicMock()
    mock.fetch = AsyncMock(return_value=[])
    mock.fetchrow = AsyncMock(return_value=None)
    mock.fetchval = AsyncMock(return_value=None)
    mock.execute = AsyncMock(return_value="DELETE 1")
    mock.outcomes = []

    # Statements inside a transaction run on the same mock; each block
    # records whether it committed or rolled back.
    @asynccontextmanager
    async def transaction():
        try:
            yield mock
        except BaseException:
            mock.outcomes.append("rollback")
            raise
        else:
            mock.outcomes.append("commit")

    mock.transaction = transaction
    return mock


@pytest.fixture
def daily_store() -> InMemoryDailyRecordStore:
    return InMemoryDailyRecordStore()


@pytest.fixture
def hub() -> MagicMock:
    mock = MagicMock()
    mock.upsert_installation = AsyncMock()
    mock.delete_installation = AsyncMock()
    mock.send_to_user = AsyncMock(return_value="trk-1")
    return mock


@pytest.fixture
def client(
    db: MagicMock, daily_store: InMemoryDailyRecordStore, hub: MagicMock
) -> Iterator[TestClient]:
    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_daily_records] = lambda: daily_store
    app.dependency_overrides[get_notification_hub] = lambda: hub
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
