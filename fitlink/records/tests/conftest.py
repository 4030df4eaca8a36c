"""Shared fixtures for daily record tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from fitlink.records.tests.fakes import InMemoryDailyRecordStore

USER_ID = "A"
RECORD_DATE = date(2024, 1, 1)


@pytest.fixture
def store() -> InMemoryDailyRecordStore:
    return InMemoryDailyRecordStore()


@pytest.fixture
def seeded_store(store: InMemoryDailyRecordStore) -> InMemoryDailyRecordStore:
    """Store holding the reference record for user A on 2024-01-01."""
    store.seed(
        USER_ID,
        RECORD_DATE,
        total_steps=500,
        total_calories_burned=Decimal("200.0"),
        exercise_duration_minutes=30,
        weight=Decimal("70.0"),
    )
    return store
