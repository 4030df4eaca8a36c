"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from fitlink.config import Settings, get_settings
from fitlink.errors import StoreUnavailable
from fitlink.records.repository import DailyRecordRepository
from fitlink.services.database import Database
from fitlink.services.notification_hub import NotificationHubClient


def get_database(request: Request) -> Database:
    """Return the store handle created by the app lifespan."""
    db: Database | None = getattr(request.app.state, "db", None)
    if db is None:
        raise StoreUnavailable("Database not configured")
    return db


def get_daily_records(db: Annotated[Database, Depends(get_database)]) -> DailyRecordRepository:
    return DailyRecordRepository(db)


def get_notification_hub(request: Request) -> NotificationHubClient | None:
    """Return the hub client, or None when no hub is configured."""
    return getattr(request.app.state, "notification_hub", None)


# Annotated shortcuts for route signatures
Db = Annotated[Database, Depends(get_database)]
DailyRecords = Annotated[DailyRecordRepository, Depends(get_daily_records)]
NotificationHub = Annotated[NotificationHubClient | None, Depends(get_notification_hub)]
AppSettings = Annotated[Settings, Depends(get_settings)]
