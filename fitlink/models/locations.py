"""Pydantic models for location activity points."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field

from fitlink.models.base import FitlinkBase, utc_now


class LocationActivityBase(FitlinkBase):
    recorded_at: datetime
    latitude: Decimal = Field(ge=-90, le=90)
    longitude: Decimal = Field(ge=-180, le=180)
    altitude_m: Decimal | None = None
    accuracy_m: Decimal | None = Field(default=None, ge=0)
    activity_type: str | None = Field(default=None, max_length=50)


class LocationActivityCreate(LocationActivityBase):
    pass


class LocationActivityRead(LocationActivityBase):
    activity_id: uuid.UUID
    user_id: str
    created_at: datetime = Field(default_factory=utc_now)
