"""Pydantic models for daily aggregate records."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import Field

from fitlink.models.base import FitlinkBase, TimestampMixin


class DailyRecordBase(FitlinkBase):
    total_steps: int = Field(default=0, ge=0, le=200000)
    total_calories_burned: Decimal = Field(default=Decimal("0"), ge=0, le=50000, decimal_places=2)
    exercise_duration_minutes: int = Field(default=0, ge=0, le=1440)
    weight: Decimal | None = Field(default=None, gt=0, le=1000, decimal_places=2)


class DailyRecordCreate(DailyRecordBase):
    record_date: date


class DailyRecordUpdate(FitlinkBase):
    """Partial update. Only the fields the caller sends are merged."""

    total_steps: int | None = Field(default=None, ge=0, le=200000)
    total_calories_burned: Decimal | None = Field(default=None, ge=0, le=50000, decimal_places=2)
    exercise_duration_minutes: int | None = Field(default=None, ge=0, le=1440)
    weight: Decimal | None = Field(default=None, gt=0, le=1000, decimal_places=2)


class DailyRecordRead(DailyRecordBase, TimestampMixin):
    user_id: str
    record_date: date
