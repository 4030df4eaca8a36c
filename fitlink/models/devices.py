"""Pydantic models for IoT-connected devices."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from fitlink.models.base import FitlinkBase, PartialUpdate, TimestampMixin


class DeviceType(str, Enum):
    smartwatch = "smartwatch"
    fitness_band = "fitness_band"
    smart_scale = "smart_scale"
    heart_rate_monitor = "heart_rate_monitor"
    other = "other"


class DeviceBase(FitlinkBase):
    device_type: DeviceType = DeviceType.other
    display_name: str | None = Field(default=None, max_length=200)
    firmware_version: str | None = Field(default=None, max_length=50)
    is_active: bool = True


class DeviceCreate(DeviceBase):
    device_id: str = Field(min_length=1, max_length=128)


class DeviceUpdate(PartialUpdate):
    required_columns = frozenset({"is_active"})

    display_name: str | None = Field(default=None, max_length=200)
    firmware_version: str | None = Field(default=None, max_length=50)
    is_active: bool | None = None


class DeviceRead(DeviceBase, TimestampMixin):
    device_id: str
    user_id: str
    last_seen_at: datetime | None = None
