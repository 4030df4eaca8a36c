"""Pydantic models for push notification installations and sends."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from fitlink.models.base import FitlinkBase, TimestampMixin


class PushPlatform(str, Enum):
    apns = "apns"
    fcm = "fcm"


class InstallationUpsert(FitlinkBase):
    platform: PushPlatform
    push_channel: str = Field(min_length=1)


class InstallationRead(InstallationUpsert, TimestampMixin):
    installation_id: str
    user_id: str


class NotificationSend(FitlinkBase):
    title: str = Field(min_length=1, max_length=200)
    body: str = Field(min_length=1, max_length=2000)
    data: dict[str, Any] = Field(default_factory=dict)
    platforms: list[PushPlatform] = Field(
        default_factory=lambda: [PushPlatform.apns, PushPlatform.fcm]
    )


class NotificationResult(FitlinkBase):
    user_id: str
    delivered: list[PushPlatform]
    tracking_ids: list[str] = Field(default_factory=list)
