"""Pydantic models for user profiles."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import EmailStr, Field

from fitlink.models.base import FitlinkBase, PartialUpdate, TimestampMixin


class BiologicalSex(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class UserBase(FitlinkBase):
    email: EmailStr
    display_name: str = Field(min_length=1, max_length=200)
    date_of_birth: date | None = None
    sex: BiologicalSex | None = None
    height_cm: Decimal | None = Field(default=None, gt=0, le=300)
    timezone: str = "UTC"


class UserCreate(UserBase):
    user_id: str = Field(min_length=1, max_length=128)


class UserUpdate(PartialUpdate):
    required_columns = frozenset({"email", "display_name", "timezone"})

    email: EmailStr | None = None
    display_name: str | None = Field(default=None, min_length=1, max_length=200)
    date_of_birth: date | None = None
    sex: BiologicalSex | None = None
    height_cm: Decimal | None = Field(default=None, gt=0, le=300)
    timezone: str | None = None


class UserRead(UserBase, TimestampMixin):
    user_id: str
