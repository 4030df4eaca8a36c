"""Pydantic models for logged exercise sessions."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from pydantic import Field

from fitlink.models.base import FitlinkBase, PartialUpdate, TimestampMixin


class ExerciseBase(FitlinkBase):
    exercise_date: date
    exercise_type: str = Field(min_length=1, max_length=100)
    duration_minutes: int = Field(ge=1, le=1440)
    calories_burned: Decimal | None = Field(default=None, ge=0, le=20000)
    distance_m: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseUpdate(PartialUpdate):
    required_columns = frozenset({"exercise_type", "duration_minutes"})

    exercise_type: str | None = Field(default=None, min_length=1, max_length=100)
    duration_minutes: int | None = Field(default=None, ge=1, le=1440)
    calories_burned: Decimal | None = Field(default=None, ge=0, le=20000)
    distance_m: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class ExerciseRead(ExerciseBase, TimestampMixin):
    exercise_id: uuid.UUID
    user_id: str
