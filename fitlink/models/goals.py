"""Pydantic models for fitness goals."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import Field, model_validator

from fitlink.models.base import FitlinkBase, PartialUpdate, TimestampMixin


# ---------- Enums ----------

class GoalType(str, Enum):
    steps = "steps"
    calories = "calories"
    exercise_minutes = "exercise_minutes"
    weight = "weight"


class GoalPeriod(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


# ---------- Goals ----------

class GoalBase(FitlinkBase):
    goal_type: GoalType
    target_value: Decimal = Field(gt=0)
    period: GoalPeriod = GoalPeriod.daily
    start_date: date
    end_date: date | None = None
    is_active: bool = True

    @model_validator(mode="after")
    def _check_dates(self) -> GoalBase:
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class GoalCreate(GoalBase):
    pass


class GoalUpdate(PartialUpdate):
    required_columns = frozenset({"target_value", "period", "is_active"})

    target_value: Decimal | None = Field(default=None, gt=0)
    period: GoalPeriod | None = None
    end_date: date | None = None
    is_active: bool | None = None


class GoalRead(GoalBase, TimestampMixin):
    goal_id: uuid.UUID
    user_id: str
