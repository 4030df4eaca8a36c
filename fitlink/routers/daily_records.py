"""Daily aggregate record endpoints.

PATCH goes through the merge resolver in ``fitlink.records.merge``; its
``NotFound`` and ``StoreUnavailable`` failures are rendered by the app-wide
exception handlers.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from fitlink.dependencies import DailyRecords
from fitlink.errors import NotFound
from fitlink.models.daily_records import DailyRecordCreate, DailyRecordRead, DailyRecordUpdate
from fitlink.records.merge import merge_update

router = APIRouter(prefix="/users/{user_id}/daily-records", tags=["daily-records"])


@router.get("", response_model=list[DailyRecordRead])
async def list_daily_records(
    user_id: str,
    records: DailyRecords,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    limit: int = Query(default=30, ge=1, le=366),
) -> Any:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")
    return await records.list_for_user(
        user_id, start_date=start_date, end_date=end_date, limit=limit
    )


@router.post("", response_model=DailyRecordRead, status_code=201)
async def create_daily_record(
    user_id: str, records: DailyRecords, body: DailyRecordCreate
) -> Any:
    """Insert the record for one day. A second insert for the same day is a 409."""
    return await records.insert(user_id, body.model_dump())


@router.get("/{record_date}", response_model=DailyRecordRead)
async def get_daily_record(user_id: str, record_date: date, records: DailyRecords) -> Any:
    row = await records.fetch_by_key(user_id, record_date)
    if row is None:
        raise HTTPException(status_code=404, detail="Daily record not found")
    return row


@router.patch("/{record_date}", response_model=DailyRecordRead)
async def update_daily_record(
    user_id: str, record_date: date, records: DailyRecords, body: DailyRecordUpdate
) -> Any:
    """Merge the supplied fields into the stored record.

    Fields left out of the body keep their stored values; a supplied ``0``
    overwrites.
    """
    return await merge_update(records, user_id, record_date, body.model_dump(exclude_unset=True))


@router.delete("/{record_date}", status_code=204)
async def delete_daily_record(user_id: str, record_date: date, records: DailyRecords) -> None:
    if await records.delete_by_key(user_id, record_date) == 0:
        raise NotFound("Daily record not found")
