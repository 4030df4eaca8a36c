"""Location activity endpoints. Points are append-only."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from fitlink.dependencies import Db
from fitlink.models.locations import LocationActivityCreate, LocationActivityRead
from fitlink.services.database import rows_affected

router = APIRouter(prefix="/users/{user_id}/locations", tags=["locations"])


@router.get("", response_model=list[LocationActivityRead])
async def list_locations(
    user_id: str,
    db: Db,
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    activity_type: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
) -> Any:
    if start and end and start >= end:
        raise HTTPException(status_code=400, detail="start must be before end")

    conditions = ["user_id = $1"]
    params: list[Any] = [user_id]
    idx = 2

    if start:
        conditions.append(f"recorded_at >= ${idx}")
        params.append(start)
        idx += 1
    if end:
        conditions.append(f"recorded_at < ${idx}")
        params.append(end)
        idx += 1
    if activity_type:
        conditions.append(f"activity_type = ${idx}")
        params.append(activity_type)
        idx += 1

    where = " AND ".join(conditions)
    rows = await db.fetch(
        f"SELECT * FROM location_activities WHERE {where} ORDER BY recorded_at DESC LIMIT ${idx}",
        *params, limit,
    )
    return [dict(r) for r in rows]


@router.post("", response_model=LocationActivityRead, status_code=201)
async def record_location(user_id: str, db: Db, body: LocationActivityCreate) -> Any:
    row = await db.fetchrow(
        """
        INSERT INTO location_activities (
            activity_id, user_id, recorded_at, latitude, longitude,
            altitude_m, accuracy_m, activity_type
        ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        RETURNING *
        """,
        uuid.uuid4(), user_id,
        body.recorded_at, body.latitude, body.longitude,
        body.altitude_m, body.accuracy_m, body.activity_type,
    )
    return dict(row)


@router.get("/{activity_id}", response_model=LocationActivityRead)
async def get_location(user_id: str, activity_id: uuid.UUID, db: Db) -> Any:
    row = await db.fetchrow(
        "SELECT * FROM location_activities WHERE activity_id = $1 AND user_id = $2",
        activity_id, user_id,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Location activity not found")
    return dict(row)


@router.delete("/{activity_id}", status_code=204)
async def delete_location(user_id: str, activity_id: uuid.UUID, db: Db) -> None:
    status = await db.execute(
        "DELETE FROM location_activities WHERE activity_id = $1 AND user_id = $2",
        activity_id, user_id,
    )
    if rows_affected(status) == 0:
        raise HTTPException(status_code=404, detail="Location activity not found")
