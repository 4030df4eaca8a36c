"""CRUD endpoints for logged exercise sessions."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from fitlink.dependencies import Db
from fitlink.models.exercises import ExerciseCreate, ExerciseRead, ExerciseUpdate
from fitlink.services.database import rows_affected

router = APIRouter(prefix="/users/{user_id}/exercises", tags=["exercises"])


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    user_id: str,
    db: Db,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    exercise_type: str | None = Query(default=None),
    limit: int = Query(default=30, ge=1, le=200),
) -> Any:
    conditions = ["user_id = $1"]
    params: list[Any] = [user_id]
    idx = 2

    if start_date:
        conditions.append(f"exercise_date >= ${idx}")
        params.append(start_date)
        idx += 1
    if end_date:
        conditions.append(f"exercise_date <= ${idx}")
        params.append(end_date)
        idx += 1
    if exercise_type:
        conditions.append(f"exercise_type = ${idx}")
        params.append(exercise_type)
        idx += 1

    where = " AND ".join(conditions)
    rows = await db.fetch(
        f"SELECT * FROM exercises WHERE {where} ORDER BY exercise_date DESC, created_at DESC LIMIT ${idx}",
        *params, limit,
    )
    return [dict(r) for r in rows]


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(user_id: str, db: Db, body: ExerciseCreate) -> Any:
    row = await db.fetchrow(
        """
        INSERT INTO exercises (
            exercise_id, user_id, exercise_date, exercise_type,
            duration_minutes, calories_burned, distance_m, notes
        ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        RETURNING *
        """,
        uuid.uuid4(), user_id,
        body.exercise_date, body.exercise_type, body.duration_minutes,
        body.calories_burned, body.distance_m, body.notes,
    )
    return dict(row)


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(user_id: str, exercise_id: uuid.UUID, db: Db) -> Any:
    row = await db.fetchrow(
        "SELECT * FROM exercises WHERE exercise_id = $1 AND user_id = $2",
        exercise_id, user_id,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return dict(row)


@router.patch("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    user_id: str, exercise_id: uuid.UUID, db: Db, body: ExerciseUpdate
) -> Any:
    updates = body.changes()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    set_clauses = []
    params: list[Any] = [exercise_id, user_id]
    for i, (key, value) in enumerate(updates.items(), start=3):
        set_clauses.append(f"{key} = ${i}")
        params.append(value)
    set_clauses.append("updated_at = NOW()")

    row = await db.fetchrow(
        f"""
        UPDATE exercises SET {', '.join(set_clauses)}
        WHERE exercise_id = $1 AND user_id = $2
        RETURNING *
        """,
        *params,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return dict(row)


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(user_id: str, exercise_id: uuid.UUID, db: Db) -> None:
    status = await db.execute(
        "DELETE FROM exercises WHERE exercise_id = $1 AND user_id = $2",
        exercise_id, user_id,
    )
    if rows_affected(status) == 0:
        raise HTTPException(status_code=404, detail="Exercise not found")
