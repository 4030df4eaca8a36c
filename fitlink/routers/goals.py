"""CRUD endpoints for fitness goals."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from fitlink.dependencies import Db
from fitlink.models.goals import GoalCreate, GoalRead, GoalUpdate
from fitlink.services.database import rows_affected

router = APIRouter(prefix="/users/{user_id}/goals", tags=["goals"])


@router.get("", response_model=list[GoalRead])
async def list_goals(
    user_id: str,
    db: Db,
    active_only: bool = Query(default=True),
) -> Any:
    if active_only:
        rows = await db.fetch(
            "SELECT * FROM goals WHERE user_id = $1 AND is_active = TRUE ORDER BY created_at DESC",
            user_id,
        )
    else:
        rows = await db.fetch(
            "SELECT * FROM goals WHERE user_id = $1 ORDER BY created_at DESC",
            user_id,
        )
    return [dict(r) for r in rows]


@router.post("", response_model=GoalRead, status_code=201)
async def create_goal(user_id: str, db: Db, body: GoalCreate) -> Any:
    row = await db.fetchrow(
        """
        INSERT INTO goals (
            goal_id, user_id, goal_type, target_value, period,
            start_date, end_date, is_active
        ) VALUES (gen_random_uuid(), $1, $2, $3, $4, $5, $6, $7)
        RETURNING *
        """,
        user_id,
        body.goal_type, body.target_value, body.period,
        body.start_date, body.end_date, body.is_active,
    )
    return dict(row)


@router.get("/{goal_id}", response_model=GoalRead)
async def get_goal(user_id: str, goal_id: uuid.UUID, db: Db) -> Any:
    row = await db.fetchrow(
        "SELECT * FROM goals WHERE goal_id = $1 AND user_id = $2",
        goal_id, user_id,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Goal not found")
    return dict(row)


@router.patch("/{goal_id}", response_model=GoalRead)
async def update_goal(
    user_id: str, goal_id: uuid.UUID, db: Db, body: GoalUpdate
) -> Any:
    updates = body.changes()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    set_clauses = []
    params: list[Any] = [goal_id, user_id]
    for i, (key, value) in enumerate(updates.items(), start=3):
        set_clauses.append(f"{key} = ${i}")
        params.append(value)
    set_clauses.append("updated_at = NOW()")

    row = await db.fetchrow(
        f"UPDATE goals SET {', '.join(set_clauses)} WHERE goal_id = $1 AND user_id = $2 RETURNING *",
        *params,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Goal not found")
    return dict(row)


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(user_id: str, goal_id: uuid.UUID, db: Db) -> None:
    status = await db.execute(
        "DELETE FROM goals WHERE goal_id = $1 AND user_id = $2",
        goal_id, user_id,
    )
    if rows_affected(status) == 0:
        raise HTTPException(status_code=404, detail="Goal not found")
