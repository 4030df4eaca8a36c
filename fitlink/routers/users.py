"""User profile endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from fitlink.dependencies import Db
from fitlink.models.users import UserCreate, UserRead, UserUpdate
from fitlink.services.database import rows_affected

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=201)
async def create_user(db: Db, body: UserCreate) -> Any:
    """Create a user profile. The caller supplies the user id."""
    row = await db.fetchrow(
        """
        INSERT INTO users (user_id, email, display_name, date_of_birth, sex, height_cm, timezone)
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        RETURNING *
        """,
        body.user_id, body.email.lower(), body.display_name, body.date_of_birth,
        body.sex, body.height_cm, body.timezone,
    )
    return dict(row)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str, db: Db) -> Any:
    row = await db.fetchrow("SELECT * FROM users WHERE user_id = $1", user_id)
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return dict(row)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(user_id: str, db: Db, body: UserUpdate) -> Any:
    """Update only the profile fields present in the request body."""
    updates = body.changes()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    if updates.get("email"):
        updates["email"] = updates["email"].lower()

    set_clauses = []
    params: list[Any] = [user_id]
    for i, (key, value) in enumerate(updates.items(), start=2):
        set_clauses.append(f"{key} = ${i}")
        params.append(value)
    set_clauses.append("updated_at = NOW()")

    row = await db.fetchrow(
        f"UPDATE users SET {', '.join(set_clauses)} WHERE user_id = $1 RETURNING *",
        *params,
    )
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return dict(row)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, db: Db) -> None:
    """Delete a user; owned rows go with it via ON DELETE CASCADE."""
    status = await db.execute("DELETE FROM users WHERE user_id = $1", user_id)
    if rows_affected(status) == 0:
        raise HTTPException(status_code=404, detail="User not found")
