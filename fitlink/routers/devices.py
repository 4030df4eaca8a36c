"""CRUD endpoints for a user's IoT-connected devices."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from fitlink.dependencies import Db
from fitlink.models.devices import DeviceCreate, DeviceRead, DeviceUpdate
from fitlink.services.database import rows_affected

router = APIRouter(prefix="/users/{user_id}/devices", tags=["devices"])


@router.get("", response_model=list[DeviceRead])
async def list_devices(user_id: str, db: Db) -> Any:
    rows = await db.fetch(
        "SELECT * FROM devices WHERE user_id = $1 ORDER BY created_at DESC",
        user_id,
    )
    return [dict(r) for r in rows]


@router.post("", response_model=DeviceRead, status_code=201)
async def register_device(user_id: str, db: Db, body: DeviceCreate) -> Any:
    row = await db.fetchrow(
        """
        INSERT INTO devices (device_id, user_id, device_type, display_name, firmware_version, is_active)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING *
        """,
        body.device_id, user_id, body.device_type, body.display_name,
        body.firmware_version, body.is_active,
    )
    return dict(row)


@router.get("/{device_id}", response_model=DeviceRead)
async def get_device(user_id: str, device_id: str, db: Db) -> Any:
    row = await db.fetchrow(
        "SELECT * FROM devices WHERE device_id = $1 AND user_id = $2",
        device_id, user_id,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Device not found")
    return dict(row)


@router.patch("/{device_id}", response_model=DeviceRead)
async def update_device(user_id: str, device_id: str, db: Db, body: DeviceUpdate) -> Any:
    updates = body.changes()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    set_clauses = []
    params: list[Any] = [user_id, device_id]
    for i, (key, value) in enumerate(updates.items(), start=3):
        set_clauses.append(f"{key} = ${i}")
        params.append(value)
    set_clauses.append("updated_at = NOW()")

    row = await db.fetchrow(
        f"UPDATE devices SET {', '.join(set_clauses)} WHERE user_id = $1 AND device_id = $2 RETURNING *",
        *params,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Device not found")
    return dict(row)


@router.post("/{device_id}/heartbeat", response_model=DeviceRead)
async def device_heartbeat(user_id: str, device_id: str, db: Db) -> Any:
    """Record that the device has just reported in."""
    row = await db.fetchrow(
        """
        UPDATE devices SET last_seen_at = NOW(), updated_at = NOW()
        WHERE user_id = $1 AND device_id = $2 AND is_active = TRUE
        RETURNING *
        """,
        user_id, device_id,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Active device not found")
    return dict(row)


@router.delete("/{device_id}", status_code=204)
async def delete_device(user_id: str, device_id: str, db: Db) -> None:
    status = await db.execute(
        "DELETE FROM devices WHERE device_id = $1 AND user_id = $2",
        device_id, user_id,
    )
    if rows_affected(status) == 0:
        raise HTTPException(status_code=404, detail="Device not found")
