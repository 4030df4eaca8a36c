"""Push notification endpoints.

Installations are stored locally and mirrored to the notification hub so
the hub can target every device of a user through the ``user:{id}`` tag.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from fitlink.dependencies import Db, NotificationHub
from fitlink.models.notifications import (
    InstallationRead,
    InstallationUpsert,
    NotificationResult,
    NotificationSend,
)
from fitlink.services.database import rows_affected
from fitlink.services.notification_hub import NotificationHubClient

router = APIRouter(prefix="/users/{user_id}/notifications", tags=["notifications"])


def _require_hub(hub: NotificationHubClient | None) -> NotificationHubClient:
    if hub is None:
        raise HTTPException(status_code=503, detail="Notification hub not configured")
    return hub


@router.put("/installations/{installation_id}", response_model=InstallationRead)
async def upsert_installation(
    user_id: str,
    installation_id: str,
    db: Db,
    hub: NotificationHub,
    body: InstallationUpsert,
) -> Any:
    """Register (or re-register) a device's push channel for this user.

    The local row is only committed once the hub has accepted the
    installation.
    """
    client = _require_hub(hub)
    async with db.transaction() as conn:
        row = await conn.fetchrow(
            """
            INSERT INTO notification_installations (installation_id, user_id, platform, push_channel)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (installation_id) DO UPDATE
            SET user_id = EXCLUDED.user_id,
                platform = EXCLUDED.platform,
                push_channel = EXCLUDED.push_channel,
                updated_at = NOW()
            RETURNING *
            """,
            installation_id, user_id, body.platform, body.push_channel,
        )
        await client.upsert_installation(installation_id, user_id, body.platform, body.push_channel)
    return dict(row)


@router.delete("/installations/{installation_id}", status_code=204)
async def delete_installation(
    user_id: str, installation_id: str, db: Db, hub: NotificationHub
) -> None:
    """Remove an installation. If the hub refuses, the local row is kept so a retry can finish."""
    client = _require_hub(hub)
    async with db.transaction() as conn:
        status = await conn.execute(
            "DELETE FROM notification_installations WHERE installation_id = $1 AND user_id = $2",
            installation_id, user_id,
        )
        if rows_affected(status) == 0:
            raise HTTPException(status_code=404, detail="Installation not found")
        await client.delete_installation(installation_id)


@router.post("", response_model=NotificationResult, status_code=202)
async def send_notification(
    user_id: str, hub: NotificationHub, body: NotificationSend
) -> Any:
    """Relay a notification to every installation of the user."""
    client = _require_hub(hub)
    delivered = []
    tracking_ids = []
    for platform in dict.fromkeys(body.platforms):
        tracking_id = await client.send_to_user(
            user_id, platform, body.title, body.body, body.data
        )
        delivered.append(platform)
        if tracking_id:
            tracking_ids.append(tracking_id)
    return NotificationResult(user_id=user_id, delivered=delivered, tracking_ids=tracking_ids)
