"""Liveness and health endpoints. Public, outside the v1 prefix."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from fitlink.config import get_settings
from fitlink.services.database import Database

router = APIRouter(tags=["system"])
logger = logging.getLogger("fitlink.health")


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Server is running!"


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Also performs a lightweight DB connectivity check.
    """
    settings = get_settings()
    db: Database | None = getattr(request.app.state, "db", None)
    db_ok = db is not None and await db.ping()
    if not db_ok:
        logger.warning("Health check: database unreachable")

    return {
        "status": "healthy" if db_ok else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected" if db_ok else "unreachable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
