"""Fitlink API: FastAPI application entry point.

Run locally:
    uvicorn fitlink.main:app --reload --port 3000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitlink.config import get_settings
from fitlink.errors import register_exception_handlers
from fitlink.routers import (
    daily_records,
    devices,
    exercises,
    goals,
    health,
    locations,
    notifications,
    users,
)
from fitlink.services.database import Database
from fitlink.services.notification_hub import NotificationHubClient

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("fitlink")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks.

    The store handle and the hub's HTTP client are created here and hung on
    ``app.state`` for the dependencies in ``fitlink.dependencies``.
    """
    settings = get_settings()
    logger.info(
        "Starting Fitlink API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    db = Database(settings)
    await db.connect()
    app.state.db = db

    http_client: httpx.AsyncClient | None = None
    if settings.notifications_enabled:
        http_client = httpx.AsyncClient(timeout=settings.notification_timeout_seconds)
        app.state.notification_hub = NotificationHubClient.from_settings(
            settings, http_client=http_client
        )
    else:
        logger.info("Notification hub not configured; push endpoints disabled")

    try:
        yield
    finally:
        if http_client is not None:
            await http_client.aclose()
        await db.close()
        logger.info("Fitlink API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Fitlink API",
        description=(
            "Fitness tracking backend: user profiles, connected devices, goals, "
            "exercises, daily records, location activity and push notifications."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ---------- Liveness (outside v1 prefix) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(users.router, prefix=v1_prefix)
    app.include_router(devices.router, prefix=v1_prefix)
    app.include_router(goals.router, prefix=v1_prefix)
    app.include_router(exercises.router, prefix=v1_prefix)
    app.include_router(daily_records.router, prefix=v1_prefix)
    app.include_router(locations.router, prefix=v1_prefix)
    app.include_router(notifications.router, prefix=v1_prefix)

    return app


app = create_app()
