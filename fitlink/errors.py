"""Typed failures raised below the HTTP layer.

Routers and the merge resolver raise these; ``register_exception_handlers``
maps each one to a status code and a ``{"detail": ...}`` body.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("fitlink.errors")


class FitlinkError(Exception):
    """Base class for all Fitlink failures."""

    status_code: int = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFound(FitlinkError):
    """No row matches the requested key (or it vanished before the write)."""

    status_code = 404


class Conflict(FitlinkError):
    """A row with the same unique key already exists."""

    status_code = 409


class InvalidData(FitlinkError):
    """The database refused a value: a required column set to null, or data out of range."""

    status_code = 422


class StoreUnavailable(FitlinkError):
    """The database could not be reached or the statement failed."""

    status_code = 503


class NotificationDeliveryError(FitlinkError):
    """The notification hub rejected the request or could not be reached."""

    status_code = 502


async def _fitlink_error_handler(request: Request, exc: FitlinkError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FitlinkError, _fitlink_error_handler)  # type: ignore[arg-type]
