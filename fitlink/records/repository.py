"""Persistence for daily records keyed by (user_id, record_date).

``DailyRecordStore`` is the contract the merge resolver depends on; the
asyncpg-backed ``DailyRecordRepository`` is the production implementation.
Methods that take ``conn`` run on that connection (and therefore inside the
caller's transaction) when one is passed, and borrow a pooled connection
otherwise.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from datetime import date
from typing import Any, Protocol

import asyncpg

from fitlink.services.database import Database, rows_affected

# Columns a merge may touch, in table order.
RECORD_COLUMNS: tuple[str, ...] = (
    "total_steps",
    "total_calories_burned",
    "exercise_duration_minutes",
    "weight",
)


class DailyRecordStore(Protocol):
    """Read and write contracts consumed by ``merge_update``."""

    def transaction(self) -> AbstractAsyncContextManager[Any]: ...

    async def fetch_by_key(
        self,
        user_id: str,
        record_date: date,
        *,
        conn: Any = None,
        for_update: bool = False,
    ) -> dict[str, Any] | None: ...

    async def update_by_key(
        self,
        user_id: str,
        record_date: date,
        fields: dict[str, Any],
        *,
        conn: Any = None,
    ) -> int: ...


class DailyRecordRepository:
    """asyncpg implementation of the daily record store."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def transaction(self) -> AbstractAsyncContextManager[asyncpg.Connection]:
        return self._db.transaction()

    async def insert(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a new record. Raises ``Conflict`` if the key already exists."""
        row = await self._db.fetchrow(
            """
            INSERT INTO daily_records (
                user_id, record_date, total_steps, total_calories_burned,
                exercise_duration_minutes, weight
            ) VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
            """,
            user_id,
            data["record_date"],
            data.get("total_steps", 0),
            data.get("total_calories_burned", 0),
            data.get("exercise_duration_minutes", 0),
            data.get("weight"),
        )
        return dict(row)

    async def fetch_by_key(
        self,
        user_id: str,
        record_date: date,
        *,
        conn: asyncpg.Connection | None = None,
        for_update: bool = False,
    ) -> dict[str, Any] | None:
        query = "SELECT * FROM daily_records WHERE user_id = $1 AND record_date = $2"
        if for_update:
            query += " FOR UPDATE"
        if conn is not None:
            row = await conn.fetchrow(query, user_id, record_date)
        else:
            row = await self._db.fetchrow(query, user_id, record_date)
        return dict(row) if row else None

    async def update_by_key(
        self,
        user_id: str,
        record_date: date,
        fields: dict[str, Any],
        *,
        conn: asyncpg.Connection | None = None,
    ) -> int:
        """Write ``fields`` to the row and return the number of rows affected."""
        unknown = set(fields) - set(RECORD_COLUMNS) - {"updated_at"}
        if unknown:
            raise ValueError(f"Unknown daily record columns: {sorted(unknown)}")
        if not fields:
            return 0

        set_clauses = []
        params: list[Any] = [user_id, record_date]
        for i, (key, value) in enumerate(fields.items(), start=3):
            set_clauses.append(f"{key} = ${i}")
            params.append(value)
        if "updated_at" not in fields:
            set_clauses.append("updated_at = NOW()")

        query = (
            f"UPDATE daily_records SET {', '.join(set_clauses)} "
            "WHERE user_id = $1 AND record_date = $2"
        )
        if conn is not None:
            status = await conn.execute(query, *params)
        else:
            status = await self._db.execute(query, *params)
        return rows_affected(status)

    async def delete_by_key(self, user_id: str, record_date: date) -> int:
        status = await self._db.execute(
            "DELETE FROM daily_records WHERE user_id = $1 AND record_date = $2",
            user_id, record_date,
        )
        return rows_affected(status)

    async def list_for_user(
        self,
        user_id: str,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 30,
    ) -> list[dict[str, Any]]:
        conditions = ["user_id = $1"]
        params: list[Any] = [user_id]
        idx = 2

        if start_date:
            conditions.append(f"record_date >= ${idx}")
            params.append(start_date)
            idx += 1
        if end_date:
            conditions.append(f"record_date <= ${idx}")
            params.append(end_date)
            idx += 1

        where = " AND ".join(conditions)
        rows = await self._db.fetch(
            f"SELECT * FROM daily_records WHERE {where} ORDER BY record_date DESC LIMIT ${idx}",
            *params, limit,
        )
        return [dict(r) for r in rows]
