"""Tests for the asyncpg-backed daily record repository (driver mocked)."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from fitlink.records.repository import DailyRecordRepository

USER_ID = "user_1"
DAY = date(2024, 3, 5)


@pytest.fixture
def db() -> MagicMock:
    mock = MagicMock()
    mock.fetch = AsyncMock(return_value=[])
    mock.fetchrow = AsyncMock(return_value=None)
    mock.execute = AsyncMock(return_value="UPDATE 1")
    return mock


@pytest.fixture
def repo(db: MagicMock) -> DailyRecordRepository:
    return DailyRecordRepository(db)


class TestFetchByKey:
    @pytest.mark.asyncio
    async def test_missing_returns_none(self, repo: DailyRecordRepository, db: MagicMock) -> None:
        assert await repo.fetch_by_key(USER_ID, DAY) is None
        db.fetchrow.assert_awaited_once()
        query, *args = db.fetchrow.await_args.args
        assert "FOR UPDATE" not in query
        assert args == [USER_ID, DAY]

    @pytest.mark.asyncio
    async def test_for_update_uses_given_connection(
        self, repo: DailyRecordRepository, db: MagicMock
    ) -> None:
        conn = MagicMock()
        conn.fetchrow = AsyncMock(return_value={"user_id": USER_ID, "record_date": DAY})
        row = await repo.fetch_by_key(USER_ID, DAY, conn=conn, for_update=True)
        assert row == {"user_id": USER_ID, "record_date": DAY}
        query = conn.fetchrow.await_args.args[0]
        assert query.rstrip().endswith("FOR UPDATE")
        db.fetchrow.assert_not_awaited()


class TestUpdateByKey:
    @pytest.mark.asyncio
    async def test_builds_set_clause_and_counts_rows(
        self, repo: DailyRecordRepository, db: MagicMock
    ) -> None:
        affected = await repo.update_by_key(
            USER_ID, DAY, {"total_steps": 0, "weight": Decimal("70.5")}
        )
        assert affected == 1
        query, *args = db.execute.await_args.args
        assert "total_steps = $3" in query
        assert "weight = $4" in query
        assert "updated_at = NOW()" in query
        assert args == [USER_ID, DAY, 0, Decimal("70.5")]

    @pytest.mark.asyncio
    async def test_zero_rows(self, repo: DailyRecordRepository, db: MagicMock) -> None:
        db.execute.return_value = "UPDATE 0"
        assert await repo.update_by_key(USER_ID, DAY, {"total_steps": 1}) == 0

    @pytest.mark.asyncio
    async def test_rejects_unknown_columns(self, repo: DailyRecordRepository) -> None:
        with pytest.raises(ValueError, match="user_id"):
            await repo.update_by_key(USER_ID, DAY, {"user_id": "other"})

    @pytest.mark.asyncio
    async def test_explicit_updated_at_is_bound(
        self, repo: DailyRecordRepository, db: MagicMock
    ) -> None:
        conn = MagicMock()
        conn.execute = AsyncMock(return_value="UPDATE 1")
        stamp = object()
        await repo.update_by_key(USER_ID, DAY, {"total_steps": 3, "updated_at": stamp}, conn=conn)
        query, *args = conn.execute.await_args.args
        assert "NOW()" not in query
        assert args[-1] is stamp
        db.execute.assert_not_awaited()


class TestInsertListDelete:
    @pytest.mark.asyncio
    async def test_insert_defaults(self, repo: DailyRecordRepository, db: MagicMock) -> None:
        db.fetchrow.return_value = {"user_id": USER_ID, "record_date": DAY}
        await repo.insert(USER_ID, {"record_date": DAY, "total_steps": 10})
        _, *args = db.fetchrow.await_args.args
        assert args == [USER_ID, DAY, 10, 0, 0, None]

    @pytest.mark.asyncio
    async def test_list_with_range(self, repo: DailyRecordRepository, db: MagicMock) -> None:
        await repo.list_for_user(
            USER_ID, start_date=date(2024, 3, 1), end_date=date(2024, 3, 31), limit=7
        )
        query, *args = db.fetch.await_args.args
        assert "record_date >= $2" in query
        assert "record_date <= $3" in query
        assert query.endswith("LIMIT $4")
        assert args == [USER_ID, date(2024, 3, 1), date(2024, 3, 31), 7]

    @pytest.mark.asyncio
    async def test_delete_counts_rows(self, repo: DailyRecordRepository, db: MagicMock) -> None:
        db.execute.return_value = "DELETE 0"
        assert await repo.delete_by_key(USER_ID, DAY) == 0


class TestInsertThenFetch:
    @pytest.mark.asyncio
    async def test_row_written_by_insert_is_read_back(
        self, repo: DailyRecordRepository, db: MagicMock
    ) -> None:
        # A one-table stand-in for Postgres: INSERT stores the bound values,
        # SELECT returns them by key.
        table: dict[tuple, dict] = {}

        async def fetchrow(query: str, *args):
            if query.lstrip().startswith("INSERT"):
                user_id, record_date, steps, calories, minutes, weight = args
                table[(user_id, record_date)] = {
                    "user_id": user_id,
                    "record_date": record_date,
                    "total_steps": steps,
                    "total_calories_burned": calories,
                    "exercise_duration_minutes": minutes,
                    "weight": weight,
                }
                return table[(user_id, record_date)]
            return table.get(tuple(args))

        db.fetchrow.side_effect = fetchrow
        data = {
            "record_date": DAY,
            "total_steps": 8421,
            "total_calories_burned": Decimal("312.75"),
            "exercise_duration_minutes": 41,
            "weight": Decimal("71.3"),
        }
        inserted = await repo.insert(USER_ID, data)
        fetched = await repo.fetch_by_key(USER_ID, DAY)

        assert fetched == inserted
        assert {k: fetched[k] for k in data} == data
        assert await repo.fetch_by_key(USER_ID, date(2024, 3, 6)) is None
