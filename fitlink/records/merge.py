"""Partial-update merge for daily records.

A PATCH on a daily record carries any subset of the four aggregate fields.
The merged record takes each field from the payload when the caller sent it
and from the stored row otherwise. Presence is the discriminator, not
truthiness: ``{"total_steps": 0}`` overwrites a stored 500 with 0.

The read and the write run in one transaction and the read takes a row lock
(``SELECT ... FOR UPDATE``). A second merge on the same key waits for the
first to commit and then merges on top of its result, so neither update is
lost.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

from fitlink.errors import NotFound
from fitlink.models.base import utc_now
from fitlink.records.repository import RECORD_COLUMNS, DailyRecordStore

logger = logging.getLogger("fitlink.records.merge")

MERGE_FIELDS: tuple[str, ...] = RECORD_COLUMNS


def merge_fields(current: Mapping[str, Any], partial: Mapping[str, Any]) -> dict[str, Any]:
    """Return the merged values of ``MERGE_FIELDS``.

    A field is taken from ``partial`` when its key is present with a non-None
    value, including falsy values such as ``0``. Otherwise the value in
    ``current`` is kept. Keys outside ``MERGE_FIELDS`` are ignored.
    """
    merged: dict[str, Any] = {}
    for field in MERGE_FIELDS:
        if field in partial and partial[field] is not None:
            merged[field] = partial[field]
        else:
            merged[field] = current.get(field)
    return merged


def _not_found(user_id: str, record_date: date) -> NotFound:
    return NotFound(f"Daily record not found for user {user_id} on {record_date.isoformat()}")


async def merge_update(
    store: DailyRecordStore,
    user_id: str,
    record_date: date,
    partial: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge ``partial`` into the stored record for (user_id, record_date).

    Performs exactly one read and, when the record exists, one write.

    Returns:
        The full record as persisted after the merge.

    Raises:
        NotFound:         No record exists for the key, or the update
                          affected zero rows.
        StoreUnavailable: The database failed; propagated without retry.
    """
    async with store.transaction() as conn:
        current = await store.fetch_by_key(user_id, record_date, conn=conn, for_update=True)
        if current is None:
            raise _not_found(user_id, record_date)

        merged = merge_fields(current, partial)
        updated_at = utc_now()
        affected = await store.update_by_key(
            user_id, record_date, {**merged, "updated_at": updated_at}, conn=conn
        )
        if affected == 0:
            logger.warning(
                "Daily record %s/%s vanished between read and write",
                user_id,
                record_date,
            )
            raise _not_found(user_id, record_date)

    logger.debug(
        "Merged fields %s into daily record %s/%s",
        sorted(k for k in partial if k in MERGE_FIELDS),
        user_id,
        record_date,
    )
    return {**current, **merged, "updated_at": updated_at}
