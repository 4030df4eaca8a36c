"""Daily aggregate records and their partial-update merge.

Core modules:
    repository: read/write contracts against the daily_records table
    merge:      presence-based merge of a partial update into a stored record
"""

from fitlink.records.merge import MERGE_FIELDS, merge_fields, merge_update
from fitlink.records.repository import DailyRecordRepository, DailyRecordStore

__all__ = [
    "MERGE_FIELDS",
    "merge_fields",
    "merge_update",
    "DailyRecordRepository",
    "DailyRecordStore",
]
