from __future__ import annotations

from enum import StrEnum


class TaskBucket(StrEnum):
    ALL = "all"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    FUTURE = "future"
    NO_DUE_DATE = "no_due_date"
    DUE_TOMORROW = "due_tomorrow"


# Mutually exclusive buckets; their union is the whole collection.
PARTITION = (
    TaskBucket.OVERDUE,
    TaskBucket.DUE_TODAY,
    TaskBucket.FUTURE,
    TaskBucket.NO_DUE_DATE,
)
