"""Temporal buckets for a task snapshot.

``classify`` is a pure function of ``(tasks, now)``; it never reads the clock.
Buckets are decided by the due date's calendar day against the calendar day
of ``now``. The overdue/due-today/future/no-due-date buckets partition the
collection; completion only matters for the user-facing overdue view.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from .calendar import as_day, start_of_day
from .entities import TaskEntity
from .enums import PARTITION, TaskBucket


@dataclass(frozen=True)
class Classification:
    all: tuple[TaskEntity, ...]
    overdue: tuple[TaskEntity, ...]
    due_today: tuple[TaskEntity, ...]
    future: tuple[TaskEntity, ...]
    no_due_date: tuple[TaskEntity, ...]
    due_tomorrow: tuple[TaskEntity, ...] = ()

    @property
    def outstanding_overdue(self) -> tuple[TaskEntity, ...]:
        return tuple(task for task in self.overdue if not task.is_complete)

    def bucket(self, key: TaskBucket) -> tuple[TaskEntity, ...]:
        if key == TaskBucket.ALL:
            return self.all
        if key == TaskBucket.OVERDUE:
            # Completed overdue tasks stay in "all" but leave the overdue view.
            return self.outstanding_overdue
        if key == TaskBucket.DUE_TODAY:
            return self.due_today
        if key == TaskBucket.FUTURE:
            return self.future
        if key == TaskBucket.NO_DUE_DATE:
            return self.no_due_date
        if key == TaskBucket.DUE_TOMORROW:
            return self.due_tomorrow
        raise KeyError(key)

    @property
    def counts(self) -> dict[TaskBucket, int]:
        return {key: len(self.bucket(key)) for key in TaskBucket}


def sort_key(task: TaskEntity) -> tuple:
    due = task.due_date if task.has_due_date else None
    return (
        due is None,
        as_day(due) if due is not None else date.min,
        task.created_on,
        task.id if task.id is not None else 0,
    )


def bucket_for(task: TaskEntity, today: date) -> TaskBucket:
    if not task.has_due_date or task.due_date is None:
        return TaskBucket.NO_DUE_DATE
    day = as_day(task.due_date)
    if day < today:
        return TaskBucket.OVERDUE
    if day == today:
        return TaskBucket.DUE_TODAY
    return TaskBucket.FUTURE


def classify(tasks: Iterable[TaskEntity], now: datetime) -> Classification:
    today = start_of_day(now)
    tomorrow = today + timedelta(days=1)
    ordered = tuple(sorted(tasks, key=sort_key))

    buckets: dict[TaskBucket, list[TaskEntity]] = {key: [] for key in PARTITION}
    upcoming: list[TaskEntity] = []
    for task in ordered:
        key = bucket_for(task, today)
        buckets[key].append(task)
        if key == TaskBucket.FUTURE and as_day(task.due_date) == tomorrow:
            upcoming.append(task)

    return Classification(
        all=ordered,
        overdue=tuple(buckets[TaskBucket.OVERDUE]),
        due_today=tuple(buckets[TaskBucket.DUE_TODAY]),
        future=tuple(buckets[TaskBucket.FUTURE]),
        no_due_date=tuple(buckets[TaskBucket.NO_DUE_DATE]),
        due_tomorrow=tuple(upcoming),
    )


def due_tomorrow(tasks: Iterable[TaskEntity], now: datetime) -> tuple[TaskEntity, ...]:
    return classify(tasks, now).due_tomorrow
