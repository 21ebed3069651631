"""Keeps ``has_due_date`` and ``due_date`` in step on every mutation.

The flag answers "does this task have a deadline", the date answers "which
day". Both are only ever changed through the functions below, each of which
returns a task whose pair is valid:

* flag off  -> no date
* flag on   -> a date (today when none was given)

Setting a date while the flag is off does not turn the flag on.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from .calendar import as_day, start_of_day
from .entities import TaskEntity
from .errors import ValidationError


def resolve_due_date(
    has_due_date: bool,
    due_date: Optional[date | datetime],
    now: datetime,
) -> tuple[bool, Optional[date]]:
    if not has_due_date:
        return False, None
    if due_date is None:
        return True, start_of_day(now)
    return True, as_day(due_date)


def apply_due_date_toggle(task: TaskEntity, has_due_date: bool, now: datetime) -> TaskEntity:
    flag, day = resolve_due_date(has_due_date, task.due_date, now)
    if flag == task.has_due_date and day == task.due_date:
        return task
    return replace(task, has_due_date=flag, due_date=day)


def apply_due_date_value(task: TaskEntity, new_date: date | datetime) -> TaskEntity:
    if not task.has_due_date:
        return task
    day = as_day(new_date)
    if day == task.due_date:
        return task
    return replace(task, due_date=day)


def validate_due_date(task: TaskEntity) -> None:
    if task.has_due_date and task.due_date is None:
        raise ValidationError(f"Task {task.title!r} is marked as having a due date but has none")
    if not task.has_due_date and task.due_date is not None:
        raise ValidationError(f"Task {task.title!r} has a due date but is marked as having none")
