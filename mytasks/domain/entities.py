from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class TaskEntity:
    id: int | None
    title: str
    notes: Optional[str]
    created_on: datetime
    has_due_date: bool
    due_date: Optional[date]
    is_complete: bool


@dataclass(frozen=True)
class WidgetItem:
    title: str
    due_date: date
    is_overdue: bool
