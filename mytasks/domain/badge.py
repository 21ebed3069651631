from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from .calendar import next_midnight
from .classifier import classify
from .entities import TaskEntity


@dataclass(frozen=True)
class BadgeProjection:
    fire_at: datetime
    count: int


def project_badge(tasks: Iterable[TaskEntity], now: datetime) -> int:
    classification = classify(tasks, now)
    pending = classification.overdue + classification.due_today
    return sum(1 for task in pending if not task.is_complete)


def project_next_midnight_badge(tasks: Iterable[TaskEntity], now: datetime) -> BadgeProjection:
    fire_at = next_midnight(now)
    return BadgeProjection(fire_at=fire_at, count=project_badge(tasks, fire_at))
