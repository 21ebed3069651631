from __future__ import annotations

from dataclasses import dataclass

from .enums import TaskBucket


@dataclass(frozen=True)
class TaskFilters:
    filter_key: TaskBucket = TaskBucket.ALL
    search: str | None = None
