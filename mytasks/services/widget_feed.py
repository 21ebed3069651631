from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable

from mytasks.domain.calendar import as_day, start_of_day
from mytasks.domain.classifier import classify
from mytasks.domain.entities import TaskEntity, WidgetItem
from mytasks.domain.errors import StoreError
from mytasks.infra.repository import TaskRepository

logger = logging.getLogger(__name__)


def build_widget_items(tasks: Iterable[TaskEntity], now: datetime) -> list[WidgetItem]:
    classification = classify(tasks, now)
    pending = [task for task in classification.overdue + classification.due_today if not task.is_complete]
    pending.sort(key=lambda task: as_day(task.due_date))
    today = start_of_day(now)
    return [
        WidgetItem(title=task.title, due_date=as_day(task.due_date), is_overdue=as_day(task.due_date) < today)
        for task in pending
    ]


class WidgetFeed:
    """Read-only view of the store for the home-screen widget.

    Every call goes back to the store; nothing is cached between refreshes
    because the primary app writes from another process.
    """

    def __init__(self, repo: TaskRepository, clock: Callable[[], datetime] = datetime.now) -> None:
        self._repo = repo
        self._clock = clock

    def load(self) -> list[WidgetItem]:
        try:
            tasks = self._repo.load_all()
        except StoreError as exc:
            logger.warning("Widget could not read tasks: %s", exc)
            return []
        items = build_widget_items(tasks, self._clock())
        logger.debug("Widget fetched %d tasks", len(items))
        return items
