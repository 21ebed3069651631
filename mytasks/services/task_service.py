from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Iterable

from mytasks.domain.classifier import Classification, classify
from mytasks.domain.due_dates import apply_due_date_toggle, apply_due_date_value
from mytasks.domain.entities import TaskEntity
from mytasks.domain.enums import TaskBucket
from mytasks.domain.errors import StoreError, ValidationError
from mytasks.domain.filters import TaskFilters
from mytasks.infra.repository import TaskRepository

from .badge_scheduler import BadgeScheduler

logger = logging.getLogger(__name__)

TASK_FIELDS = {"title", "notes", "is_complete", "has_due_date", "due_date"}


def search_tasks(tasks: Iterable[TaskEntity], search: str | None) -> list[TaskEntity]:
    needle = (search or "").strip().lower()
    if not needle:
        return list(tasks)
    return [
        task for task in tasks
        if needle in task.title.lower() or needle in (task.notes or "").lower()
    ]


class TaskService:
    def __init__(
        self,
        repo: TaskRepository,
        badges: BadgeScheduler | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repo = repo
        self._badges = badges
        self._clock = clock

    def classify(self) -> Classification:
        return classify(self._repo.load_all(), self._clock())

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        return search_tasks(self.classify().bucket(filters.filter_key), filters.search)

    def get_counts(self) -> dict[TaskBucket, int]:
        return self.classify().counts

    def get_task(self, task_id: int) -> TaskEntity | None:
        return self._repo.get_task(task_id)

    def create_task(self, data: dict) -> TaskEntity:
        now = self._clock()
        draft = TaskEntity(
            id=None,
            title="",
            notes=None,
            created_on=now,
            has_due_date=False,
            due_date=None,
            is_complete=False,
        )
        task = self._repo.save(self._apply_data(draft, data, now))
        logger.info("Created task %s", task.id)
        self._after_commit()
        return task

    def update_task(self, task_id: int, data: dict) -> TaskEntity | None:
        return self._mutate(task_id, lambda task, now: self._apply_data(task, data, now))

    def set_due_date_enabled(self, task_id: int, enabled: bool) -> TaskEntity | None:
        return self._mutate(task_id, lambda task, now: apply_due_date_toggle(task, enabled, now))

    def set_due_date(self, task_id: int, value: date | datetime) -> TaskEntity | None:
        return self._mutate(task_id, lambda task, now: apply_due_date_value(task, value))

    def toggle_complete(self, task_id: int) -> TaskEntity | None:
        return self._mutate(task_id, lambda task, now: replace(task, is_complete=not task.is_complete))

    def delete_task(self, task_id: int) -> bool:
        deleted = self._repo.delete_task(task_id)
        if deleted:
            logger.info("Deleted task %s", task_id)
            self._after_commit()
        return deleted

    def delete_all(self) -> int:
        deleted = self._repo.delete_all()
        logger.info("Deleted all tasks (%s)", deleted)
        self._after_commit()
        return deleted

    def refresh_badge(self) -> bool:
        if self._badges is None:
            return False
        try:
            tasks = self._repo.load_all()
        except StoreError:
            logger.exception("Cannot reload tasks for the badge")
            return False
        return self._badges.publish(tasks, self._clock())

    def _mutate(self, task_id: int, change) -> TaskEntity | None:
        task = self._repo.get_task(task_id)
        if not task:
            return None
        updated = change(task, self._clock())
        if updated == task:
            return task
        saved = self._repo.save(updated)
        logger.info("Updated task %s", saved.id)
        self._after_commit()
        return saved

    def _after_commit(self) -> None:
        # Always recompute from the post-commit snapshot.
        self.refresh_badge()

    def _apply_data(self, task: TaskEntity, data: dict, now: datetime) -> TaskEntity:
        normalized = self._normalize_data(data)
        changes = {key: normalized[key] for key in ("title", "notes", "is_complete") if key in normalized}
        if changes:
            task = replace(task, **changes)
        if "has_due_date" in normalized:
            task = apply_due_date_toggle(task, normalized["has_due_date"], now)
        if normalized.get("due_date") is not None:
            task = apply_due_date_value(task, normalized["due_date"])
        return task

    def _normalize_data(self, data: dict) -> dict:
        unknown = set(data) - TASK_FIELDS
        if unknown:
            raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")
        normalized = dict(data)
        if "title" in normalized:
            normalized["title"] = (normalized["title"] or "").strip()
        if "notes" in normalized:
            notes = normalized["notes"] or ""
            normalized["notes"] = notes if notes.strip() else None
        for key in ("is_complete", "has_due_date"):
            if key in normalized:
                normalized[key] = bool(normalized[key])
        return normalized
