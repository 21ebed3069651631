from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from mytasks.domain.entities import TaskEntity
from mytasks.domain.enums import TaskBucket
from mytasks.domain.errors import BadgeSchedulingError, PersistenceError, ValidationError
from mytasks.domain.filters import TaskFilters
from mytasks.infra.repository import validate_task
from mytasks.services.badge_scheduler import BadgeScheduler
from mytasks.services.task_service import TaskService

NOW = datetime(2025, 1, 11, 9, 0)


class FakeRepo:
    def __init__(self) -> None:
        self.tasks: list[TaskEntity] = []
        self._id = 1

    def load_all(self) -> list[TaskEntity]:
        return list(self.tasks)

    def get_task(self, task_id: int) -> TaskEntity | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def save(self, task: TaskEntity) -> TaskEntity:
        validate_task(task)
        if task.id is None:
            task = replace(task, id=self._id)
            self._id += 1
            self.tasks.append(task)
            return task
        if self.get_task(task.id) is None:
            raise PersistenceError(f"Task {task.id} does not exist")
        self.tasks = [task if t.id == task.id else t for t in self.tasks]
        return task

    def delete_task(self, task_id: int) -> bool:
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        return len(self.tasks) != before

    def delete_all(self) -> int:
        deleted = len(self.tasks)
        self.tasks = []
        return deleted


class RecordingSink:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.badge: int | None = None
        self.pending: list[tuple[datetime, int]] = []

    def set_badge(self, count: int) -> None:
        if self.fail:
            raise BadgeSchedulingError("permission denied")
        self.badge = count

    def cancel_pending(self) -> None:
        self.pending.clear()

    def arm(self, fire_at: datetime, count: int) -> None:
        if self.fail:
            raise BadgeSchedulingError("permission denied")
        self.pending.append((fire_at, count))


def _service(sink: RecordingSink | None = None) -> tuple[TaskService, FakeRepo, RecordingSink]:
    repo = FakeRepo()
    sink = sink or RecordingSink()
    return TaskService(repo, BadgeScheduler(sink), clock=lambda: NOW), repo, sink


def test_create_task_normalizes_fields() -> None:
    service, repo, _ = _service()

    task = service.create_task({"title": "  Buy milk ", "notes": "   ", "has_due_date": True})

    assert task.id == 1
    assert task.title == "Buy milk"
    assert task.notes is None
    assert task.due_date == date(2025, 1, 11)
    assert task.created_on == NOW
    assert repo.tasks == [task]


def test_create_task_without_flag_ignores_date() -> None:
    service, _, _ = _service()

    task = service.create_task({"title": "Draft", "due_date": date(2025, 2, 1)})

    assert task.has_due_date is False
    assert task.due_date is None


def test_blank_title_is_rejected() -> None:
    service, repo, _ = _service()

    with pytest.raises(ValidationError):
        service.create_task({"title": "   "})
    assert repo.tasks == []


def test_toggle_complete_only_flips_completion() -> None:
    service, _, sink = _service()
    task = service.create_task({"title": "Pay rent", "has_due_date": True, "due_date": date(2025, 1, 10)})
    assert sink.badge == 1

    done = service.toggle_complete(task.id)

    assert done.is_complete is True
    assert done.due_date == task.due_date
    assert done.created_on == task.created_on
    assert sink.badge == 0


def test_due_date_toggle_round_trip_through_service() -> None:
    service, _, _ = _service()
    task = service.create_task({"title": "Call"})

    on = service.set_due_date_enabled(task.id, True)
    moved = service.set_due_date(task.id, date(2025, 3, 3))
    off = service.set_due_date_enabled(task.id, False)
    again = service.set_due_date_enabled(task.id, True)

    assert on.due_date == date(2025, 1, 11)
    assert moved.due_date == date(2025, 3, 3)
    assert (off.has_due_date, off.due_date) == (False, None)
    assert again.due_date == date(2025, 1, 11)


def test_update_missing_task_returns_none() -> None:
    service, _, _ = _service()

    assert service.update_task(42, {"title": "Ghost"}) is None
    assert service.toggle_complete(42) is None


def test_delete_all_recomputes_from_post_commit_snapshot() -> None:
    service, _, sink = _service()
    service.create_task({"title": "A", "has_due_date": True})
    service.create_task({"title": "B", "has_due_date": True, "due_date": date(2025, 1, 1)})
    assert sink.badge == 2

    assert service.delete_all() == 2

    assert sink.badge == 0
    assert sink.pending == [(datetime(2025, 1, 12, 0, 0), 0)]
    assert service.get_counts()[TaskBucket.ALL] == 0


def test_badge_failure_does_not_abort_mutation() -> None:
    service, repo, _ = _service(RecordingSink(fail=True))

    task = service.create_task({"title": "Still saved", "has_due_date": True})
    assert service.delete_task(task.id) is True

    assert repo.tasks == []


def test_list_tasks_filters_and_searches() -> None:
    service, _, _ = _service()
    service.create_task({"title": "Old bill", "has_due_date": True, "due_date": date(2025, 1, 2)})
    service.create_task({"title": "Paid bill", "has_due_date": True, "due_date": date(2025, 1, 3), "is_complete": True})
    service.create_task({"title": "Groceries", "notes": "bread and bills"})

    overdue = service.list_tasks(TaskFilters(filter_key=TaskBucket.OVERDUE))
    found = service.list_tasks(TaskFilters(search="BILL"))

    assert [task.title for task in overdue] == ["Old bill"]
    assert [task.title for task in found] == ["Old bill", "Paid bill", "Groceries"]


def test_unknown_fields_are_rejected() -> None:
    service, _, _ = _service()

    with pytest.raises(ValidationError, match="priority"):
        service.create_task({"title": "x", "priority": 3})
