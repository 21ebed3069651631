from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from mytasks.domain.due_dates import validate_due_date
from mytasks.domain.entities import TaskEntity
from mytasks.domain.errors import PersistenceError, StoreUnavailable, ValidationError

from .db import SessionLocal
from .models import TaskModel

logger = logging.getLogger(__name__)


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        notes=model.notes,
        created_on=model.created_on,
        has_due_date=bool(model.has_due_date),
        due_date=model.due_date,
        is_complete=bool(model.is_complete),
    )


def _apply(model: TaskModel, task: TaskEntity) -> None:
    model.title = task.title
    model.notes = task.notes
    model.created_on = task.created_on
    model.has_due_date = task.has_due_date
    model.due_date = task.due_date
    model.is_complete = task.is_complete


def validate_task(task: TaskEntity) -> None:
    if not task.title or not task.title.strip():
        raise ValidationError("Task title is required")
    validate_due_date(task)


class TaskRepository:
    def __init__(self, session_factory: sessionmaker = SessionLocal) -> None:
        self._session_factory = session_factory

    def load_all(self) -> list[TaskEntity]:
        try:
            with self._session_factory() as session:
                stmt = select(TaskModel).order_by(TaskModel.created_on.asc(), TaskModel.id.asc())
                return [_to_entity(task) for task in session.scalars(stmt)]
        except OperationalError as exc:
            raise StoreUnavailable(f"Cannot open task store: {exc}") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Cannot load tasks: {exc}") from exc

    def get_task(self, task_id: int) -> Optional[TaskEntity]:
        try:
            with self._session_factory() as session:
                task = session.get(TaskModel, task_id)
                return _to_entity(task) if task else None
        except OperationalError as exc:
            raise StoreUnavailable(f"Cannot open task store: {exc}") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Cannot load task {task_id}: {exc}") from exc

    def save(self, task: TaskEntity) -> TaskEntity:
        validate_task(task)
        try:
            with self._session_factory() as session, session.begin():
                if task.id is None:
                    model = TaskModel()
                    session.add(model)
                else:
                    model = session.get(TaskModel, task.id)
                    if model is None:
                        raise PersistenceError(f"Task {task.id} does not exist")
                _apply(model, task)
                session.flush()
                saved = _to_entity(model)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Cannot save task {task.title!r}: {exc}") from exc
        logger.debug("Saved task %s", saved.id)
        return saved

    def delete_task(self, task_id: int) -> bool:
        try:
            with self._session_factory() as session, session.begin():
                task = session.get(TaskModel, task_id)
                if not task:
                    return False
                session.delete(task)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Cannot delete task {task_id}: {exc}") from exc
        return True

    def delete_all(self) -> int:
        try:
            with self._session_factory() as session, session.begin():
                result = session.execute(delete(TaskModel))
                deleted = result.rowcount or 0
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Cannot delete tasks: {exc}") from exc
        return deleted
