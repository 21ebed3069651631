from __future__ import annotations

from datetime import date, datetime, timedelta
from itertools import count

import pytest

from mytasks.domain.entities import TaskEntity


@pytest.fixture()
def make_task():
    ids = count(1)

    def _make(
        title: str = "Task",
        due: date | None = None,
        complete: bool = False,
        created_on: datetime | None = None,
    ) -> TaskEntity:
        next_id = next(ids)
        return TaskEntity(
            id=next_id,
            title=title,
            notes=None,
            created_on=created_on or datetime(2025, 1, 1, 8, 0) + timedelta(minutes=next_id),
            has_due_date=due is not None,
            due_date=due,
            is_complete=complete,
        )

    return _make
