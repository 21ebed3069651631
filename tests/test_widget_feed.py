from __future__ import annotations

from datetime import date, datetime

from mytasks.domain.entities import WidgetItem
from mytasks.domain.errors import StoreUnavailable
from mytasks.services.widget_feed import WidgetFeed, build_widget_items

NOW = datetime(2025, 1, 11, 9, 0)


class StaticRepo:
    def __init__(self, tasks) -> None:
        self.tasks = tasks
        self.loads = 0

    def load_all(self):
        self.loads += 1
        return list(self.tasks)


class BrokenRepo:
    def load_all(self):
        raise StoreUnavailable("database is locked")


def test_widget_lists_open_overdue_and_today_by_due_date(make_task) -> None:
    tasks = [
        make_task("today", due=date(2025, 1, 11)),
        make_task("done today", due=date(2025, 1, 11), complete=True),
        make_task("late", due=date(2025, 1, 3)),
        make_task("tomorrow", due=date(2025, 1, 12)),
        make_task("whenever"),
    ]

    assert build_widget_items(tasks, NOW) == [
        WidgetItem(title="late", due_date=date(2025, 1, 3), is_overdue=True),
        WidgetItem(title="today", due_date=date(2025, 1, 11), is_overdue=False),
    ]


def test_feed_refetches_on_every_load(make_task) -> None:
    repo = StaticRepo([make_task("today", due=date(2025, 1, 11))])
    feed = WidgetFeed(repo, clock=lambda: NOW)

    assert len(feed.load()) == 1
    repo.tasks = []
    assert feed.load() == []
    assert repo.loads == 2


def test_unreadable_store_degrades_to_no_data() -> None:
    assert WidgetFeed(BrokenRepo(), clock=lambda: NOW).load() == []
