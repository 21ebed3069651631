from __future__ import annotations

from datetime import datetime
from typing import Callable

from PySide6.QtCore import QDate, Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from mytasks.domain.calendar import start_of_day
from mytasks.domain.entities import TaskEntity
from mytasks.domain.enums import TaskBucket

FILTER_LABELS = {
    TaskBucket.ALL: "Show All",
    TaskBucket.OVERDUE: "Overdue",
    TaskBucket.DUE_TODAY: "Due Today",
    TaskBucket.FUTURE: "Future",
    TaskBucket.NO_DUE_DATE: "No Due Date",
    TaskBucket.DUE_TOMORROW: "Due Tomorrow",
}


def today_qdate(clock: Callable[[], datetime]) -> QDate:
    today = start_of_day(clock())
    return QDate(today.year, today.month, today.day)


class TaskItemWidget(QWidget):
    def __init__(self, task: TaskEntity, on_toggle, parent=None):
        super().__init__(parent)
        self.task = task
        self._on_toggle = on_toggle

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(10)

        self.done_check = QCheckBox()
        self.done_check.setChecked(task.is_complete)
        self.done_check.toggled.connect(self._handle_toggle)

        text_column = QVBoxLayout()
        text_column.setSpacing(2)

        title = QLabel(task.title.strip() if task.title else "Untitled")
        title.setProperty("class", "task-title")
        title.setWordWrap(True)
        font = title.font()
        font.setStrikeOut(task.is_complete)
        title.setFont(font)
        if task.is_complete:
            title.setEnabled(False)
        text_column.addWidget(title)

        if task.has_due_date and task.due_date:
            meta = QLabel(f"Due {task.due_date.strftime('%d.%m.%Y')}")
            meta.setProperty("class", "task-meta")
            text_column.addWidget(meta)

        layout.addWidget(self.done_check, 0, Qt.AlignTop)
        layout.addLayout(text_column, 1)

    def _handle_toggle(self, checked: bool) -> None:
        if self.task.id is None or checked == self.task.is_complete:
            return
        self._on_toggle(self.task.id)

    def set_selected(self, selected: bool) -> None:
        self.setProperty("selected", selected)
        self.style().unpolish(self)
        self.style().polish(self)


class FilterListWidget(QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        for key, label in FILTER_LABELS.items():
            item = QListWidgetItem(label)
            item.setData(Qt.UserRole, key.value)
            self.addItem(item)
        self.setCurrentRow(0)

    def current_bucket(self) -> TaskBucket:
        item = self.currentItem()
        if not item:
            return TaskBucket.ALL
        return TaskBucket(item.data(Qt.UserRole))

    def update_counts(self, counts: dict[TaskBucket, int]) -> None:
        for index in range(self.count()):
            item = self.item(index)
            key = TaskBucket(item.data(Qt.UserRole))
            item.setText(f"{FILTER_LABELS[key]} ({counts.get(key, 0)})")
