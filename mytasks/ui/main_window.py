from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable

from PySide6.QtCore import QDate, Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QCheckBox,
    QDateEdit,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QSplitter,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from mytasks.config import SETTINGS
from mytasks.domain.enums import TaskBucket
from mytasks.domain.errors import StoreError, ValidationError
from mytasks.infra.badge_sink import NullBadgeSink, QtBadgeSink
from mytasks.infra.repository import TaskRepository
from mytasks.services.badge_scheduler import BadgeScheduler
from mytasks.services.task_service import TaskService, search_tasks

from .widgets import FilterListWidget, TaskItemWidget, today_qdate

logger = logging.getLogger(__name__)


class MainWindow(QWidget):
    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        super().__init__()
        self.setWindowTitle("My Tasks")
        self.resize(1100, 700)
        self._clock = clock

        sink = QtBadgeSink(on_fired=self.on_day_changed, parent=self) if SETTINGS.badge_enabled else NullBadgeSink()
        self.service = TaskService(TaskRepository(), BadgeScheduler(sink), clock=clock)

        self.current_task_id: int | None = None
        self.current_filter = TaskBucket.ALL

        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)

        splitter = QSplitter(Qt.Horizontal)
        main_layout.addWidget(splitter)
        splitter.addWidget(self._build_sidebar())
        splitter.addWidget(self._build_center())
        splitter.addWidget(self._build_detail_panel())
        splitter.setStretchFactor(1, 2)
        splitter.setStretchFactor(2, 2)
        splitter.setSizes([220, 480, 400])

        self.refresh_tasks()
        self.service.refresh_badge()

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task)
        QShortcut(QKeySequence("Ctrl+S"), self, self.save_task)

    def _build_sidebar(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("Sidebar")
        layout = QVBoxLayout(frame)
        layout.setSpacing(8)

        title = QLabel("Filter")
        title.setProperty("class", "sidebar-title")
        layout.addWidget(title)

        self.filter_list = FilterListWidget()
        self.filter_list.setObjectName("FilterList")
        self.filter_list.currentItemChanged.connect(self.on_filter_change)
        layout.addWidget(self.filter_list)

        delete_all = QPushButton("Delete All")
        delete_all.setProperty("variant", "danger")
        delete_all.clicked.connect(self.delete_all_tasks)
        layout.addWidget(delete_all)
        return frame

    def _build_center(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("CenterPanel")
        layout = QVBoxLayout(frame)
        layout.setSpacing(12)

        header = QHBoxLayout()
        header_title = QLabel("My Tasks")
        header_title.setProperty("class", "panel-title")
        add_button = QPushButton("New Task")
        add_button.clicked.connect(self.new_task)
        header.addWidget(header_title)
        header.addStretch()
        header.addWidget(add_button)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search title or notes")
        self.search_input.textChanged.connect(self.refresh_tasks)

        self.task_list = QListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(6)
        self.task_list.currentItemChanged.connect(self.on_task_selected)

        layout.addLayout(header)
        layout.addWidget(self.search_input)
        layout.addWidget(self.task_list)
        return frame

    def _build_detail_panel(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("DetailPanel")
        layout = QVBoxLayout(frame)
        layout.setSpacing(8)

        self.detail_title = QLabel("New Task")
        self.detail_title.setProperty("class", "panel-title")

        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("Title")

        self.due_toggle = QCheckBox("Set Due Date")
        self.due_toggle.toggled.connect(self.on_due_toggled)

        self.due_input = QDateEdit()
        self.due_input.setCalendarPopup(True)
        self.due_input.setDate(today_qdate(self._clock))
        self.due_input.setEnabled(False)

        self.notes_input = QTextEdit()
        self.notes_input.setPlaceholderText("Notes")
        self.notes_input.setMinimumHeight(100)

        self.complete_check = QCheckBox("Completed")

        self.save_button = QPushButton("Save")
        self.save_button.clicked.connect(self.save_task)

        self.delete_button = QPushButton("Delete Task")
        self.delete_button.setProperty("variant", "danger")
        self.delete_button.clicked.connect(self.delete_task)
        self.delete_button.setEnabled(False)

        layout.addWidget(self.detail_title)
        layout.addWidget(self.title_input)
        layout.addWidget(self.due_toggle)
        layout.addWidget(self.due_input)
        layout.addWidget(QLabel("Notes"))
        layout.addWidget(self.notes_input)
        layout.addWidget(self.complete_check)
        layout.addWidget(self.save_button)
        layout.addWidget(self.delete_button)
        layout.addStretch()
        return frame

    def refresh_tasks(self) -> None:
        search = self.search_input.text().strip()
        try:
            classification = self.service.classify()
        except StoreError as exc:
            logger.exception("Could not load tasks")
            self._show_store_error(exc)
            return

        tasks = search_tasks(classification.bucket(self.current_filter), search)
        self.filter_list.update_counts(classification.counts)

        self.task_list.blockSignals(True)
        self.task_list.clear()
        selected_row = -1
        for row, task in enumerate(tasks):
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            widget = TaskItemWidget(task, self.toggle_complete)
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())
            if task.id == self.current_task_id:
                selected_row = row
        self.task_list.blockSignals(False)

        if selected_row >= 0:
            self.task_list.setCurrentRow(selected_row)

    def on_filter_change(self, current: QListWidgetItem | None) -> None:
        if not current:
            return
        self.current_filter = self.filter_list.current_bucket()
        self.refresh_tasks()

    def on_day_changed(self) -> None:
        logger.info("Local day changed, refreshing")
        self.refresh_tasks()
        self.service.refresh_badge()

    def on_task_selected(self, current: QListWidgetItem | None, previous: QListWidgetItem | None = None) -> None:
        if previous and isinstance(self.task_list.itemWidget(previous), TaskItemWidget):
            self.task_list.itemWidget(previous).set_selected(False)
        if not current:
            return
        widget = self.task_list.itemWidget(current)
        if not isinstance(widget, TaskItemWidget):
            return
        widget.set_selected(True)
        self.current_task_id = widget.task.id
        self.populate_form(widget.task)

    def populate_form(self, task) -> None:
        self.detail_title.setText("Edit Task")
        self.title_input.setText(task.title)
        self.notes_input.setPlainText(task.notes or "")
        self.complete_check.setChecked(task.is_complete)
        self.due_toggle.setChecked(task.has_due_date)
        if task.due_date:
            self.due_input.setDate(QDate(task.due_date.year, task.due_date.month, task.due_date.day))
        self.due_input.setEnabled(task.has_due_date)
        self.delete_button.setEnabled(True)

    def clear_form(self) -> None:
        self.detail_title.setText("New Task")
        self.title_input.clear()
        self.notes_input.clear()
        self.complete_check.setChecked(False)
        self.due_toggle.setChecked(False)
        self.due_input.setDate(today_qdate(self._clock))
        self.due_input.setEnabled(False)
        self.delete_button.setEnabled(False)

    def new_task(self) -> None:
        self.current_task_id = None
        self.task_list.clearSelection()
        self.clear_form()
        self.title_input.setFocus()

    def on_due_toggled(self, checked: bool) -> None:
        self.due_input.setEnabled(checked)
        if not checked:
            # Turning the due date back on starts again from today.
            self.due_input.setDate(today_qdate(self._clock))

    def _form_data(self) -> dict:
        due_date: date | None = self.due_input.date().toPython() if self.due_toggle.isChecked() else None
        return {
            "title": self.title_input.text(),
            "notes": self.notes_input.toPlainText(),
            "is_complete": self.complete_check.isChecked(),
            "has_due_date": self.due_toggle.isChecked(),
            "due_date": due_date,
        }

    def save_task(self) -> None:
        data = self._form_data()
        try:
            if self.current_task_id is None:
                task = self.service.create_task(data)
                self.current_task_id = task.id
            else:
                self.service.update_task(self.current_task_id, data)
        except ValidationError as exc:
            QMessageBox.warning(self, "Cannot save task", str(exc))
            return
        except StoreError as exc:
            logger.exception("Saving task failed")
            self._show_store_error(exc)
            return
        self.refresh_tasks()

    def toggle_complete(self, task_id: int) -> None:
        try:
            self.service.toggle_complete(task_id)
        except StoreError as exc:
            logger.exception("Toggling task %s failed", task_id)
            self._show_store_error(exc)
        # The toggled row widget is still handling its signal; rebuild the list afterwards.
        QTimer.singleShot(0, self.refresh_tasks)

    def delete_task(self) -> None:
        if self.current_task_id is None:
            return
        confirm = QMessageBox.question(self, "Delete Task", "Are you sure you want to delete this task?")
        if confirm != QMessageBox.Yes:
            return
        try:
            self.service.delete_task(self.current_task_id)
        except StoreError as exc:
            logger.exception("Deleting task %s failed", self.current_task_id)
            self._show_store_error(exc)
            return
        self.new_task()
        self.refresh_tasks()

    def delete_all_tasks(self) -> None:
        confirm = QMessageBox.question(self, "Delete All", "Are you sure you want to delete all tasks?")
        if confirm != QMessageBox.Yes:
            return
        try:
            self.service.delete_all()
        except StoreError as exc:
            logger.exception("Deleting all tasks failed")
            self._show_store_error(exc)
            return
        self.new_task()
        self.refresh_tasks()

    def _show_store_error(self, exc: StoreError) -> None:
        QMessageBox.warning(self, "Storage error", f"The task store could not be updated.\n{exc}")
