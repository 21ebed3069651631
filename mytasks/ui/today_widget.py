from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout, QWidget

from mytasks.config import SETTINGS
from mytasks.domain.calendar import seconds_until_next_midnight
from mytasks.domain.entities import WidgetItem
from mytasks.infra.repository import TaskRepository
from mytasks.services.widget_feed import WidgetFeed

logger = logging.getLogger(__name__)

OVERDUE_COLOR = "#E24A4A"


class TodayWidget(QWidget):
    """Small always-on-top panel listing overdue and due-today tasks.

    Runs in its own process and only reads the store, so it re-fetches on a
    timer and just after local midnight instead of listening to the app.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        super().__init__(None, Qt.Tool | Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint)
        self.setWindowTitle("Today's Tasks")
        self.setObjectName("TodayWidget")
        self.setMinimumWidth(280)

        self._clock = clock
        self.feed = WidgetFeed(TaskRepository(), clock=clock)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(6)

        header = QLabel("Today's Tasks")
        header.setProperty("class", "panel-title")
        divider = QFrame()
        divider.setFrameShape(QFrame.HLine)

        self.items_layout = QVBoxLayout()
        self.items_layout.setSpacing(4)

        layout.addWidget(header)
        layout.addWidget(divider)
        layout.addLayout(self.items_layout)
        layout.addStretch()

        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(SETTINGS.widget_refresh_min * 60 * 1000)
        self.refresh_timer.timeout.connect(self.refresh)
        self.refresh_timer.start()

        self.midnight_timer = QTimer(self)
        self.midnight_timer.setSingleShot(True)
        self.midnight_timer.setTimerType(Qt.PreciseTimer)
        self.midnight_timer.timeout.connect(self._on_midnight)

        self.refresh()
        self._arm_midnight()

    def refresh(self) -> None:
        self._render(self.feed.load())

    def _render(self, items: list[WidgetItem]) -> None:
        while self.items_layout.count():
            widget = self.items_layout.takeAt(0).widget()
            if widget:
                widget.deleteLater()

        if not items:
            empty = QLabel("No tasks due today")
            empty.setEnabled(False)
            self.items_layout.addWidget(empty)
            return

        for item in items:
            label = QLabel(f"• {item.title}")
            label.setToolTip(item.due_date.strftime("%d.%m.%Y"))
            if item.is_overdue:
                label.setStyleSheet(f"color: {OVERDUE_COLOR};")
            self.items_layout.addWidget(label)

    def _arm_midnight(self) -> None:
        now = self._clock()
        delay_ms = max(int(seconds_until_next_midnight(now) * 1000), 0)
        # A second past midnight so the new day has started for the classifier.
        self.midnight_timer.start(delay_ms + 1000)

    def _on_midnight(self) -> None:
        logger.info("Widget day rollover")
        self.refresh()
        self._arm_midnight()

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton:
            self._drag_offset = event.globalPosition().toPoint() - self.frameGeometry().topLeft()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        offset = getattr(self, "_drag_offset", None)
        if offset is not None and event.buttons() & Qt.LeftButton:
            self.move(event.globalPosition().toPoint() - offset)
        super().mouseMoveEvent(event)
