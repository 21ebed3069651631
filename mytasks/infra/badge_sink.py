from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QGuiApplication

from mytasks.domain.errors import BadgeSchedulingError

logger = logging.getLogger(__name__)

_MAX_TIMER_MS = 2**31 - 1


class QtBadgeSink:
    """App icon badge backed by ``QGuiApplication.setBadgeNumber``.

    One single-shot timer holds the pending delivery, so there is at most one
    scheduled badge update at any time.
    """

    def __init__(
        self,
        on_fired: Callable[[], None] | None = None,
        parent=None,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._on_fired = on_fired
        self._wall_clock = wall_clock
        self._pending_count: int | None = None
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        # Coarse timers may fire up to 5% of the interval early or late.
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.timeout.connect(self._deliver)

    @property
    def is_armed(self) -> bool:
        return self._timer.isActive()

    def set_badge(self, count: int) -> None:
        if QGuiApplication.instance() is None:
            raise BadgeSchedulingError("No running Qt application to badge")
        setter = getattr(QGuiApplication, "setBadgeNumber", None)
        if setter is None:
            raise BadgeSchedulingError("This Qt build cannot set application badges")
        try:
            setter(max(int(count), 0))
        except RuntimeError as exc:
            raise BadgeSchedulingError(str(exc)) from exc

    def cancel_pending(self) -> None:
        if self._timer.isActive():
            logger.debug("Cancelling pending badge update (%s)", self._pending_count)
        self._timer.stop()
        self._pending_count = None

    def arm(self, fire_at: datetime, count: int) -> None:
        if self._timer.isActive():
            raise BadgeSchedulingError("A badge update is already armed; cancel it first")
        # Elapsed seconds, not wall-clock difference, so DST shifts are honoured.
        delay = fire_at.timestamp() - self._wall_clock()
        delay_ms = min(max(int(delay * 1000), 0), _MAX_TIMER_MS)
        self._pending_count = count
        self._timer.start(delay_ms)
        logger.debug("Armed badge=%s at %s (in %d ms)", count, fire_at.isoformat(), delay_ms)

    def _deliver(self) -> None:
        count = self._pending_count
        self._pending_count = None
        if count is None:
            return
        try:
            self.set_badge(count)
        except BadgeSchedulingError as exc:
            logger.warning("Scheduled badge update failed: %s", exc)
        if self._on_fired:
            self._on_fired()


class NullBadgeSink:
    """Used when badges are switched off in the settings."""

    def set_badge(self, count: int) -> None:
        logger.debug("Badge disabled, skipping set_badge(%s)", count)

    def cancel_pending(self) -> None:
        pass

    def arm(self, fire_at: datetime, count: int) -> None:
        logger.debug("Badge disabled, skipping arm(%s, %s)", fire_at.isoformat(), count)
