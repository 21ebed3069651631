from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from mytasks.domain.badge import BadgeProjection, project_badge, project_next_midnight_badge
from mytasks.domain.entities import TaskEntity
from mytasks.domain.errors import BadgeSchedulingError

logger = logging.getLogger(__name__)


class BadgeScheduler:
    """Pushes projected badge values to a sink.

    The sink needs ``set_badge(count)``, ``cancel_pending()`` and
    ``arm(fire_at, count)``. Sink failures are logged and never raised: the
    badge is a convenience and must not undo a committed task change.
    """

    def __init__(self, sink) -> None:
        self._sink = sink

    def publish(self, tasks: Iterable[TaskEntity], now: datetime) -> bool:
        snapshot = list(tasks)
        ok = self.set_now(project_badge(snapshot, now))
        return self.schedule(project_next_midnight_badge(snapshot, now)) and ok

    def set_now(self, count: int) -> bool:
        try:
            self._sink.set_badge(count)
        except BadgeSchedulingError as exc:
            logger.warning("Could not set badge to %s: %s", count, exc)
            return False
        return True

    def schedule(self, projection: BadgeProjection) -> bool:
        try:
            self._sink.cancel_pending()
            self._sink.arm(projection.fire_at, projection.count)
        except BadgeSchedulingError as exc:
            logger.warning(
                "Could not schedule badge=%s at %s: %s",
                projection.count,
                projection.fire_at.isoformat(),
                exc,
            )
            return False
        return True
