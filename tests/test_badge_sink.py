from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from PySide6.QtCore import QCoreApplication, Qt

from mytasks.domain.calendar import next_midnight
from mytasks.domain.errors import BadgeSchedulingError
from mytasks.infra.badge_sink import QtBadgeSink

NEW_YORK = ZoneInfo("America/New_York")
# 01:00 on the morning clocks go forward; the day has 23 hours.
SPRING_FORWARD = datetime(2025, 3, 9, 1, 0, tzinfo=NEW_YORK)


@pytest.fixture(scope="module")
def qt_app():
    return QCoreApplication.instance() or QCoreApplication([])


def _sink(qt_app, now: datetime = SPRING_FORWARD, **kwargs) -> QtBadgeSink:
    return QtBadgeSink(wall_clock=lambda: now.timestamp(), **kwargs)


def test_arm_waits_real_elapsed_time_across_dst(qt_app) -> None:
    sink = _sink(qt_app)

    sink.arm(next_midnight(SPRING_FORWARD), 3)

    assert sink._timer.interval() == 22 * 3600 * 1000
    assert sink._timer.timerType() == Qt.PreciseTimer
    sink.cancel_pending()


def test_second_arm_without_cancel_is_refused(qt_app) -> None:
    sink = _sink(qt_app)
    sink.arm(next_midnight(SPRING_FORWARD), 1)

    with pytest.raises(BadgeSchedulingError):
        sink.arm(next_midnight(SPRING_FORWARD), 2)

    assert sink._pending_count == 1
    sink.cancel_pending()


def test_cancel_then_arm_leaves_one_pending_delivery(qt_app) -> None:
    sink = _sink(qt_app)
    sink.arm(next_midnight(SPRING_FORWARD), 1)

    sink.cancel_pending()
    assert not sink.is_armed

    sink.arm(datetime(2025, 3, 9, 2, 0, tzinfo=NEW_YORK), 5)

    assert sink.is_armed
    assert sink._pending_count == 5
    # 02:00 falls in the skipped hour and resolves to one real hour after 01:00 EST.
    assert sink._timer.interval() == 3600 * 1000
    sink.cancel_pending()


def test_past_fire_instant_fires_immediately(qt_app) -> None:
    sink = _sink(qt_app)

    sink.arm(datetime(2025, 3, 8, 0, 0, tzinfo=NEW_YORK), 1)

    assert sink._timer.interval() == 0
    sink.cancel_pending()


def test_delivery_sets_pending_count_then_notifies(qt_app) -> None:
    events: list[tuple[str, int | None]] = []
    sink = _sink(qt_app, on_fired=lambda: events.append(("fired", None)))
    sink.set_badge = lambda count: events.append(("badge", count))
    sink.arm(next_midnight(SPRING_FORWARD), 4)

    sink._deliver()

    assert events == [("badge", 4), ("fired", None)]
    assert sink._pending_count is None


def test_delivery_notifies_even_when_badge_is_denied(qt_app) -> None:
    fired: list[bool] = []
    sink = _sink(qt_app, on_fired=lambda: fired.append(True))

    def deny(count: int) -> None:
        raise BadgeSchedulingError("badges not permitted")

    sink.set_badge = deny
    sink.arm(next_midnight(SPRING_FORWARD), 4)

    sink._deliver()

    assert fired == [True]


def test_delivery_without_pending_count_does_nothing(qt_app) -> None:
    fired: list[bool] = []
    sink = _sink(qt_app, on_fired=lambda: fired.append(True))

    sink._deliver()

    assert fired == []
