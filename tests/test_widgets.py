from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from PySide6.QtCore import QDate

from mytasks.ui.widgets import today_qdate


def test_picker_default_follows_configured_zone() -> None:
    instant = datetime(2025, 1, 11, 23, 30, tzinfo=timezone.utc)

    assert today_qdate(lambda: instant) == QDate(2025, 1, 11)
    assert today_qdate(lambda: instant.astimezone(ZoneInfo("Asia/Tokyo"))) == QDate(2025, 1, 12)
