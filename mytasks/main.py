from __future__ import annotations

import logging
import sys

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from mytasks.config import SETTINGS
from mytasks.domain.calendar import make_clock
from mytasks.domain.errors import StoreUnavailable
from mytasks.infra.db import init_db
from mytasks.infra.logging import setup_logging

logger = logging.getLogger(__name__)


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#0F172A"))
    palette.setColor(QPalette.WindowText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Base, QColor("#111827"))
    palette.setColor(QPalette.AlternateBase, QColor("#1B2230"))
    palette.setColor(QPalette.Text, QColor("#E6EDF3"))
    palette.setColor(QPalette.Button, QColor("#202A3B"))
    palette.setColor(QPalette.ButtonText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Highlight, QColor("#DC2626"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def _make_app() -> QApplication:
    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont("Segoe UI", 10))
    return app


def main() -> None:
    setup_logging("mytasks")
    app = _make_app()
    try:
        init_db()
    except StoreUnavailable as exc:
        logger.exception("Task store unavailable")
        QMessageBox.critical(None, "Storage error", str(exc))
        return

    from mytasks.ui.main_window import MainWindow

    window = MainWindow(clock=make_clock(SETTINGS.timezone))
    window.show()
    sys.exit(app.exec())


def widget_main() -> None:
    setup_logging("mytasks-widget")
    app = _make_app()

    from mytasks.ui.today_widget import TodayWidget

    # An unreadable store shows an empty widget rather than an error.
    widget = TodayWidget(clock=make_clock(SETTINGS.timezone))
    widget.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    if "--widget" in sys.argv[1:]:
        widget_main()
    else:
        main()
