#!/usr/bin/env python
import logging
import sys

from PyQt5.QtWidgets import QMainWindow

from paddycalc.infrastructure.app_constants import APP_TITLE
from paddycalc.infrastructure.application import ApplicationBuilder, StartupError
from paddycalc.ui.settlement_entry import SettlementEntryWidget


class MainWindow(QMainWindow):
    """Main application window for the Paddy Calculator."""

    def __init__(self, logger=None):
        super().__init__()
        self.logger = logger or logging.getLogger(__name__)
        self.logger.info("Initializing MainWindow")
        self.setWindowTitle(APP_TITLE)

        try:
            self.settlement_widget = SettlementEntryWidget(self, logger=self.logger)
        except Exception as exc:
            raise StartupError(f"Could not create the settlement screen: {exc}") from exc
        self.setCentralWidget(self.settlement_widget)
        self.resize(1100, 760)


def main() -> int:
    builder = ApplicationBuilder(main_window_factory=MainWindow)
    return builder.run()


if __name__ == "__main__":
    sys.exit(main())
