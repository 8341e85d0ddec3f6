"""Transient status text shown under the ledger preview."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt5.QtCore import QTimer
from PyQt5.QtWidgets import QLabel

# level -> (label colour, log level)
LEVELS = {
    "info": ("#2b6cb0", logging.DEBUG),
    "warning": ("#8a6d3b", logging.INFO),
    "error": ("#a61b1b", logging.WARNING),
}


class InlineStatusController:
    """Write a coloured message to a label and blank it after ``timeout`` ms.

    Every message is also logged, one level below its display level, so the
    log keeps a trail of what the user was told.
    """

    def __init__(
        self,
        *,
        parent,
        label_getter: Callable[[], Optional[QLabel]],
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._label_getter = label_getter
        self._logger = logger or logging.getLogger(__name__)
        self._expiry = QTimer(parent)
        self._expiry.setSingleShot(True)
        self._expiry.timeout.connect(self.clear)
        self.last_message = ""

    def show(self, message: str, *, timeout: int = 3000, level: str = "info") -> None:
        color, log_level = LEVELS.get((level or "info").lower(), LEVELS["info"])
        self._logger.log(log_level, "Status: %s", message)
        self.last_message = message or ""

        label = self._label_getter()
        if label is None:
            return
        label.setStyleSheet(f"color: {color}; padding-left: 8px;")
        label.setText(self.last_message)

        self._expiry.stop()
        if isinstance(timeout, int) and timeout > 0:
            self._expiry.start(timeout)

    def clear(self) -> None:
        self._expiry.stop()
        self.last_message = ""
        label = self._label_getter()
        if label is not None:
            label.setText("")
