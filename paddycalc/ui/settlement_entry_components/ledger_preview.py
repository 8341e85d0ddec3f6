"""Live on-screen ledger preview."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import QFrame, QHBoxLayout, QLabel, QVBoxLayout, QWidget

from paddycalc.services.document_renderer import DocumentLine, LineRole

EMPHASIS_ROLES = {LineRole.HEADER, LineRole.AMOUNT, LineRole.FINAL}


class LedgerPreview(QFrame):
    """Screen presentation of the canonical ledger lines.

    Rows are rebuilt from :class:`DocumentLine` values so the preview always
    matches the printed page line for line; each row carries its role as the
    ``role`` dynamic property for stylesheet hooks.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("LedgerPreview")
        self.setFrameShape(QFrame.StyledPanel)
        self._lines: Tuple[DocumentLine, ...] = ()
        self._layout = QVBoxLayout(self)
        self._layout.setSpacing(2)
        self._layout.setContentsMargins(12, 10, 12, 10)
        self._font = QFont("Courier New", 10)

    def set_lines(self, lines: Sequence[DocumentLine]) -> None:
        self._lines = tuple(lines)
        self._clear()
        for line in self._lines:
            self._layout.addWidget(self._make_row(line))
        self._layout.addStretch(1)

    def lines(self) -> Tuple[DocumentLine, ...]:
        return self._lines

    def row_texts(self) -> List[Tuple[str, str, str]]:
        """Return (role, left, right) for every displayed row."""
        rows = []
        for idx in range(self._layout.count()):
            widget = self._layout.itemAt(idx).widget()
            if widget is None:
                continue
            labels = widget.findChildren(QLabel)
            left = labels[0].text() if labels else ""
            right = labels[1].text() if len(labels) > 1 else ""
            rows.append((widget.property("role"), left, right))
        return rows

    def _make_row(self, line: DocumentLine) -> QWidget:
        if line.role is LineRole.SEPARATOR:
            row = QFrame()
            row.setFrameShape(QFrame.HLine)
            row.setFrameShadow(QFrame.Sunken)
            row.setProperty("role", line.role.value)
            return row

        row = QWidget()
        row.setProperty("role", line.role.value)
        layout = QHBoxLayout(row)
        layout.setContentsMargins(0, 0, 0, 0)
        font = QFont(self._font)
        font.setBold(line.role in EMPHASIS_ROLES)
        left = QLabel(line.text)
        left.setFont(font)
        right = QLabel(line.detail)
        right.setFont(font)
        right.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        layout.addWidget(left, 1)
        layout.addWidget(right)
        return row

    def _clear(self) -> None:
        while self._layout.count():
            item = self._layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
