"""Totals panel component for settlement entry."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import QFormLayout, QFrame, QLabel, QVBoxLayout, QWidget

from paddycalc.services.document_renderer import SummaryRow


class SummaryPanel(QWidget):
    """Amount, labour, each adjustment and the payable total."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("SummaryPanel")
        outer = QVBoxLayout(self)
        outer.setContentsMargins(8, 6, 8, 6)
        title = QLabel("<b><u>Summary</u></b>")
        outer.addWidget(title)
        self._form = QFormLayout()
        self._form.setSpacing(4)
        outer.addLayout(self._form)
        self._rows: Tuple[SummaryRow, ...] = ()
        self.total_label = QLabel("0=00")

    def set_rows(self, rows: Sequence[SummaryRow]) -> None:
        self._rows = tuple(rows)
        while self._form.rowCount():
            self._form.removeRow(0)
        for row in self._rows:
            if row.kind == "total":
                separator = QFrame()
                separator.setFrameShape(QFrame.HLine)
                separator.setFrameShadow(QFrame.Sunken)
                self._form.addRow(separator)
            value = QLabel(row.value)
            value.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
            if row.kind == "total":
                value.setStyleSheet("font-weight: bold; font-size: 12pt;")
                self.total_label = value
            elif row.kind == "adjustment":
                value.setStyleSheet("color: palette(mid);")
            self._form.addRow(row.label, value)

    def rows(self) -> List[Tuple[str, str]]:
        return [(row.label, row.value) for row in self._rows]
