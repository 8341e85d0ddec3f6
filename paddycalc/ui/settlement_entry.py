#!/usr/bin/env python
"""Settlement entry widget: inputs on the left, live ledger on the right."""
import logging
from typing import Dict, Optional, Sequence

from PyQt5.QtCore import QDate, QSignalBlocker, Qt
from PyQt5.QtWidgets import (
    QComboBox,
    QDateEdit,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from paddycalc.domain.settlement_models import (
    AdjustmentSign,
    QueueSnapshot,
    SettlementResult,
    TransactionInput,
)
from paddycalc.persistence.session_store import SessionStore
from paddycalc.presenter import SettlementPresenter
from paddycalc.services.document_renderer import DocumentLine, SummaryRow
from paddycalc.services.numeric import floor_count, normalize
from paddycalc.services.print_layout import PrintPosition

from .inline_status import InlineStatusController
from .print_manager import PrintManager
from .settlement_entry_components import LedgerPreview, QueuePanel, SummaryPanel

# (field name, label, placeholder)
INPUT_FIELDS = (
    ("total_weight", "Total weight (kg)", "e.g. 1020"),
    ("bags", "Bags count", "e.g. 10"),
    ("rate_per_quintal", "Rate per quintal (per 100kg)", "e.g. 1500"),
    ("labour_per_bag", "Labour per bag", "e.g. 20"),
    ("tare_per_bag", "Tare per bag (KP)", "2"),
)


class SettlementEntryWidget(QWidget):
    """Widget for paddy settlement entry, preview and printing."""

    def __init__(self, parent=None, *, store=None, print_service=None, logger=None):
        super().__init__(parent)
        self.logger = logger or logging.getLogger(__name__)
        self.inputs: Dict[str, QLineEdit] = {}
        self._adjustment_rows: Dict[str, Dict[str, QWidget]] = {}

        self._setup_ui()
        self._status_helper = InlineStatusController(
            parent=self,
            label_getter=lambda: getattr(self, "status_label", None),
            logger=self.logger,
        )
        if print_service is None:
            print_service = PrintManager(self, logger=self.logger)
        self.presenter = SettlementPresenter(
            self,
            store if store is not None else SessionStore(logger=self.logger),
            print_service,
            logger=self.logger,
        )
        self._connect_signals()
        self.presenter.load_session()

    # ------------------------------------------------------------------ #
    # Layout
    # ------------------------------------------------------------------ #
    def _setup_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setSpacing(12)

        left = QVBoxLayout()
        layout.addLayout(left, 3)

        header = QHBoxLayout()
        title = QLabel("<h2>Paddy settlement</h2>")
        header.addWidget(title)
        header.addStretch(1)
        self.clear_button = QPushButton("Clear All")
        header.addWidget(self.clear_button)
        left.addLayout(header)

        form = QFormLayout()
        self.customer_input = QLineEdit()
        self.customer_input.setPlaceholderText("Customer name")
        form.addRow("Customer name", self.customer_input)
        self.date_input = QDateEdit()
        self.date_input.setCalendarPopup(True)
        self.date_input.setDisplayFormat("yyyy-MM-dd")
        self.date_input.setDate(QDate.currentDate())
        form.addRow("Date", self.date_input)
        for name, label, placeholder in INPUT_FIELDS:
            line_edit = QLineEdit()
            line_edit.setPlaceholderText(placeholder)
            self.inputs[name] = line_edit
            form.addRow(label, line_edit)
        left.addLayout(form)

        batch_box = QGroupBox("Batches (truckloads)")
        batch_layout = QVBoxLayout(batch_box)
        self.batch_list = QListWidget()
        self.batch_list.setMaximumHeight(90)
        batch_layout.addWidget(self.batch_list)
        batch_buttons = QHBoxLayout()
        self.add_batch_button = QPushButton("+ Add batch")
        self.add_batch_button.setToolTip("Move the current weight and bags into a batch")
        self.remove_batch_button = QPushButton("Remove batch")
        batch_buttons.addWidget(self.add_batch_button)
        batch_buttons.addWidget(self.remove_batch_button)
        batch_layout.addLayout(batch_buttons)
        left.addWidget(batch_box)

        adj_box = QGroupBox("Borrow / Adjustments")
        adj_layout = QVBoxLayout(adj_box)
        self.add_adjustment_button = QPushButton("+ Add Borrow")
        adj_layout.addWidget(self.add_adjustment_button, 0, Qt.AlignRight)
        self.adjustments_hint = QLabel(
            'No borrow entries. Click "Add Borrow" to include amounts to subtract.'
        )
        self.adjustments_hint.setStyleSheet("color: palette(mid);")
        adj_layout.addWidget(self.adjustments_hint)
        self.adjustments_layout = QVBoxLayout()
        adj_layout.addLayout(self.adjustments_layout)
        left.addWidget(adj_box)

        self.queue_panel = QueuePanel()
        left.addWidget(self.queue_panel)
        left.addStretch(1)

        right = QVBoxLayout()
        layout.addLayout(right, 2)
        print_bar = QHBoxLayout()
        print_bar.addWidget(QLabel("Print position"))
        self.position_combo = QComboBox()
        for position in PrintPosition:
            self.position_combo.addItem(position.display_name(), position.value)
        print_bar.addWidget(self.position_combo)
        self.print_button = QPushButton("Print Summary")
        print_bar.addWidget(self.print_button)
        right.addLayout(print_bar)
        self.ledger_preview = LedgerPreview()
        right.addWidget(self.ledger_preview, 1)
        self.summary_panel = SummaryPanel()
        right.addWidget(self.summary_panel)
        self.status_label = QLabel("")
        right.addWidget(self.status_label)

    def _connect_signals(self) -> None:
        presenter = self.presenter
        self.customer_input.textEdited.connect(
            lambda text: presenter.update_field("customer_name", text)
        )
        self.date_input.dateChanged.connect(
            lambda date: presenter.update_field("date", date.toString("yyyy-MM-dd"))
        )
        for name, line_edit in self.inputs.items():
            line_edit.textEdited.connect(
                lambda text, field=name: presenter.update_field(field, text)
            )
        self.add_batch_button.clicked.connect(lambda: presenter.add_batch())
        self.remove_batch_button.clicked.connect(self._remove_selected_batch)
        self.add_adjustment_button.clicked.connect(lambda: presenter.add_adjustment())
        self.clear_button.clicked.connect(lambda: presenter.reset_all())
        self.print_button.clicked.connect(lambda: presenter.print_current())
        self.position_combo.currentIndexChanged.connect(
            lambda _idx: presenter.set_print_position(self.position_combo.currentData())
        )

        queue = self.queue_panel
        queue.enqueue_clicked.connect(lambda: presenter.enqueue_current())
        queue.edit_requested.connect(presenter.edit_snapshot)
        queue.commit_clicked.connect(lambda: presenter.commit_edit())
        queue.cancel_clicked.connect(presenter.cancel_edit)
        queue.remove_requested.connect(presenter.remove_snapshot)
        queue.move_requested.connect(presenter.move_snapshot)
        queue.print_queue_clicked.connect(lambda: presenter.print_queue())

    # ------------------------------------------------------------------ #
    # SettlementView implementation
    # ------------------------------------------------------------------ #
    def apply_draft(self, transaction: TransactionInput) -> None:
        with QSignalBlocker(self.date_input):
            date = QDate.fromString(transaction.date, "yyyy-MM-dd")
            self.date_input.setDate(date if date.isValid() else QDate.currentDate())
        self.customer_input.setText(transaction.customer_name)
        for name, line_edit in self.inputs.items():
            line_edit.setText(getattr(transaction, name))

        self.batch_list.clear()
        for number, batch in enumerate(transaction.batches, start=1):
            item = QListWidgetItem(
                f"{number}. {normalize(batch.weight):.2f} kg - {floor_count(batch.bags)} bags"
            )
            item.setData(Qt.UserRole, batch.id)
            self.batch_list.addItem(item)

        self._rebuild_adjustments(transaction)

    def apply_document(self, lines: Sequence[DocumentLine], result: SettlementResult) -> None:
        self.ledger_preview.set_lines(lines)

    def apply_summary(self, rows: Sequence[SummaryRow]) -> None:
        self.summary_panel.set_rows(rows)

    def apply_queue(self, snapshots: Sequence[QueueSnapshot], editing_id: Optional[int]) -> None:
        self.queue_panel.set_snapshots(snapshots, editing_id)

    def apply_print_position(self, position: PrintPosition) -> None:
        with QSignalBlocker(self.position_combo):
            self.position_combo.setCurrentIndex(self.position_combo.findData(position.value))

    def show_status(self, message: str, timeout: int = 3000, level: str = "info") -> None:
        self._status_helper.show(message, timeout=timeout, level=level)

    def confirm_reset(self) -> bool:
        reply = QMessageBox.question(
            self,
            "Clear All",
            "Clear all inputs and stored data?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        return reply == QMessageBox.Yes

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _remove_selected_batch(self) -> None:
        item = self.batch_list.currentItem()
        if item is not None:
            self.presenter.remove_batch(item.data(Qt.UserRole))

    def _rebuild_adjustments(self, transaction: TransactionInput) -> None:
        while self.adjustments_layout.count():
            widget = self.adjustments_layout.takeAt(0).widget()
            if widget is not None:
                widget.deleteLater()
        self._adjustment_rows.clear()

        for entry in transaction.adjustments:
            row = QWidget()
            row_layout = QHBoxLayout(row)
            row_layout.setContentsMargins(0, 0, 0, 0)
            sign = QComboBox()
            sign.addItems([AdjustmentSign.DEBIT.value, AdjustmentSign.CREDIT.value])
            sign.setCurrentText(entry.sign.value)
            label = QLineEdit(entry.label)
            amount = QLineEdit(entry.amount)
            amount.setPlaceholderText("0")
            note = QLineEdit(entry.note)
            note.setPlaceholderText("Note")
            remove = QPushButton("Remove")

            entry_id = entry.id
            sign.currentTextChanged.connect(
                lambda text, eid=entry_id: self.presenter.update_adjustment(eid, "sign", text)
            )
            for field_name, widget in (("label", label), ("amount", amount), ("note", note)):
                widget.textEdited.connect(
                    lambda text, eid=entry_id, f=field_name: self.presenter.update_adjustment(eid, f, text)
                )
            remove.clicked.connect(lambda _checked=False, eid=entry_id: self.presenter.remove_adjustment(eid))

            for widget in (sign, label, amount, note, remove):
                row_layout.addWidget(widget)
            self.adjustments_layout.addWidget(row)
            self._adjustment_rows[entry_id] = {
                "sign": sign, "label": label, "amount": amount, "note": note, "remove": remove,
            }

        self.adjustments_hint.setVisible(not transaction.adjustments)

    def adjustment_widgets(self, entry_id: str) -> Dict[str, QWidget]:
        return self._adjustment_rows.get(entry_id, {})
