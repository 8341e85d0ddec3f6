"""Print queue panel component."""

from __future__ import annotations

from typing import Optional, Sequence

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QGridLayout,
    QGroupBox,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
)

from paddycalc.domain.settlement_models import QueueSnapshot
from paddycalc.services.document_renderer import format_ledger_amount
from paddycalc.services.print_layout import SLOT_ORDER
from paddycalc.services.print_queue import QUEUE_CAPACITY


class QueuePanel(QGroupBox):
    """List of queued ledgers with edit/commit/cancel/remove/reorder actions."""

    enqueue_clicked = pyqtSignal()
    edit_requested = pyqtSignal(int)
    commit_clicked = pyqtSignal()
    cancel_clicked = pyqtSignal()
    remove_requested = pyqtSignal(int)
    move_requested = pyqtSignal(int, int)
    print_queue_clicked = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(f"Print queue (0/{QUEUE_CAPACITY})", parent)
        self._editing_id: Optional[int] = None
        self._setup_ui()
        self._connect_signals()
        self._update_buttons()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        self.list_widget = QListWidget()
        self.list_widget.setMaximumHeight(120)
        layout.addWidget(self.list_widget)

        buttons = QGridLayout()
        self.enqueue_button = QPushButton("Add to queue")
        self.edit_button = QPushButton("Edit")
        self.commit_button = QPushButton("Save edit")
        self.cancel_button = QPushButton("Cancel edit")
        self.remove_button = QPushButton("Remove")
        self.up_button = QPushButton("Move up")
        self.down_button = QPushButton("Move down")
        self.print_button = QPushButton("Print queue")
        for idx, button in enumerate(
            (
                self.enqueue_button,
                self.edit_button,
                self.commit_button,
                self.cancel_button,
                self.remove_button,
                self.up_button,
                self.down_button,
                self.print_button,
            )
        ):
            buttons.addWidget(button, idx // 4, idx % 4)
        layout.addLayout(buttons)

    def _connect_signals(self) -> None:
        self.enqueue_button.clicked.connect(lambda: self.enqueue_clicked.emit())
        self.commit_button.clicked.connect(lambda: self.commit_clicked.emit())
        self.cancel_button.clicked.connect(lambda: self.cancel_clicked.emit())
        self.print_button.clicked.connect(lambda: self.print_queue_clicked.emit())
        self.edit_button.clicked.connect(self._emit_edit)
        self.remove_button.clicked.connect(self._emit_remove)
        self.up_button.clicked.connect(lambda: self._emit_move(-1))
        self.down_button.clicked.connect(lambda: self._emit_move(1))
        self.list_widget.currentRowChanged.connect(lambda _row: self._update_buttons())

    def set_snapshots(self, snapshots: Sequence[QueueSnapshot], editing_id: Optional[int]) -> None:
        current = self.selected_id()
        self._editing_id = editing_id
        self.list_widget.clear()
        for slot, snapshot in zip(SLOT_ORDER, snapshots):
            name = snapshot.transaction.customer_name.strip() or "Customer Name"
            text = (
                f"#{snapshot.id}  {name}  {snapshot.transaction.date}"
                f"  {format_ledger_amount(snapshot.result.final)}"
            )
            # A lone snapshot prints at the chosen position instead.
            if len(snapshots) > 1:
                text += f"  [{slot.value}]"
            if snapshot.id == editing_id:
                text += "  (editing)"
            item = QListWidgetItem(text)
            item.setData(Qt.UserRole, snapshot.id)
            self.list_widget.addItem(item)
            if snapshot.id == current:
                self.list_widget.setCurrentItem(item)
        self.setTitle(f"Print queue ({len(snapshots)}/{QUEUE_CAPACITY})")
        self._update_buttons()

    def selected_id(self) -> Optional[int]:
        item = self.list_widget.currentItem()
        return None if item is None else item.data(Qt.UserRole)

    def _emit_edit(self) -> None:
        snapshot_id = self.selected_id()
        if snapshot_id is not None:
            self.edit_requested.emit(snapshot_id)

    def _emit_remove(self) -> None:
        snapshot_id = self.selected_id()
        if snapshot_id is not None:
            self.remove_requested.emit(snapshot_id)

    def _emit_move(self, delta: int) -> None:
        row = self.list_widget.currentRow()
        if row >= 0:
            self.move_requested.emit(row, delta)

    def _update_buttons(self) -> None:
        count = self.list_widget.count()
        row = self.list_widget.currentRow()
        has_selection = row >= 0
        editing = self._editing_id is not None
        self.enqueue_button.setEnabled(count < QUEUE_CAPACITY)
        self.edit_button.setEnabled(has_selection)
        self.remove_button.setEnabled(has_selection)
        self.commit_button.setEnabled(editing)
        self.cancel_button.setEnabled(editing)
        self.up_button.setEnabled(has_selection and row > 0)
        self.down_button.setEnabled(has_selection and row < count - 1)
        self.print_button.setEnabled(count > 0)
