"""Presenter for the settlement entry experience."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from paddycalc.domain.settlement_models import (
    QueueSnapshot,
    SessionState,
    SettlementResult,
    TransactionInput,
)
from paddycalc.exceptions import PrintUnavailableError
from paddycalc.persistence.session_store import SessionStore
from paddycalc.services.document_renderer import (
    DocumentLine,
    SummaryRow,
    render_document,
    render_summary,
)
from paddycalc.services.print_layout import PageLayout, PrintPosition, layout_page
from paddycalc.services.print_queue import PrintQueue
from paddycalc.services.settlement_calculator import compute_settlement
from paddycalc.ui.view_models import SettlementEntryViewModel

NO_PRINTER_MESSAGE = (
    "No printer available. Install a printer or set a PDF output file in settings."
)


@dataclass(frozen=True)
class PrintableLedger:
    """A rendered ledger handed to the print subsystem."""

    title: str
    lines: Sequence[DocumentLine]


class SettlementView(Protocol):
    """Interface implemented by the Qt widget so the presenter can talk to it."""

    def apply_draft(self, transaction: TransactionInput) -> None:
        """Show the draft's fields, batches and adjustments."""

    def apply_document(self, lines: Sequence[DocumentLine], result: SettlementResult) -> None:
        """Update the live ledger preview."""

    def apply_summary(self, rows: Sequence[SummaryRow]) -> None:
        """Update the totals display."""

    def apply_queue(self, snapshots: Sequence[QueueSnapshot], editing_id: Optional[int]) -> None:
        """Show the print queue and which entry is being edited."""

    def apply_print_position(self, position: PrintPosition) -> None:
        """Select the print position in the UI."""

    def show_status(self, message: str, timeout: int = 3000, level: str = "info") -> None:
        """Display a status message to the user."""

    def confirm_reset(self) -> bool:
        """Ask whether all inputs and stored data may be cleared."""


class PrintService(Protocol):
    """Print subsystem collaborator."""

    def is_available(self) -> bool:
        """Return True when a usable print target exists."""

    def submit(self, layout: PageLayout) -> None:
        """Start printing ``layout`` without blocking."""


def to_printable(transaction: TransactionInput, result: SettlementResult) -> PrintableLedger:
    title = transaction.customer_name.strip() or "Settlement"
    return PrintableLedger(title=title, lines=render_document(transaction, result))


class SettlementPresenter:
    """Session controller: owns the live draft, the print queue and persistence.

    Every mutation recomputes the settlement, refreshes the view and saves
    the session before returning.
    """

    def __init__(
        self,
        view: SettlementView,
        store: SessionStore,
        print_service: Optional[PrintService] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._view = view
        self._store = store
        self._print_service = print_service
        self._logger = logger or logging.getLogger(__name__)
        self._view_model = SettlementEntryViewModel()
        self._queue = PrintQueue()
        self._print_position = PrintPosition.default()

    @property
    def view_model(self) -> SettlementEntryViewModel:
        return self._view_model

    @property
    def queue(self) -> PrintQueue:
        return self._queue

    @property
    def print_position(self) -> PrintPosition:
        return self._print_position

    # ------------------------------------------------------------------ #
    # Session lifecycle
    # ------------------------------------------------------------------ #
    def load_session(self) -> None:
        """Restore the stored session (if any) and populate the view."""
        state = self._store.load_state()
        if state is not None:
            self._view_model.load_input(state.draft)
            self._queue = PrintQueue(state.queue, next_id=state.id_counter)
            self._print_position = PrintPosition.from_value(state.print_position)
            self._logger.info("Restored session with %s queued entries", len(self._queue))
        self._view.apply_draft(self._view_model.capture_input())
        self._view.apply_print_position(self._print_position)
        self._publish_queue()
        self.refresh()

    def reset_all(self) -> bool:
        """Clear the draft and the queue after confirmation.

        The id counter survives so queue ids are never handed out twice.
        """
        if not self._view.confirm_reset():
            return False
        self._view_model.reset()
        self._queue.clear()
        self._view.apply_draft(self._view_model.capture_input())
        self._publish_queue()
        self._after_change()
        self._view.show_status("Cleared all inputs.", 2000)
        self._logger.info("Session reset; next queue id %s", self._queue.next_id)
        return True

    def refresh(self) -> SettlementResult:
        """Recompute the settlement and push the ledger to the view."""
        transaction = self._view_model.capture_input()
        result = compute_settlement(transaction)
        self._view.apply_document(render_document(transaction, result), result)
        self._view.apply_summary(render_summary(transaction, result))
        return result

    # ------------------------------------------------------------------ #
    # Draft edits
    # ------------------------------------------------------------------ #
    def update_field(self, name: str, value) -> None:
        if self._view_model.set_field(name, value):
            self._after_change()

    def add_batch(self):
        entry = self._view_model.add_batch()
        if entry is None:
            return None
        self._view.apply_draft(self._view_model.capture_input())
        self._after_change()
        return entry

    def remove_batch(self, batch_id: str) -> None:
        self._view_model.remove_batch(batch_id)
        self._view.apply_draft(self._view_model.capture_input())
        self._after_change()

    def add_adjustment(self):
        entry = self._view_model.add_adjustment()
        self._view.apply_draft(self._view_model.capture_input())
        self._after_change()
        return entry

    def update_adjustment(self, entry_id: str, field: str, value) -> None:
        self._view_model.update_adjustment(entry_id, field, value)
        self._after_change()

    def remove_adjustment(self, entry_id: str) -> None:
        self._view_model.remove_adjustment(entry_id)
        self._view.apply_draft(self._view_model.capture_input())
        self._after_change()

    def set_print_position(self, value) -> None:
        self._print_position = PrintPosition.from_value(value)
        self._persist()

    # ------------------------------------------------------------------ #
    # Queue transitions
    # ------------------------------------------------------------------ #
    def enqueue_current(self) -> Optional[QueueSnapshot]:
        snapshot = self._queue.enqueue(
            self._view_model.capture_input(), self._view_model.compute()
        )
        if snapshot is None:
            return None
        self._logger.debug("Queued snapshot %s", snapshot.id)
        self._publish_queue()
        self._persist()
        return snapshot

    def edit_snapshot(self, snapshot_id: int) -> bool:
        snapshot = self._queue.edit(snapshot_id)
        if snapshot is None:
            return False
        self._view_model.load_input(snapshot.transaction)
        self._view.apply_draft(self._view_model.capture_input())
        self._publish_queue()
        self._after_change()
        return True

    def commit_edit(self) -> bool:
        editing_id = self._queue.editing_id
        if editing_id is None:
            return False
        snapshot = self._queue.commit(
            editing_id, self._view_model.capture_input(), self._view_model.compute()
        )
        self._publish_queue()
        self._persist()
        return snapshot is not None

    def cancel_edit(self) -> None:
        self._queue.cancel()
        self._publish_queue()

    def remove_snapshot(self, snapshot_id: int) -> bool:
        removed = self._queue.remove(snapshot_id)
        if removed:
            self._publish_queue()
            self._persist()
        return removed

    def move_snapshot(self, index: int, delta: int) -> bool:
        moved = self._queue.move(index, delta)
        if moved:
            self._publish_queue()
            self._persist()
        return moved

    # ------------------------------------------------------------------ #
    # Printing
    # ------------------------------------------------------------------ #
    def print_current(self) -> bool:
        """Print the live draft at the chosen position."""
        transaction = self._view_model.capture_input()
        ledger = to_printable(transaction, compute_settlement(transaction))
        return self._submit([ledger])

    def print_queue(self) -> bool:
        """Print every queued snapshot on one page."""
        snapshots = self._queue.snapshots()
        if not snapshots:
            self._view.show_status("Print queue is empty.", 2500, "warning")
            return False
        return self._submit([to_printable(snap.transaction, snap.result) for snap in snapshots])

    def _submit(self, ledgers: Sequence[PrintableLedger]) -> bool:
        service = self._print_service
        if service is None or not service.is_available():
            self._logger.warning("Print requested but no print target is available")
            self._view.show_status(NO_PRINTER_MESSAGE, 5000, "error")
            return False
        layout = layout_page(ledgers, self._print_position)
        try:
            service.submit(layout)
        except PrintUnavailableError as exc:
            self._logger.warning("Print target unavailable: %s", exc)
            self._view.show_status(str(exc) or NO_PRINTER_MESSAGE, 5000, "error")
            return False
        self._view.show_status(f"Printing {len(ledgers)} ledger(s)...", 2500)
        return True

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _publish_queue(self) -> None:
        self._view.apply_queue(self._queue.snapshots(), self._queue.editing_id)

    def _after_change(self) -> None:
        self.refresh()
        self._persist()

    def _persist(self) -> None:
        self._store.save_state(
            SessionState(
                draft=self._view_model.capture_input(),
                queue=tuple(self._queue.snapshots()),
                print_position=self._print_position.value,
                id_counter=self._queue.next_id,
            )
        )
