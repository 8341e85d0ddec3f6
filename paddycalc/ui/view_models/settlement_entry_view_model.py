from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from paddycalc.domain.settlement_models import (
    AdjustmentEntry,
    BatchEntry,
    SettlementResult,
    TransactionInput,
)
from paddycalc.services import adjustment_ledger, batch_aggregator
from paddycalc.services.settlement_calculator import compute_settlement

TEXT_FIELDS = (
    "customer_name",
    "date",
    "total_weight",
    "bags",
    "rate_per_quintal",
    "labour_per_bag",
    "tare_per_bag",
)


class SettlementEntryViewModel:
    """Pure-Python representation of the live settlement draft."""

    def __init__(self, transaction: Optional[TransactionInput] = None) -> None:
        self._draft = transaction or TransactionInput()

    # ------------------------------------------------------------------ #
    # Field access
    # ------------------------------------------------------------------ #
    def set_field(self, name: str, value) -> bool:
        """Update one text field; unknown names are ignored."""
        if name not in TEXT_FIELDS:
            return False
        self._draft = replace(self._draft, **{name: "" if value is None else str(value)})
        return True

    def field(self, name: str) -> str:
        return getattr(self._draft, name) if name in TEXT_FIELDS else ""

    def batches(self) -> Sequence[BatchEntry]:
        return self._draft.batches

    def adjustments(self) -> Sequence[AdjustmentEntry]:
        return self._draft.adjustments

    # ------------------------------------------------------------------ #
    # Batches
    # ------------------------------------------------------------------ #
    def add_batch(self) -> Optional[BatchEntry]:
        """Capture the live weight/bags as a batch and clear them."""
        draft = self._draft
        batches = batch_aggregator.add_batch(draft.total_weight, draft.bags, draft.batches)
        if len(batches) == len(draft.batches):
            return None
        self._draft = replace(draft, batches=batches, total_weight="", bags="")
        return batches[-1]

    def remove_batch(self, batch_id: str) -> None:
        self._draft = replace(
            self._draft, batches=batch_aggregator.remove_batch(self._draft.batches, batch_id)
        )

    # ------------------------------------------------------------------ #
    # Adjustments
    # ------------------------------------------------------------------ #
    def add_adjustment(self) -> AdjustmentEntry:
        entries, entry = adjustment_ledger.add_adjustment(self._draft.adjustments)
        self._draft = replace(self._draft, adjustments=entries)
        return entry

    def update_adjustment(self, entry_id: str, field: str, value) -> None:
        self._draft = replace(
            self._draft,
            adjustments=adjustment_ledger.update_adjustment(
                self._draft.adjustments, entry_id, field, value
            ),
        )

    def remove_adjustment(self, entry_id: str) -> None:
        self._draft = replace(
            self._draft,
            adjustments=adjustment_ledger.remove_adjustment(self._draft.adjustments, entry_id),
        )

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #
    def capture_input(self) -> TransactionInput:
        """Return a detached copy of the draft."""
        draft = self._draft
        return replace(
            draft,
            batches=tuple(replace(batch) for batch in draft.batches),
            adjustments=tuple(replace(entry) for entry in draft.adjustments),
        )

    def load_input(self, transaction: TransactionInput) -> None:
        self._draft = replace(
            transaction,
            batches=tuple(transaction.batches),
            adjustments=tuple(transaction.adjustments),
        )

    def reset(self) -> None:
        self._draft = TransactionInput()

    def compute(self) -> SettlementResult:
        return compute_settlement(self._draft)
