"""Domain models supporting settlement calculations."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date as _date
from enum import Enum
from typing import Tuple


DEFAULT_TARE_PER_BAG = "2"
DEFAULT_ADJUSTMENT_LABEL = "Borrow"


def new_entry_id() -> str:
    """Return a fresh identifier for a batch or adjustment row."""
    return uuid.uuid4().hex


def today_iso() -> str:
    return _date.today().isoformat()


class AdjustmentSign(Enum):
    """Direction of an adjustment applied to the final figure."""

    CREDIT = "+"
    DEBIT = "-"

    @classmethod
    def from_value(cls, value) -> "AdjustmentSign":
        """Map stored or UI text to a sign; anything but '+' is a deduction."""
        if isinstance(value, AdjustmentSign):
            return value
        if str(value or "").strip() == "+":
            return cls.CREDIT
        return cls.DEBIT

    @property
    def factor(self) -> int:
        return 1 if self is AdjustmentSign.CREDIT else -1


@dataclass(frozen=True)
class BatchEntry:
    """A truckload captured from the live weight/bag fields."""

    id: str
    weight: str = ""
    bags: str = ""


@dataclass(frozen=True)
class AdjustmentEntry:
    """A signed borrow or credit entry in the adjustment ledger."""

    id: str
    sign: AdjustmentSign = AdjustmentSign.DEBIT
    amount: str = ""
    label: str = DEFAULT_ADJUSTMENT_LABEL
    note: str = ""


@dataclass(frozen=True)
class TransactionInput:
    """Raw entered figures for one purchase transaction.

    Numeric fields keep the text the user typed; they are normalized only when
    the settlement is computed.
    """

    customer_name: str = ""
    date: str = field(default_factory=today_iso)
    total_weight: str = ""
    bags: str = ""
    rate_per_quintal: str = ""
    labour_per_bag: str = ""
    tare_per_bag: str = DEFAULT_TARE_PER_BAG
    batches: Tuple[BatchEntry, ...] = ()
    adjustments: Tuple[AdjustmentEntry, ...] = ()


@dataclass(frozen=True)
class SettlementResult:
    """Derived figures for a transaction."""

    weight: float = 0.0
    bags: int = 0
    total_tare: float = 0.0
    net_weight: float = 0.0
    amount: float = 0.0
    labour_charge: float = 0.0
    adjustments_signed: float = 0.0
    final: float = 0.0

    @property
    def subtotal(self) -> float:
        """Amount after labour, before adjustments."""
        return self.amount - self.labour_charge


@dataclass(frozen=True)
class QueueSnapshot:
    """A captured transaction held in the print queue."""

    id: int
    transaction: TransactionInput
    result: SettlementResult


@dataclass(frozen=True)
class SessionState:
    """Everything persisted between runs."""

    draft: TransactionInput = field(default_factory=TransactionInput)
    queue: Tuple[QueueSnapshot, ...] = ()
    print_position: str = "top-right"
    id_counter: int = 1
