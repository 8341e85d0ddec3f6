"""Ordered borrow/credit entries applied to the final settlement."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Tuple

from paddycalc.domain.settlement_models import (
    AdjustmentEntry,
    AdjustmentSign,
    new_entry_id,
)
from paddycalc.services.numeric import normalize

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"sign", "amount", "label", "note"})


def add_adjustment(
    entries: Iterable[AdjustmentEntry],
) -> Tuple[Tuple[AdjustmentEntry, ...], AdjustmentEntry]:
    """Append a default 'Borrow' deduction and return (entries, new entry)."""
    entry = AdjustmentEntry(id=new_entry_id())
    return tuple(entries) + (entry,), entry


def update_adjustment(
    entries: Iterable[AdjustmentEntry], entry_id: str, field: str, value
) -> Tuple[AdjustmentEntry, ...]:
    """Return entries with one field of ``entry_id`` replaced.

    Unknown ids and fields leave the ledger unchanged.
    """
    current = tuple(entries)
    if field not in EDITABLE_FIELDS:
        logger.debug("Ignoring update of unknown adjustment field %r", field)
        return current
    if field == "sign":
        value = AdjustmentSign.from_value(value)
    else:
        value = "" if value is None else str(value)
    return tuple(
        replace(entry, **{field: value}) if entry.id == entry_id else entry
        for entry in current
    )


def remove_adjustment(
    entries: Iterable[AdjustmentEntry], entry_id: str
) -> Tuple[AdjustmentEntry, ...]:
    return tuple(entry for entry in entries if entry.id != entry_id)


def signed_amount(entry: AdjustmentEntry) -> float:
    return entry.sign.factor * normalize(entry.amount)


def signed_total(entries: Iterable[AdjustmentEntry]) -> float:
    """Sum of the adjustments, credits positive and deductions negative."""
    return sum((signed_amount(entry) for entry in entries), 0.0)
