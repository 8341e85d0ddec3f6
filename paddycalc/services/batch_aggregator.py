"""Truckload batches merged into one transaction's totals."""
from __future__ import annotations

from typing import Iterable, Tuple

from paddycalc.domain.settlement_models import BatchEntry, TransactionInput, new_entry_id
from paddycalc.services.numeric import floor_count, normalize


def add_batch(
    live_weight: str, live_bags: str, batches: Iterable[BatchEntry]
) -> Tuple[BatchEntry, ...]:
    """Append the live weight/bag fields as a new batch.

    Nothing is appended when both live fields are blank. Clearing the live
    fields afterwards is the caller's job.
    """
    current = tuple(batches)
    weight = str(live_weight or "").strip()
    bags = str(live_bags or "").strip()
    if not weight and not bags:
        return current
    return current + (BatchEntry(id=new_entry_id(), weight=weight, bags=bags),)


def remove_batch(batches: Iterable[BatchEntry], batch_id: str) -> Tuple[BatchEntry, ...]:
    return tuple(batch for batch in batches if batch.id != batch_id)


def aggregate(transaction: TransactionInput) -> Tuple[float, int]:
    """Return combined (weight, bags) of the live fields plus every batch.

    Each batch's bag count is floored on its own before summing.
    """
    weight = normalize(transaction.total_weight)
    bags = floor_count(transaction.bags)
    for batch in transaction.batches:
        weight += normalize(batch.weight)
        bags += floor_count(batch.bags)
    return weight, bags
