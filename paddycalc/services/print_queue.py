"""Print queue of captured transactions with edit-in-place."""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from paddycalc.domain.settlement_models import (
    QueueSnapshot,
    SettlementResult,
    TransactionInput,
)

logger = logging.getLogger(__name__)

QUEUE_CAPACITY = 4


class PrintQueue:
    """Holds up to four snapshots; order drives page slot assignment.

    Operations that cannot apply (queue full, unknown id, index out of
    range) are silent no-ops. ``next_id`` only ever grows so ids are never
    reused, including across restarts when it is persisted.
    """

    def __init__(
        self,
        snapshots: Iterable[QueueSnapshot] = (),
        *,
        next_id: int = 1,
        capacity: int = QUEUE_CAPACITY,
    ) -> None:
        self._capacity = capacity
        self._snapshots: list[QueueSnapshot] = list(snapshots)[:capacity]
        highest = max((snap.id for snap in self._snapshots), default=0)
        self._next_id = max(int(next_id), highest + 1, 1)
        self._editing_id: Optional[int] = None

    # ------------------------------------------------------------------ #
    # Read access
    # ------------------------------------------------------------------ #
    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def editing_id(self) -> Optional[int]:
        return self._editing_id

    @property
    def capacity(self) -> int:
        return self._capacity

    def snapshots(self) -> Sequence[QueueSnapshot]:
        return tuple(self._snapshots)

    def is_full(self) -> bool:
        return len(self._snapshots) >= self._capacity

    def get(self, snapshot_id: int) -> Optional[QueueSnapshot]:
        index = self._index_of(snapshot_id)
        return None if index is None else self._snapshots[index]

    def __len__(self) -> int:
        return len(self._snapshots)

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #
    def enqueue(
        self, transaction: TransactionInput, result: SettlementResult
    ) -> Optional[QueueSnapshot]:
        """Append a snapshot of ``transaction``; returns None when full."""
        if self.is_full():
            logger.debug("Print queue full (%s); enqueue ignored", self._capacity)
            return None
        snapshot = QueueSnapshot(id=self._next_id, transaction=transaction, result=result)
        self._next_id += 1
        self._snapshots.append(snapshot)
        return snapshot

    def edit(self, snapshot_id: int) -> Optional[QueueSnapshot]:
        """Mark a snapshot as being edited and return it for loading."""
        snapshot = self.get(snapshot_id)
        if snapshot is None:
            return None
        self._editing_id = snapshot_id
        return snapshot

    def commit(
        self, snapshot_id: int, transaction: TransactionInput, result: SettlementResult
    ) -> Optional[QueueSnapshot]:
        """Overwrite a snapshot with the live draft and leave edit mode."""
        index = self._index_of(snapshot_id)
        if index is None:
            return None
        snapshot = QueueSnapshot(id=snapshot_id, transaction=transaction, result=result)
        self._snapshots[index] = snapshot
        self._editing_id = None
        return snapshot

    def cancel(self) -> None:
        self._editing_id = None

    def remove(self, snapshot_id: int) -> bool:
        index = self._index_of(snapshot_id)
        if index is None:
            return False
        del self._snapshots[index]
        if self._editing_id == snapshot_id:
            self._editing_id = None
        return True

    def move(self, index: int, delta: int) -> bool:
        """Swap the snapshot at ``index`` with its neighbour at ``index + delta``."""
        if delta not in (-1, 1):
            return False
        target = index + delta
        if not (0 <= index < len(self._snapshots)) or not (0 <= target < len(self._snapshots)):
            return False
        items = self._snapshots
        items[index], items[target] = items[target], items[index]
        return True

    def clear(self) -> None:
        self._snapshots.clear()
        self._editing_id = None

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _index_of(self, snapshot_id: int) -> Optional[int]:
        for idx, snapshot in enumerate(self._snapshots):
            if snapshot.id == snapshot_id:
                return idx
        return None
