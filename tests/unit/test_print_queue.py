import pytest

from paddycalc.services.print_queue import QUEUE_CAPACITY, PrintQueue
from paddycalc.services.settlement_calculator import compute_settlement
from tests.factories import reference_transaction, transaction


def _enqueue(queue, name="Ramesh", **overrides):
    txn = reference_transaction(customer_name=name, **overrides)
    return queue.enqueue(txn, compute_settlement(txn))


def test_enqueue_assigns_increasing_ids():
    queue = PrintQueue()

    first = _enqueue(queue, "A")
    second = _enqueue(queue, "B")

    assert (first.id, second.id) == (1, 2)
    assert queue.next_id == 3
    assert [snap.transaction.customer_name for snap in queue.snapshots()] == ["A", "B"]


def test_enqueue_is_noop_when_full():
    queue = PrintQueue()
    for idx in range(QUEUE_CAPACITY):
        _enqueue(queue, f"C{idx}")

    assert queue.is_full()
    assert _enqueue(queue, "overflow") is None
    assert len(queue) == QUEUE_CAPACITY
    assert queue.next_id == QUEUE_CAPACITY + 1


def test_ids_are_not_reused_after_remove_or_clear():
    queue = PrintQueue()
    first = _enqueue(queue)
    queue.remove(first.id)
    second = _enqueue(queue)
    queue.clear()
    third = _enqueue(queue)

    assert len({first.id, second.id, third.id}) == 3


def test_next_id_is_bumped_past_restored_snapshots():
    seed = PrintQueue()
    _enqueue(seed)
    _enqueue(seed)

    restored = PrintQueue(seed.snapshots(), next_id=1)

    assert restored.next_id == 3


def test_edit_commit_overwrites_in_place():
    queue = PrintQueue()
    _enqueue(queue, "A")
    target = _enqueue(queue, "B")
    _enqueue(queue, "C")

    assert queue.edit(target.id) == target
    assert queue.editing_id == target.id

    edited = reference_transaction(customer_name="B2", rate_per_quintal="2000")
    committed = queue.commit(target.id, edited, compute_settlement(edited))

    assert committed.id == target.id
    assert queue.editing_id is None
    names = [snap.transaction.customer_name for snap in queue.snapshots()]
    assert names == ["A", "B2", "C"]
    assert queue.get(target.id).result.amount == pytest.approx(980 * 20)


def test_edit_switches_to_another_snapshot():
    queue = PrintQueue()
    first = _enqueue(queue, "A")
    second = _enqueue(queue, "B")

    queue.edit(first.id)
    assert queue.edit(second.id) == second
    assert queue.editing_id == second.id

    edited = reference_transaction(customer_name="B2")
    queue.commit(queue.editing_id, edited, compute_settlement(edited))

    assert queue.get(first.id) == first
    assert queue.get(second.id).transaction.customer_name == "B2"
    assert queue.editing_id is None


def test_cancel_leaves_snapshot_untouched():
    queue = PrintQueue()
    snap = _enqueue(queue)
    queue.edit(snap.id)
    queue.cancel()

    assert queue.editing_id is None
    assert queue.get(snap.id) == snap


def test_edit_unknown_id_is_noop():
    queue = PrintQueue()
    _enqueue(queue)

    assert queue.edit(99) is None
    assert queue.editing_id is None


def test_commit_unknown_id_is_noop():
    queue = PrintQueue()
    txn = transaction()

    assert queue.commit(5, txn, compute_settlement(txn)) is None
    assert len(queue) == 0


def test_removing_edited_snapshot_clears_edit_mode():
    queue = PrintQueue()
    snap = _enqueue(queue)
    queue.edit(snap.id)

    assert queue.remove(snap.id) is True
    assert queue.editing_id is None
    assert queue.remove(snap.id) is False


def test_move_swaps_neighbours():
    queue = PrintQueue()
    for name in "ABC":
        _enqueue(queue, name)

    assert queue.move(0, 1) is True
    assert [s.transaction.customer_name for s in queue.snapshots()] == ["B", "A", "C"]
    assert queue.move(2, -1) is True
    assert [s.transaction.customer_name for s in queue.snapshots()] == ["B", "C", "A"]


@pytest.mark.parametrize("index, delta", [(0, -1), (2, 1), (5, 1), (-1, 1), (0, 2)])
def test_move_out_of_range_is_noop(index, delta):
    queue = PrintQueue()
    for name in "ABC":
        _enqueue(queue, name)

    assert queue.move(index, delta) is False
    assert [s.transaction.customer_name for s in queue.snapshots()] == ["A", "B", "C"]


def test_snapshot_is_independent_of_later_draft_changes():
    queue = PrintQueue()
    txn = reference_transaction()
    snap = queue.enqueue(txn, compute_settlement(txn))

    assert queue.snapshots()[0].transaction is snap.transaction
    assert snap.transaction.total_weight == "1000"
