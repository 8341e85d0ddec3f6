import logging
from typing import List, Optional, Sequence

import pytest

from paddycalc.domain.settlement_models import QueueSnapshot, SessionState
from paddycalc.exceptions import PrintUnavailableError
from paddycalc.presenter import NO_PRINTER_MESSAGE, SettlementPresenter, to_printable
from paddycalc.services.document_renderer import LineRole
from paddycalc.services.print_layout import PrintPosition, Quadrant
from paddycalc.services.settlement_calculator import compute_settlement
from tests.factories import reference_transaction


class FakeView:
    def __init__(self):
        self.drafts = []
        self.documents = []
        self.summaries = []
        self.queues: List[tuple] = []
        self.positions: List[PrintPosition] = []
        self.statuses: List[tuple] = []
        self.confirm_answer = True

    def apply_draft(self, transaction):
        self.drafts.append(transaction)

    def apply_document(self, lines, result):
        self.documents.append((tuple(lines), result))

    def apply_summary(self, rows):
        self.summaries.append(tuple(rows))

    def apply_queue(self, snapshots: Sequence[QueueSnapshot], editing_id: Optional[int]):
        self.queues.append((tuple(snapshots), editing_id))

    def apply_print_position(self, position):
        self.positions.append(position)

    def show_status(self, message, timeout=3000, level="info"):
        self.statuses.append((message, timeout, level))

    def confirm_reset(self):
        return self.confirm_answer

    @property
    def last_final(self):
        lines, _ = self.documents[-1]
        return next(line.text for line in lines if line.role is LineRole.FINAL)


class FakeStore:
    def __init__(self, state: Optional[SessionState] = None):
        self.state = state
        self.saved: List[SessionState] = []

    def load_state(self):
        return self.state

    def save_state(self, state):
        self.saved.append(state)
        self.state = state


class FakePrintService:
    def __init__(self, available=True, error: Optional[Exception] = None):
        self.available = available
        self.error = error
        self.layouts = []

    def is_available(self):
        return self.available

    def submit(self, layout):
        if self.error is not None:
            raise self.error
        self.layouts.append(layout)


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def printer():
    return FakePrintService()


@pytest.fixture
def presenter(view, store, printer):
    p = SettlementPresenter(view, store, printer, logger=logging.getLogger("test"))
    p.load_session()
    return p


def _fill_reference(presenter, name="Ramesh"):
    txn = reference_transaction(customer_name=name)
    for field in ("customer_name", "date", "total_weight", "bags", "rate_per_quintal", "labour_per_bag"):
        presenter.update_field(field, getattr(txn, field))


def test_load_session_populates_view_with_defaults(presenter, view):
    assert len(view.drafts) == 1
    assert view.positions == [PrintPosition.TOP_RIGHT]
    assert view.queues == [((), None)]
    assert view.last_final == "0=00"


def test_load_session_restores_stored_state(view, printer):
    draft = reference_transaction()
    stored = SessionState(draft=draft, print_position="full", id_counter=7)
    presenter = SettlementPresenter(view, FakeStore(stored), printer)

    presenter.load_session()

    assert view.drafts[-1] == draft
    assert presenter.print_position is PrintPosition.FULL
    assert presenter.queue.next_id == 7
    assert view.last_final == "14,500=00"


def test_field_edits_refresh_and_persist(presenter, view, store):
    _fill_reference(presenter)

    assert view.last_final == "14,500=00"
    assert store.saved[-1].draft.total_weight == "1000"
    assert view.summaries[-1][-1].value == "14,500=00"


def test_unknown_field_is_ignored(presenter, store):
    presenter.update_field("bogus", "1")

    assert store.saved == []


def test_add_batch_clears_live_fields(presenter, view, store):
    presenter.update_field("total_weight", "500")
    presenter.update_field("bags", "5")

    entry = presenter.add_batch()

    assert entry is not None
    assert view.drafts[-1].total_weight == ""
    assert view.drafts[-1].batches == (entry,)
    assert store.saved[-1].draft.batches == (entry,)


def test_add_batch_without_input_does_nothing(presenter, view):
    drafts_before = len(view.drafts)

    assert presenter.add_batch() is None
    assert len(view.drafts) == drafts_before


def test_adjustments_flow_through_to_final(presenter, view):
    _fill_reference(presenter)
    entry = presenter.add_adjustment()
    presenter.update_adjustment(entry.id, "amount", "500")

    assert view.last_final == "14,000=00"

    presenter.remove_adjustment(entry.id)
    assert view.last_final == "14,500=00"


def test_enqueue_and_queue_capacity(presenter, view, store):
    _fill_reference(presenter)
    for _ in range(4):
        assert presenter.enqueue_current() is not None

    assert presenter.enqueue_current() is None
    snapshots, editing = view.queues[-1]
    assert [snap.id for snap in snapshots] == [1, 2, 3, 4]
    assert editing is None
    assert store.saved[-1].id_counter == 5


def test_edit_commit_cycle(presenter, view, store):
    _fill_reference(presenter, "First")
    first = presenter.enqueue_current()
    presenter.update_field("customer_name", "Second")
    presenter.enqueue_current()

    assert presenter.edit_snapshot(first.id) is True
    assert view.drafts[-1].customer_name == "First"
    assert view.queues[-1][1] == first.id

    presenter.update_field("rate_per_quintal", "2000")
    assert presenter.commit_edit() is True

    snapshots, editing = view.queues[-1]
    assert editing is None
    assert snapshots[0].id == first.id
    assert snapshots[0].result.amount == pytest.approx(19600.0)
    assert store.saved[-1].queue[0].transaction.rate_per_quintal == "2000"


def test_editing_another_snapshot_switches_target(presenter, view):
    _fill_reference(presenter, "A")
    first = presenter.enqueue_current()
    presenter.update_field("customer_name", "B")
    second = presenter.enqueue_current()

    assert presenter.edit_snapshot(first.id) is True
    assert presenter.edit_snapshot(second.id) is True
    assert view.drafts[-1].customer_name == "B"
    assert view.queues[-1][1] == second.id

    presenter.update_field("rate_per_quintal", "2000")
    assert presenter.commit_edit() is True

    snapshots, editing = view.queues[-1]
    assert editing is None
    assert [snap.transaction.customer_name for snap in snapshots] == ["A", "B"]
    assert snapshots[0].result.amount == pytest.approx(14700.0)
    assert snapshots[1].result.amount == pytest.approx(19600.0)


def test_commit_without_edit_is_noop(presenter):
    assert presenter.commit_edit() is False


def test_cancel_edit_keeps_snapshot(presenter, view, store):
    _fill_reference(presenter)
    snap = presenter.enqueue_current()
    presenter.edit_snapshot(snap.id)
    presenter.update_field("rate_per_quintal", "1")
    saves = len(store.saved)

    presenter.cancel_edit()

    assert presenter.queue.editing_id is None
    assert presenter.queue.get(snap.id) == snap
    assert len(store.saved) == saves


def test_remove_and_move_snapshots(presenter, store):
    for name in ("A", "B", "C"):
        presenter.update_field("customer_name", name)
        presenter.enqueue_current()

    assert presenter.move_snapshot(0, 1) is True
    assert [s.transaction.customer_name for s in presenter.queue.snapshots()] == ["B", "A", "C"]
    assert presenter.remove_snapshot(3) is True
    assert presenter.remove_snapshot(3) is False
    assert presenter.move_snapshot(0, -1) is False
    assert [s.id for s in store.saved[-1].queue] == [2, 1]


def test_reset_requires_confirmation(presenter, view, store):
    _fill_reference(presenter)
    view.confirm_answer = False

    assert presenter.reset_all() is False
    assert presenter.view_model.field("total_weight") == "1000"


def test_reset_clears_draft_and_queue_but_keeps_counter(presenter, view, store):
    _fill_reference(presenter)
    presenter.enqueue_current()
    presenter.enqueue_current()

    assert presenter.reset_all() is True

    assert view.drafts[-1].total_weight == ""
    assert view.queues[-1] == ((), None)
    assert view.last_final == "0=00"
    assert store.saved[-1].queue == ()
    assert store.saved[-1].id_counter == 3
    assert view.statuses[-1][0] == "Cleared all inputs."
    assert presenter.enqueue_current().id == 3


def test_print_position_is_persisted(presenter, store):
    presenter.set_print_position("bottom-left")

    assert presenter.print_position is PrintPosition.BOTTOM_LEFT
    assert store.saved[-1].print_position == "bottom-left"


def test_print_current_uses_chosen_position(presenter, printer, view):
    _fill_reference(presenter)
    presenter.set_print_position("bottom-right")

    assert presenter.print_current() is True

    layout = printer.layouts[-1]
    placements = list(layout.placements())
    assert [region for region, _ in placements] == [Quadrant.BOTTOM_RIGHT]
    ledger = placements[0][1]
    assert ledger.title == "Ramesh"
    assert ledger.lines[0].text == "Ramesh"
    assert view.statuses[-1][0] == "Printing 1 ledger(s)..."


def test_print_queue_fills_quadrants_in_order(presenter, printer):
    for name in ("A", "B", "C"):
        presenter.update_field("customer_name", name)
        presenter.enqueue_current()
    presenter.set_print_position("full")

    assert presenter.print_queue() is True

    layout = printer.layouts[-1]
    assert not layout.is_full_page
    assert [(q, ledger.title) for q, ledger in layout.placements()] == [
        (Quadrant.TOP_LEFT, "A"),
        (Quadrant.TOP_RIGHT, "B"),
        (Quadrant.BOTTOM_LEFT, "C"),
    ]
    assert not layout.occupied(Quadrant.BOTTOM_RIGHT)


def test_print_empty_queue_warns(presenter, printer, view):
    assert presenter.print_queue() is False
    assert printer.layouts == []
    assert view.statuses[-1] == ("Print queue is empty.", 2500, "warning")


def test_print_without_printer_shows_error(view, store):
    presenter = SettlementPresenter(view, store, FakePrintService(available=False))
    presenter.load_session()

    assert presenter.print_current() is False
    assert view.statuses[-1] == (NO_PRINTER_MESSAGE, 5000, "error")


def test_print_without_service_shows_error(view, store):
    presenter = SettlementPresenter(view, store, None)

    assert presenter.print_current() is False
    assert view.statuses[-1][2] == "error"


def test_print_unavailable_during_submit(view, store):
    service = FakePrintService(error=PrintUnavailableError("printer went away"))
    presenter = SettlementPresenter(view, store, service)

    assert presenter.print_current() is False
    assert view.statuses[-1] == ("printer went away", 5000, "error")


def test_to_printable_titles_ledger_by_customer():
    named = reference_transaction(customer_name="  Ramesh ")
    blank = reference_transaction(customer_name="")

    ledger = to_printable(named, compute_settlement(named))
    assert ledger.title == "Ramesh"
    assert ledger.lines[0].role is LineRole.HEADER
    assert to_printable(blank, compute_settlement(blank)).title == "Settlement"
