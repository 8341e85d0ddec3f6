import json
import logging

import pytest

from paddycalc.domain.settlement_models import SessionState
from paddycalc.exceptions import SessionStateError
from paddycalc.persistence.session_store import (
    SessionStore,
    session_from_dict,
    session_to_dict,
)
from paddycalc.services.print_queue import PrintQueue
from paddycalc.services.settlement_calculator import compute_settlement
from tests.factories import adjustment, batch, reference_transaction


def _state():
    queue = PrintQueue()
    for name in ("A", "B"):
        txn = reference_transaction(customer_name=name, adjustments=[adjustment("-", "50")])
        queue.enqueue(txn, compute_settlement(txn))
    draft = reference_transaction(
        total_weight="120",
        batches=[batch("500", "5")],
        adjustments=[adjustment("+", "25", "Bonus", "grade A")],
    )
    return SessionState(
        draft=draft,
        queue=tuple(queue.snapshots()),
        print_position="bottom-left",
        id_counter=queue.next_id,
    )


def test_blob_uses_camel_case_keys():
    blob = session_to_dict(_state())

    for key in (
        "customerName",
        "date",
        "totalWeight",
        "bags",
        "ratePerQuintal",
        "labourPerBag",
        "tarePerBag",
        "batches",
        "adjustments",
        "printQueue",
        "printPosition",
        "idCounter",
    ):
        assert key in blob
    assert blob["idCounter"] == 3
    assert blob["printQueue"][0]["id"] == 1
    assert blob["adjustments"][0]["sign"] == "+"


def test_store_restores_saved_session(memory_settings):
    store = SessionStore(memory_settings)
    state = _state()

    store.save_state(state)
    restored = store.load_state()

    assert restored == state


def test_results_are_recomputed_on_load():
    blob = session_to_dict(_state())
    blob["printQueue"][0]["ratePerQuintal"] = "1000"

    restored = session_from_dict(blob)

    assert restored.queue[0].result.amount == pytest.approx(9800.0)


def test_missing_fields_take_defaults():
    restored = session_from_dict({})

    assert restored.draft.tare_per_bag == "2"
    assert restored.draft.date
    assert restored.queue == ()
    assert restored.print_position == "top-right"
    assert restored.id_counter == 1


def test_malformed_blob_raises_session_state_error():
    with pytest.raises(SessionStateError):
        session_from_dict({"printQueue": [{"customerName": "no id"}]})
    with pytest.raises(SessionStateError):
        session_from_dict(["not", "a", "mapping"])


def test_load_returns_none_when_absent(memory_settings):
    assert SessionStore(memory_settings).load_state() is None


def test_corrupted_blob_is_discarded(memory_settings, caplog):
    store = SessionStore(memory_settings)
    store.set(store.key, "{not json")

    with caplog.at_level(logging.WARNING):
        assert store.load_state() is None
    assert "Discarding unreadable session state" in caplog.text


def test_wrong_shape_blob_is_discarded(memory_settings):
    store = SessionStore(memory_settings)
    store.set(store.key, json.dumps({"printQueue": "oops"}))

    assert store.load_state() is None


def test_clear_removes_blob(memory_settings):
    store = SessionStore(memory_settings)
    store.save_state(_state())

    store.clear()

    assert store.load_state() is None


def test_storage_failures_are_swallowed(broken_settings, caplog):
    store = SessionStore(broken_settings)

    with caplog.at_level(logging.WARNING):
        store.save_state(_state())
        assert store.load_state() is None
        store.clear()

    assert "Could not write" in caplog.text
    assert "Could not read" in caplog.text


def test_default_backend_comes_from_app_settings(settings_stub):
    state = _state()
    SessionStore().save_state(state)

    assert SessionStore().load_state() == state
    assert settings_stub().contains("session/paddy-calculator-v2")
