"""Best-effort session persistence on top of QSettings."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

from paddycalc.domain.settlement_models import (
    DEFAULT_ADJUSTMENT_LABEL,
    DEFAULT_TARE_PER_BAG,
    AdjustmentEntry,
    AdjustmentSign,
    BatchEntry,
    QueueSnapshot,
    SessionState,
    TransactionInput,
    new_entry_id,
    today_iso,
)
from paddycalc.exceptions import SessionStateError
from paddycalc.infrastructure.app_constants import SESSION_KEY
from paddycalc.infrastructure.settings import get_app_settings
from paddycalc.services.print_layout import PrintPosition
from paddycalc.services.settlement_calculator import compute_settlement


# ---------------------------------------------------------------------- #
# Blob encoding
# ---------------------------------------------------------------------- #
def _text(value, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _transaction_fields(transaction: TransactionInput) -> Dict[str, Any]:
    return {
        "customerName": transaction.customer_name,
        "date": transaction.date,
        "totalWeight": transaction.total_weight,
        "bags": transaction.bags,
        "ratePerQuintal": transaction.rate_per_quintal,
        "labourPerBag": transaction.labour_per_bag,
        "tarePerBag": transaction.tare_per_bag,
        "batches": [
            {"id": batch.id, "weight": batch.weight, "bags": batch.bags}
            for batch in transaction.batches
        ],
        "adjustments": [
            {
                "id": entry.id,
                "sign": entry.sign.value,
                "amount": entry.amount,
                "label": entry.label,
                "note": entry.note,
            }
            for entry in transaction.adjustments
        ],
    }


def _transaction_from_fields(data: Mapping[str, Any]) -> TransactionInput:
    batches = tuple(
        BatchEntry(
            id=_text(raw.get("id")) or new_entry_id(),
            weight=_text(raw.get("weight")),
            bags=_text(raw.get("bags")),
        )
        for raw in data.get("batches") or ()
    )
    adjustments = tuple(
        AdjustmentEntry(
            id=_text(raw.get("id")) or new_entry_id(),
            sign=AdjustmentSign.from_value(raw.get("sign", "-")),
            amount=_text(raw.get("amount")),
            label=_text(raw.get("label"), DEFAULT_ADJUSTMENT_LABEL),
            note=_text(raw.get("note")),
        )
        for raw in data.get("adjustments") or ()
    )
    return TransactionInput(
        customer_name=_text(data.get("customerName")),
        date=_text(data.get("date")) or today_iso(),
        total_weight=_text(data.get("totalWeight")),
        bags=_text(data.get("bags")),
        rate_per_quintal=_text(data.get("ratePerQuintal")),
        labour_per_bag=_text(data.get("labourPerBag")),
        tare_per_bag=_text(data.get("tarePerBag"), DEFAULT_TARE_PER_BAG),
        batches=batches,
        adjustments=adjustments,
    )


def session_to_dict(state: SessionState) -> Dict[str, Any]:
    """Encode a session into the persisted blob shape."""
    blob = _transaction_fields(state.draft)
    blob["printQueue"] = [
        {"id": snapshot.id, **_transaction_fields(snapshot.transaction)}
        for snapshot in state.queue
    ]
    blob["printPosition"] = PrintPosition.from_value(state.print_position).value
    blob["idCounter"] = int(state.id_counter)
    return blob


def session_from_dict(data: Mapping[str, Any]) -> SessionState:
    """Decode a persisted blob; settlement results are recomputed."""
    if not isinstance(data, Mapping):
        raise SessionStateError(f"Session blob must be an object, got {type(data).__name__}")
    try:
        draft = _transaction_from_fields(data)
        queue = []
        for raw in data.get("printQueue") or ():
            transaction = _transaction_from_fields(raw)
            queue.append(
                QueueSnapshot(
                    id=int(raw["id"]),
                    transaction=transaction,
                    result=compute_settlement(transaction),
                )
            )
        id_counter = int(data.get("idCounter") or 1)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SessionStateError(f"Malformed session blob: {exc}") from exc

    return SessionState(
        draft=draft,
        queue=tuple(queue),
        print_position=PrintPosition.from_value(data.get("printPosition")).value,
        id_counter=id_counter,
    )


# ---------------------------------------------------------------------- #
# Store
# ---------------------------------------------------------------------- #
class SessionStore:
    """Read and write the session blob; every failure is logged and ignored."""

    def __init__(self, settings=None, *, key: str = SESSION_KEY, logger: Optional[logging.Logger] = None) -> None:
        self._settings = settings
        self._key = key
        self._logger = logger or logging.getLogger(__name__)

    @property
    def key(self) -> str:
        return self._key

    def _backend(self):
        if self._settings is None:
            self._settings = get_app_settings()
        return self._settings

    # --- Raw collaborator interface -------------------------------------
    def get(self, key: str) -> Optional[str]:
        try:
            value = self._backend().value(key, None)
        except Exception as exc:
            self._logger.warning("Could not read %s from settings: %s", key, exc)
            return None
        if value is None or value == "":
            return None
        return str(value)

    def set(self, key: str, blob: str) -> None:
        try:
            settings = self._backend()
            settings.setValue(key, blob)
            settings.sync()
        except Exception as exc:
            self._logger.warning("Could not write %s to settings: %s", key, exc)

    def remove(self, key: str) -> None:
        try:
            settings = self._backend()
            settings.remove(key)
            settings.sync()
        except Exception as exc:
            self._logger.warning("Could not remove %s from settings: %s", key, exc)

    # --- Session helpers -------------------------------------------------
    def load_state(self) -> Optional[SessionState]:
        """Return the stored session, or None when absent or unreadable."""
        raw = self.get(self._key)
        if raw is None:
            return None
        try:
            state = session_from_dict(json.loads(raw))
        except (ValueError, SessionStateError) as exc:
            self._logger.warning("Discarding unreadable session state: %s", exc)
            return None
        self._logger.debug(
            "Loaded session with %s queued snapshot(s), next id %s",
            len(state.queue),
            state.id_counter,
        )
        return state

    def save_state(self, state: SessionState) -> None:
        try:
            blob = json.dumps(session_to_dict(state))
        except (TypeError, ValueError) as exc:
            self._logger.warning("Could not encode session state: %s", exc)
            return
        self.set(self._key, blob)

    def clear(self) -> None:
        self.remove(self._key)
