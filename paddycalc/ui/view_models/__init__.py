"""View-model helpers for UI components."""

from .settlement_entry_view_model import (
    TEXT_FIELDS,
    SettlementEntryViewModel,
)

__all__ = [
    "TEXT_FIELDS",
    "SettlementEntryViewModel",
]
