"""Presenter layer modules."""

from .settlement_presenter import (
    NO_PRINTER_MESSAGE,
    PrintableLedger,
    PrintService,
    SettlementPresenter,
    SettlementView,
    to_printable,
)

__all__ = [
    "NO_PRINTER_MESSAGE",
    "PrintableLedger",
    "PrintService",
    "SettlementPresenter",
    "SettlementView",
    "to_printable",
]
