"""Reusable components for the settlement entry screen."""

from .ledger_preview import LedgerPreview
from .queue_panel import QueuePanel
from .summary_panel import SummaryPanel

__all__ = ["LedgerPreview", "QueuePanel", "SummaryPanel"]
