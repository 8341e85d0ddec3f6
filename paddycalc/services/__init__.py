"""Pure settlement services: arithmetic, queue, rendering and layout."""

from .document_renderer import (
    DocumentLine,
    LineRole,
    SummaryRow,
    format_ledger_amount,
    render_document,
    render_summary,
)
from .numeric import normalize
from .print_layout import PageLayout, PrintPosition, Quadrant, compute_scale, layout_page
from .print_queue import QUEUE_CAPACITY, PrintQueue
from .settlement_calculator import compute_settlement

__all__ = [
    "DocumentLine",
    "LineRole",
    "PageLayout",
    "PrintPosition",
    "PrintQueue",
    "QUEUE_CAPACITY",
    "Quadrant",
    "SummaryRow",
    "compute_scale",
    "compute_settlement",
    "format_ledger_amount",
    "layout_page",
    "normalize",
    "render_document",
    "render_summary",
]
