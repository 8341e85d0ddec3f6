"""Canonical line model of a settlement ledger.

Both the on-screen preview and the printed page are built from
:func:`render_document`; they differ only in styling.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from typing import List, Tuple

from paddycalc.domain.settlement_models import (
    AdjustmentEntry,
    SettlementResult,
    TransactionInput,
)
from paddycalc.services.numeric import floor_count, normalize

CUSTOMER_PLACEHOLDER = "Customer Name"
LEDGER_GLYPH = "="
TERMINATOR_TEXT = "00000 = 00"
TIMES = "×"

_CENTS = Decimal("0.01")


class LineRole(Enum):
    """Semantic role of a rendered ledger line."""

    HEADER = "header"
    BATCH = "batch"
    WEIGHT_SUMMARY = "weight-summary"
    TARE = "tare"
    NET_TIMES_RATE = "net-times-rate"
    SEPARATOR = "separator"
    AMOUNT = "amount"
    LABOUR = "labour"
    RUNNING_SUBTOTAL = "running-subtotal"
    ADJUSTMENT = "adjustment"
    FINAL = "final"
    TERMINATOR = "terminator"


@dataclass(frozen=True)
class DocumentLine:
    """One ledger row: left column ``text`` and right column ``detail``."""

    role: LineRole
    text: str = ""
    detail: str = ""


@dataclass(frozen=True)
class SummaryRow:
    """Label/value pair for the on-screen totals panel."""

    label: str
    value: str
    kind: str = "line"


def _to_cents(value: float) -> Decimal:
    if not math.isfinite(value):
        value = 0.0
    magnitude = Decimal(repr(abs(value)))
    with localcontext() as ctx:
        # Room for every integer digit plus the two cents digits.
        ctx.prec = max(ctx.prec, magnitude.adjusted() + 3)
        return magnitude.quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_ledger_amount(value: float) -> str:
    """Format money the ledger way: ``14700`` becomes ``14,700=00``.

    The sign is a leading mark on the formatted magnitude; values that
    round to zero print unsigned.
    """
    value = float(value or 0.0)
    cents = _to_cents(value)
    text = f"{cents:,.2f}".replace(".", LEDGER_GLYPH)
    if value < 0 and cents != 0:
        return f"-{text}"
    return text


def format_quantity(value: float) -> str:
    """Format a plain figure with at most two decimals, dropping trailing zeros."""
    value = float(value or 0.0)
    cents = _to_cents(value)
    text = f"{cents:.2f}".rstrip("0").rstrip(".")
    if value < 0 and cents != 0:
        return f"-{text}"
    return text


def format_weight(value: float) -> str:
    return f"{value:.2f}"


def _signed_money(entry: AdjustmentEntry) -> str:
    return f"{entry.sign.value} {format_ledger_amount(normalize(entry.amount))}"


def _adjustment_lines(adjustments: Tuple[AdjustmentEntry, ...]) -> List[DocumentLine]:
    lines = []
    for idx, entry in enumerate(adjustments):
        if idx == 0:
            # The label of the first entry sits beside the running subtotal.
            text = entry.note
        else:
            text = f"{entry.sign.value} {entry.label}"
            if entry.note:
                text = f"{text} ({entry.note})"
        lines.append(DocumentLine(LineRole.ADJUSTMENT, text, _signed_money(entry)))
    return lines


def render_document(
    transaction: TransactionInput, result: SettlementResult
) -> Tuple[DocumentLine, ...]:
    """Return the ordered ledger lines for a computed transaction."""
    sep = DocumentLine(LineRole.SEPARATOR)
    tare = normalize(transaction.tare_per_bag)
    labour = normalize(transaction.labour_per_bag)
    rate = normalize(transaction.rate_per_quintal)
    bags = result.bags

    lines: List[DocumentLine] = [
        DocumentLine(
            LineRole.HEADER,
            transaction.customer_name.strip() or CUSTOMER_PLACEHOLDER,
            transaction.date,
        )
    ]
    for number, batch in enumerate(transaction.batches, start=1):
        lines.append(
            DocumentLine(
                LineRole.BATCH,
                f"{number}. {format_weight(normalize(batch.weight))} kg"
                f" - {floor_count(batch.bags)} bags",
            )
        )
    lines += [
        sep,
        DocumentLine(
            LineRole.WEIGHT_SUMMARY, f"{format_weight(result.weight)} kg - {bags} bags"
        ),
        DocumentLine(
            LineRole.TARE,
            f"{format_quantity(result.total_tare)} - {format_quantity(tare)} KP"
            f" ({bags} {TIMES} {format_quantity(tare)})",
        ),
        sep,
        DocumentLine(
            LineRole.NET_TIMES_RATE,
            f"{format_weight(result.net_weight)} {TIMES} {format_quantity(rate)} Rate",
        ),
        sep,
        DocumentLine(LineRole.AMOUNT, format_ledger_amount(result.amount)),
        DocumentLine(
            LineRole.LABOUR,
            f"{format_ledger_amount(result.labour_charge)} - Labour charge"
            f" ({bags} {TIMES} {format_quantity(labour)})",
        ),
        sep,
    ]

    adjustments = transaction.adjustments
    if adjustments:
        lines.append(
            DocumentLine(
                LineRole.RUNNING_SUBTOTAL,
                format_ledger_amount(result.subtotal),
                adjustments[0].label,
            )
        )
        lines += _adjustment_lines(adjustments)
        lines.append(sep)

    final = DocumentLine(LineRole.FINAL, format_ledger_amount(result.final))
    lines += [final, final, sep, DocumentLine(LineRole.TERMINATOR, TERMINATOR_TEXT)]
    return tuple(lines)


def render_summary(
    transaction: TransactionInput, result: SettlementResult
) -> Tuple[SummaryRow, ...]:
    """Return the rows of the on-screen totals display."""
    rows = [
        SummaryRow("Amount", format_ledger_amount(result.amount)),
        SummaryRow("Labour", f"- {format_ledger_amount(result.labour_charge)}"),
    ]
    for entry in transaction.adjustments:
        rows.append(
            SummaryRow(f"{entry.sign.value} {entry.label}", _signed_money(entry), "adjustment")
        )
    rows.append(SummaryRow("Total", format_ledger_amount(result.final), "total"))
    return tuple(rows)
