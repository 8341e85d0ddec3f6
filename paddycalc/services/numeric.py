"""Tolerant coercion of typed text into numbers."""
from __future__ import annotations

import math
import re

_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def normalize(raw) -> float:
    """Return the numeric value of ``raw``, or 0.0 when it has none.

    Grouping commas are ignored and only the leading number is read, so
    ``"1,020 kg"`` gives 1020.0. Empty, non-numeric and non-finite input
    all give 0.0.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return 0.0
        return value if math.isfinite(value) else 0.0

    text = str(raw).replace(",", "").strip()
    match = _LEADING_NUMBER.match(text)
    if not match:
        return 0.0
    try:
        value = float(match.group(0))
    except (OverflowError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def floor_count(raw) -> int:
    """Return the floored whole count of ``raw`` (may be negative)."""
    return math.floor(normalize(raw))
