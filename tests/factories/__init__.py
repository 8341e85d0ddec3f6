from .transactions import (
    adjustment,
    batch,
    reference_transaction,
    settlement_cases,
    transaction,
)

__all__ = [
    "adjustment",
    "batch",
    "reference_transaction",
    "settlement_cases",
    "transaction",
]
