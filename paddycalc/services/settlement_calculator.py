"""Pure calculation helpers for settlement entry."""
from __future__ import annotations

from paddycalc.domain.settlement_models import SettlementResult, TransactionInput
from paddycalc.services.adjustment_ledger import signed_total
from paddycalc.services.batch_aggregator import aggregate
from paddycalc.services.numeric import normalize

QUINTAL_KG = 100.0


def compute_net_weight(weight: float, total_tare: float) -> float:
    """Return the non-negative net weight after tare."""
    net = weight - total_tare
    return net if net > 0 else 0.0


def compute_amount(net_weight: float, rate_per_quintal: float) -> float:
    """Return the price of ``net_weight`` kg at a per-quintal rate."""
    return (net_weight / QUINTAL_KG) * rate_per_quintal


def compute_labour_charge(bags: int, labour_per_bag: float) -> float:
    return bags * labour_per_bag


def compute_settlement(transaction: TransactionInput) -> SettlementResult:
    """Compute the settlement figures for a transaction."""
    weight, total_bags = aggregate(transaction)
    bags = max(0, int(total_bags))

    total_tare = bags * normalize(transaction.tare_per_bag)
    net_weight = compute_net_weight(weight, total_tare)
    amount = compute_amount(net_weight, normalize(transaction.rate_per_quintal))
    labour_charge = compute_labour_charge(bags, normalize(transaction.labour_per_bag))
    adjustments_signed = signed_total(transaction.adjustments)

    return SettlementResult(
        weight=weight,
        bags=bags,
        total_tare=total_tare,
        net_weight=net_weight,
        amount=amount,
        labour_charge=labour_charge,
        adjustments_signed=adjustments_signed,
        final=amount - labour_charge + adjustments_signed,
    )
