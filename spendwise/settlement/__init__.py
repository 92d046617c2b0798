"""Settlement calculation package."""

from spendwise.settlement.calculator import (
    DEFAULT_TOLERANCE,
    SettlementPreconditionError,
    calculate_settlement,
    fair_share,
    grand_total,
    scaled_tolerance,
    suggest_transfers,
    summarize_settlement,
    total_spent,
)

__all__ = [
    "DEFAULT_TOLERANCE",
    "SettlementPreconditionError",
    "calculate_settlement",
    "fair_share",
    "grand_total",
    "scaled_tolerance",
    "suggest_transfers",
    "summarize_settlement",
    "total_spent",
]
