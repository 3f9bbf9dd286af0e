"""Allocation arithmetic: rounding, conversions and rebalancing."""

from installment_plan.allocation.calculator import (
    amount_of,
    count_paid,
    distribute_amount,
    paid_amount,
    pending_amount,
    percentage_of,
    percentage_status,
    remaining_amount,
    remaining_percentage,
    total_amount,
    total_percentage,
)
from installment_plan.allocation.rebalancer import (
    is_balanced,
    rebalance,
    rebalance_from_amounts,
    rebalance_from_percentages,
)
from installment_plan.allocation.rounding import round_display, round_value, to_decimal

__all__ = [
    "amount_of",
    "count_paid",
    "distribute_amount",
    "is_balanced",
    "paid_amount",
    "pending_amount",
    "percentage_of",
    "percentage_status",
    "rebalance",
    "rebalance_from_amounts",
    "rebalance_from_percentages",
    "remaining_amount",
    "remaining_percentage",
    "round_display",
    "round_value",
    "to_decimal",
    "total_amount",
    "total_percentage",
]
