"""Restore amount/percentage consistency after a structural change.

Converting N values through amount -> percentage -> amount cannot be made
to sum exactly without a designated absorber, so the whole residue lands on
one installment. By default that is the last one; the orchestrator names a
different absorber when the last installment is paid or was just entered
by the caller.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal

from installment_plan.allocation.calculator import (
    amount_of,
    percentage_of,
    total_amount,
    total_percentage,
)
from installment_plan.allocation.rounding import Number, round_value, to_decimal
from installment_plan.constants import PERCENTAGE_TOLERANCE, REBALANCE_THRESHOLD, TOTAL_PERCENTAGE
from installment_plan.models.plan import Installment

logger = logging.getLogger(__name__)


def _resolve_absorber(sequence: Sequence[Installment], absorber_index: int | None) -> int:
    if absorber_index is None:
        return len(sequence) - 1
    if not 0 <= absorber_index < len(sequence):
        raise IndexError(f"Absorber index {absorber_index} outside sequence of {len(sequence)}")
    return absorber_index


def rebalance_from_amounts(
    sequence: Sequence[Installment],
    loan_total: Number,
    absorber_index: int | None = None,
    threshold: Decimal = REBALANCE_THRESHOLD,
) -> list[Installment]:
    """Recompute every percentage from its amount.

    Parameters
    ----------
    sequence : Sequence[Installment]
        Installments in plan order. Not modified.
    loan_total : Number
        Loan total the amounts are a share of.
    absorber_index : int | None
        Installment receiving the percentage residue (default: last).
    threshold : Decimal
        Residues at or below this size are left uncorrected.

    Returns
    -------
    list[Installment]
        New installments whose percentages sum to 100.
    """
    if not sequence:
        return list(sequence)

    absorber = _resolve_absorber(sequence, absorber_index)
    updated = [
        replace(item, percentage=percentage_of(item.amount, loan_total)) for item in sequence
    ]

    difference = round_value(TOTAL_PERCENTAGE - total_percentage(updated))
    if abs(difference) > threshold:
        target = updated[absorber]
        updated[absorber] = replace(target, percentage=round_value(target.percentage + difference))
        logger.debug(
            "Absorbed %s%% residue into installment %s", difference, target.installment_id
        )

    return updated


def rebalance_from_percentages(
    sequence: Sequence[Installment],
    loan_total: Number,
    absorber_index: int | None = None,
    threshold: Decimal = REBALANCE_THRESHOLD,
) -> list[Installment]:
    """Recompute every amount from its percentage.

    Mirror of :func:`rebalance_from_amounts`: the amount residue against
    ``loan_total`` is added to the absorber.
    """
    if not sequence:
        return list(sequence)

    absorber = _resolve_absorber(sequence, absorber_index)
    loan_total = to_decimal(loan_total)
    updated = [replace(item, amount=amount_of(item.percentage, loan_total)) for item in sequence]

    difference = round_value(loan_total - total_amount(updated))
    if abs(difference) > threshold:
        target = updated[absorber]
        updated[absorber] = replace(target, amount=round_value(target.amount + difference))
        logger.debug("Absorbed %s residue into installment %s", difference, target.installment_id)

    return updated


def rebalance(
    sequence: Sequence[Installment],
    loan_total: Number,
    absorber_index: int | None = None,
    threshold: Decimal = REBALANCE_THRESHOLD,
) -> list[Installment]:
    """Two-pass rebalance: percentages from amounts, then amounts from percentages."""
    synced = rebalance_from_amounts(sequence, loan_total, absorber_index, threshold)
    return rebalance_from_percentages(synced, loan_total, absorber_index, threshold)


def is_balanced(
    sequence: Sequence[Installment],
    loan_total: Number,
    tolerance: Decimal = PERCENTAGE_TOLERANCE,
) -> bool:
    """Whether both sums hit their targets and each pair is consistent."""
    loan_total = to_decimal(loan_total)
    if not sequence:
        return False
    if abs(total_percentage(sequence) - TOTAL_PERCENTAGE) > tolerance:
        return False
    if abs(total_amount(sequence) - loan_total) > tolerance:
        return False
    return all(
        abs(item.percentage - percentage_of(item.amount, loan_total)) <= tolerance
        for item in sequence
    )
