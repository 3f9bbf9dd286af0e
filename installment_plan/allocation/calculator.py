"""Amount/percentage conversions and sums over an installment sequence.

All functions are pure: they read ``amount``, ``percentage`` and ``status``
attributes and never modify their inputs.
"""

from collections.abc import Sequence
from decimal import Decimal

from installment_plan.allocation.rounding import Number, round_value, to_decimal
from installment_plan.constants import PERCENTAGE_TOLERANCE, TOTAL_PERCENTAGE
from installment_plan.models.enums import InstallmentStatus
from installment_plan.models.plan import Installment
from installment_plan.models.results import PercentageStatus


def percentage_of(amount: Number, total: Number) -> Decimal:
    """Percentage of ``total`` that ``amount`` represents.

    >>> percentage_of(91, 182)
    Decimal('50.0000000000')
    """
    total = to_decimal(total)
    if total == 0:
        return round_value(0)
    return round_value(to_decimal(amount) / total * TOTAL_PERCENTAGE)


def amount_of(percentage: Number, total: Number) -> Decimal:
    """Amount that ``percentage`` of ``total`` represents.

    >>> amount_of(25, 200)
    Decimal('50.0000000000')
    """
    return round_value(to_decimal(percentage) / TOTAL_PERCENTAGE * to_decimal(total))


def total_amount(sequence: Sequence[Installment]) -> Decimal:
    return round_value(sum((item.amount for item in sequence), Decimal(0)))


def total_percentage(sequence: Sequence[Installment]) -> Decimal:
    return round_value(sum((item.percentage for item in sequence), Decimal(0)))


def remaining_amount(sequence: Sequence[Installment], loan_total: Number) -> Decimal:
    """Amount of the loan total not yet allocated to any installment."""
    return round_value(to_decimal(loan_total) - total_amount(sequence))


def remaining_percentage(sequence: Sequence[Installment]) -> Decimal:
    """Percentage not yet allocated to any installment."""
    return round_value(TOTAL_PERCENTAGE - total_percentage(sequence))


def distribute_amount(amount: Number, count: int) -> list[Decimal]:
    """Split ``amount`` into ``count`` equal shares, residue on the last one.

    >>> [str(x) for x in distribute_amount(100, 3)]
    ['33.3333333333', '33.3333333333', '33.3333333334']
    """
    if count <= 0:
        return []

    amount = to_decimal(amount)
    share = round_value(amount / count)
    shares = [share] * count
    shares[-1] = round_value(amount - share * (count - 1))
    return shares


def count_paid(sequence: Sequence[Installment]) -> int:
    return sum(1 for item in sequence if item.status == InstallmentStatus.PAID)


def paid_amount(sequence: Sequence[Installment]) -> Decimal:
    return total_amount([item for item in sequence if item.status == InstallmentStatus.PAID])


def pending_amount(sequence: Sequence[Installment]) -> Decimal:
    return total_amount([item for item in sequence if item.status == InstallmentStatus.PENDING])


def percentage_status(
    sequence: Sequence[Installment],
    tolerance: Decimal = PERCENTAGE_TOLERANCE,
) -> PercentageStatus:
    """Summarize how much of the 100% is allocated.

    Parameters
    ----------
    sequence : Sequence[Installment]
        Installments to inspect.
    tolerance : Decimal
        Margin used for the completeness and availability checks.

    Returns
    -------
    PercentageStatus
        Total, remaining, whether the sum is 100% within tolerance, and
        whether room is left for another installment.
    """
    total = total_percentage(sequence)
    return PercentageStatus(
        total=total,
        remaining=remaining_percentage(sequence),
        is_complete=abs(total - TOTAL_PERCENTAGE) <= tolerance,
        has_available=total < TOTAL_PERCENTAGE - tolerance,
    )
