"""Validation gate: stateless predicates deciding whether a mutation is legal.

Every predicate returns a :class:`ValidationResult`; rejections carry a
:class:`RejectionReason` code, never free text. Display messages are
derived by the presentation layer (see :data:`REASON_MESSAGES`).
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from installment_plan.allocation.calculator import (
    remaining_amount,
    remaining_percentage,
    total_percentage,
)
from installment_plan.allocation.rounding import Number, round_value, to_decimal
from installment_plan.constants import PERCENTAGE_TOLERANCE, TOTAL_PERCENTAGE
from installment_plan.models.enums import InstallmentStatus, RejectionReason
from installment_plan.models.plan import Installment
from installment_plan.models.results import ValidationResult

REASON_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.DATE_REQUIRED: "A due date is required",
    RejectionReason.DATE_BEFORE_MINIMUM: "The due date cannot be earlier than the previous installment",
    RejectionReason.AMOUNT_NOT_POSITIVE: "The amount must be greater than 0",
    RejectionReason.AMOUNT_EXCEEDS_AVAILABLE: "The amount exceeds what is available",
    RejectionReason.PERCENTAGE_OUT_OF_RANGE: "The percentage must be between 0 and 100",
    RejectionReason.PERCENTAGE_EXCEEDS_AVAILABLE: "Not enough percentage available",
    RejectionReason.PRIOR_INSTALLMENT_UNPAID: "The previous installment must be paid first",
    RejectionReason.INSTALLMENT_ALREADY_PAID_UNEDITABLE: "A paid installment cannot be edited",
    RejectionReason.SOLE_INSTALLMENT_UNDELETABLE: "The only installment cannot be deleted",
    RejectionReason.PAID_INSTALLMENT_UNDELETABLE: "A paid installment cannot be deleted",
    RejectionReason.NO_REDISTRIBUTION_TARGET: "No pending installment can take over this allocation",
    RejectionReason.PERCENTAGE_SUM_INVALID: "Installments must add up to exactly 100%",
    RejectionReason.AMOUNT_MUST_COVER_REMAINING: "The only pending installment must cover what is left",
    RejectionReason.INSTALLMENT_ALREADY_PAID: "The installment is already paid",
    RejectionReason.INSTALLMENT_NOT_FOUND: "The installment does not exist",
    RejectionReason.INVALID_POSITION: "Installments cannot be inserted at that position",
    RejectionReason.LOAN_ALREADY_INITIALIZED: "The plan already has installments",
    RejectionReason.LOAN_NOT_INITIALIZED: "The plan has no installments yet",
    RejectionReason.TOTAL_NOT_POSITIVE: "The loan total must be greater than 0",
}


def parse_date(value: date | str | None) -> date | None:
    """Accept a ``date`` or ISO ``YYYY-MM-DD`` string; blank means ``None``.

    Raises
    ------
    TypeError
        If the value is neither a ``date`` nor a string.
    ValueError
        If a non-blank string is not an ISO date.
    """
    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Expected a date or ISO string, got {type(value).__name__}")
    value = value.strip()
    if not value:
        return None
    return date.fromisoformat(value)


# --- Status rules ---


def can_pay(index: int, sequence: Sequence[Installment]) -> ValidationResult:
    """Installment ``index`` may be paid only after its predecessor."""
    if index == 0:
        return ValidationResult.success()
    if sequence[index - 1].status != InstallmentStatus.PAID:
        return ValidationResult.reject(RejectionReason.PRIOR_INSTALLMENT_UNPAID)
    return ValidationResult.success()


def can_edit(installment: Installment) -> ValidationResult:
    if installment.status != InstallmentStatus.PENDING:
        return ValidationResult.reject(RejectionReason.INSTALLMENT_ALREADY_PAID_UNEDITABLE)
    return ValidationResult.success()


def can_delete(installment: Installment, sequence_length: int) -> ValidationResult:
    if sequence_length == 1:
        return ValidationResult.reject(RejectionReason.SOLE_INSTALLMENT_UNDELETABLE)
    if installment.status == InstallmentStatus.PAID:
        return ValidationResult.reject(RejectionReason.PAID_INSTALLMENT_UNDELETABLE)
    return ValidationResult.success()


def find_redistribution_target(index: int, sequence: Sequence[Installment]) -> int | None:
    """Nearest pending installment other than ``index``, searching forward first."""
    for candidate in range(index + 1, len(sequence)):
        if sequence[candidate].status == InstallmentStatus.PENDING:
            return candidate
    for candidate in range(index - 1, -1, -1):
        if sequence[candidate].status == InstallmentStatus.PENDING:
            return candidate
    return None


def can_delete_with_redistribution(index: int, sequence: Sequence[Installment]) -> ValidationResult:
    """:func:`can_delete` plus the requirement that the allocation has somewhere to go."""
    result = can_delete(sequence[index], len(sequence))
    if not result:
        return result
    if find_redistribution_target(index, sequence) is None:
        return ValidationResult.reject(RejectionReason.NO_REDISTRIBUTION_TARGET)
    return ValidationResult.success()


# --- Allocation rules ---


def has_available_percentage(
    sequence: Sequence[Installment],
    tolerance: Decimal = PERCENTAGE_TOLERANCE,
) -> bool:
    return total_percentage(sequence) < TOTAL_PERCENTAGE - tolerance


def validate_percentage_sum_is_complete(
    sequence: Sequence[Installment],
    tolerance: Decimal = PERCENTAGE_TOLERANCE,
) -> ValidationResult:
    if abs(total_percentage(sequence) - TOTAL_PERCENTAGE) > tolerance:
        return ValidationResult.reject(RejectionReason.PERCENTAGE_SUM_INVALID)
    return ValidationResult.success()


def validate_loan_total(total: Number) -> ValidationResult:
    try:
        value = round_value(total)
    except ValueError:
        return ValidationResult.reject(RejectionReason.TOTAL_NOT_POSITIVE)
    if value <= 0:
        return ValidationResult.reject(RejectionReason.TOTAL_NOT_POSITIVE)
    return ValidationResult.success()


def validate_amount(amount: Number, available_amount: Number) -> ValidationResult:
    amount = to_decimal(amount)
    if amount <= 0:
        return ValidationResult.reject(RejectionReason.AMOUNT_NOT_POSITIVE)
    if amount > to_decimal(available_amount):
        return ValidationResult.reject(RejectionReason.AMOUNT_EXCEEDS_AVAILABLE)
    return ValidationResult.success()


def validate_percentage(percentage: Number, available_percentage: Number) -> ValidationResult:
    percentage = to_decimal(percentage)
    if percentage <= 0 or percentage > TOTAL_PERCENTAGE:
        return ValidationResult.reject(RejectionReason.PERCENTAGE_OUT_OF_RANGE)
    if percentage > to_decimal(available_percentage):
        return ValidationResult.reject(RejectionReason.PERCENTAGE_EXCEEDS_AVAILABLE)
    return ValidationResult.success()


def available_amount_for(
    sequence: Sequence[Installment],
    loan_total: Number,
    index: int | None = None,
    funder_index: int | None = None,
) -> Decimal:
    """Ceiling for the amount of installment ``index`` (``None`` for a new one).

    The pool is the unallocated remainder, plus the installment's own
    current amount, plus the amount held by ``funder_index``: the pending
    installment that gives up allocation when this one grows.
    """
    available = remaining_amount(sequence, loan_total)
    if index is not None:
        available += sequence[index].amount
    if funder_index is not None and funder_index != index:
        available += sequence[funder_index].amount
    return round_value(available)


def available_percentage_for(
    sequence: Sequence[Installment],
    index: int | None = None,
    funder_index: int | None = None,
) -> Decimal:
    """Percentage counterpart of :func:`available_amount_for`."""
    available = remaining_percentage(sequence)
    if index is not None:
        available += sequence[index].percentage
    if funder_index is not None and funder_index != index:
        available += sequence[funder_index].percentage
    return round_value(available)


# --- Date rules ---


def validate_date_required(candidate: date | str | None) -> ValidationResult:
    if candidate is None or (isinstance(candidate, str) and not candidate.strip()):
        return ValidationResult.reject(RejectionReason.DATE_REQUIRED)
    return ValidationResult.success()


def validate_date_sequential(
    candidate: date | str,
    min_date: date | str | None,
) -> ValidationResult:
    """Reject ``candidate`` when it falls before ``min_date``.

    >>> validate_date_sequential("2024-01-10", "2024-01-15").reason
    <RejectionReason.DATE_BEFORE_MINIMUM: 'DATE_BEFORE_MINIMUM'>
    """
    minimum = parse_date(min_date)
    if minimum is None:
        return ValidationResult.success()
    if parse_date(candidate) < minimum:
        return ValidationResult.reject(RejectionReason.DATE_BEFORE_MINIMUM)
    return ValidationResult.success()


def min_date_for(index: int, sequence: Sequence[Installment]) -> date | None:
    """Earliest due date allowed at ``index``: the predecessor's due date."""
    if index <= 0 or not sequence:
        return None
    return sequence[index - 1].due_date


def max_date_for(
    index: int,
    sequence: Sequence[Installment],
    inserting: bool = False,
) -> date | None:
    """Latest due date allowed at ``index``: the successor's due date.

    When ``inserting``, the installment currently at ``index`` becomes the
    successor.
    """
    successor = index if inserting else index + 1
    if successor >= len(sequence):
        return None
    return sequence[successor].due_date


def validate_full_payment(
    amount: Number,
    percentage: Number,
    due_date: date | str | None,
    min_date: date | str | None,
    available_amount: Number,
    available_percentage: Number,
) -> ValidationResult:
    """Validate a complete installment payload, reporting only the first failure.

    Order: date required, date sequential, amount, percentage.
    """
    checks = (
        lambda: validate_date_required(due_date),
        lambda: validate_date_sequential(due_date, min_date),
        lambda: validate_amount(amount, available_amount),
        lambda: validate_percentage(percentage, available_percentage),
    )
    for check in checks:
        result = check()
        if not result:
            return result
    return ValidationResult.success()
