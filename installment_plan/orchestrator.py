"""Sequence orchestrator: the single owner of a loan's installment sequence.

Every mutation goes gate -> structural change -> rebalance, and either
returns a new fully-consistent :class:`Loan` snapshot or the unchanged one
with a rejection reason. Nothing here performs I/O; persisting the snapshot
is the caller's job (see :class:`installment_plan.store.LoanRepository`).

Usage::

    loan = create_loan("Car", Decimal("182"))
    plan = SequenceOrchestrator(loan)
    plan.create_initial()
    result = plan.insert(1, InstallmentDraft("Payment 1", 91, "2025-02-01"))
    if not result:
        print(result.reason)
"""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal

from installment_plan.allocation.calculator import (
    count_paid,
    paid_amount,
    pending_amount,
    percentage_of,
    percentage_status,
    remaining_amount,
)
from installment_plan.allocation.rebalancer import rebalance, rebalance_from_amounts
from installment_plan.allocation.rounding import round_value, to_decimal
from installment_plan.clock import Clock, SystemClock
from installment_plan.config import PlanConfig
from installment_plan.constants import TITLE_ADVANCE, TITLE_NEW, TOTAL_PERCENTAGE
from installment_plan.exceptions import InvalidEntityStateError
from installment_plan.ids import FakerIdGenerator, IdGenerator
from installment_plan.models.enums import InstallmentStatus, RejectionReason
from installment_plan.models.plan import Installment, InstallmentDraft, Loan
from installment_plan.models.requests import (
    CreateInitial,
    Delete,
    Edit,
    Insert,
    MarkPaid,
    MutationRequest,
    UpdateDate,
)
from installment_plan.models.results import MutationResult, PlanSummary, ValidationResult
from installment_plan.validation import (
    available_amount_for,
    available_percentage_for,
    can_delete_with_redistribution,
    can_edit,
    can_pay,
    find_redistribution_target,
    has_available_percentage,
    max_date_for,
    min_date_for,
    parse_date,
    validate_date_sequential,
    validate_full_payment,
    validate_loan_total,
    validate_percentage_sum_is_complete,
)

logger = logging.getLogger(__name__)

LOAN_ID_PREFIX = "loan_"
INSTALLMENT_ID_PREFIX = "inst_"


def create_loan(
    name: str,
    total_amount: Decimal | int | float | str,
    id_generator: IdGenerator | None = None,
    clock: Clock | None = None,
    notes: str | None = None,
) -> Loan:
    """Create an empty loan; its first installment is created separately.

    Raises
    ------
    InvalidEntityStateError
        If ``total_amount`` is not a positive number.
    """
    if not validate_loan_total(total_amount):
        raise InvalidEntityStateError(f"Loan total must be a positive number, got {total_amount!r}")

    id_generator = id_generator or FakerIdGenerator()
    clock = clock or SystemClock()
    return Loan(
        loan_id=id_generator.new_id(LOAN_ID_PREFIX),
        name=name,
        total_amount=round_value(total_amount),
        created_at=clock.now(),
        notes=notes,
    )


class SequenceOrchestrator:
    """Applies mutations to one loan's installment sequence.

    Parameters
    ----------
    loan : Loan
        Snapshot to start from (empty or previously persisted).
    id_generator : IdGenerator | None
        Source of installment identifiers (default: Faker UUIDs).
    clock : Clock | None
        Source of "now"/"today" (default: system clock).
    config : PlanConfig | None
        Tolerances and the date-update policy.
    """

    def __init__(
        self,
        loan: Loan,
        id_generator: IdGenerator | None = None,
        clock: Clock | None = None,
        config: PlanConfig | None = None,
    ) -> None:
        self._loan = loan
        self.ids = id_generator or FakerIdGenerator()
        self.clock = clock or SystemClock()
        self.config = config or PlanConfig()

    @property
    def loan(self) -> Loan:
        return self._loan

    @property
    def installments(self) -> tuple[Installment, ...]:
        return self._loan.installments

    @property
    def tolerance(self) -> Decimal:
        return self.config.precision.percentage_tolerance

    @property
    def threshold(self) -> Decimal:
        return self.config.precision.rebalance_threshold

    # --- Dispatch ---

    def apply(self, request: MutationRequest) -> MutationResult:
        """Apply one mutation request."""
        match request:
            case CreateInitial():
                return self.create_initial()
            case Insert(index=index, payload=payload):
                return self.insert(index, payload)
            case Edit(installment_id=installment_id, payload=payload):
                return self.edit(installment_id, payload)
            case MarkPaid(installment_id=installment_id):
                return self.mark_paid(installment_id)
            case Delete(installment_id=installment_id):
                return self.delete(installment_id)
            case UpdateDate(installment_id=installment_id, due_date=due_date):
                return self.update_date(installment_id, due_date)
            case _:
                raise TypeError(f"Unsupported mutation request: {request!r}")

    # --- Mutations ---

    def create_initial(self) -> MutationResult:
        """Create the advance installment holding 100% of the total."""
        if self._loan.is_initialized:
            return self._reject("create_initial", RejectionReason.LOAN_ALREADY_INITIALIZED)
        if not validate_loan_total(self._loan.total_amount):
            return self._reject("create_initial", RejectionReason.TOTAL_NOT_POSITIVE)

        installment = Installment(
            installment_id=self.ids.new_id(INSTALLMENT_ID_PREFIX),
            title=TITLE_ADVANCE,
            amount=round_value(self._loan.total_amount),
            percentage=round_value(TOTAL_PERCENTAGE),
            status=InstallmentStatus.PENDING,
            due_date=self.clock.today(),
            created_at=self.clock.now(),
        )
        return self._commit("create_initial", [installment], installment.installment_id)

    def insert(self, index: int, payload: InstallmentDraft) -> MutationResult:
        """Insert a pending installment at ``index`` and rebalance.

        The new allocation comes out of the unallocated remainder first and
        then out of the designated absorber: the last pending installment.
        """
        sequence = list(self.installments)
        total = self._loan.total_amount

        if not validate_loan_total(total):
            return self._reject("insert", RejectionReason.TOTAL_NOT_POSITIVE)
        if not 0 <= index <= len(sequence):
            return self._reject("insert", RejectionReason.INVALID_POSITION)

        funder = self._absorber_index(sequence, exclude=None)
        if funder is None and not has_available_percentage(sequence, self.tolerance):
            return self._reject("insert", RejectionReason.PERCENTAGE_EXCEEDS_AVAILABLE)

        normalized = self._normalize(payload)
        if isinstance(normalized, ValidationResult):
            return self._reject("insert", normalized.reason)
        amount, percentage, due_date = normalized

        result = validate_full_payment(
            amount,
            percentage,
            due_date,
            min_date_for(index, sequence),
            available_amount_for(sequence, total, funder_index=funder),
            available_percentage_for(sequence, funder_index=funder),
        )
        if result:
            result = self._check_successor_date(due_date, max_date_for(index, sequence, inserting=True))
        if not result:
            return self._reject("insert", result.reason)

        installment = Installment(
            installment_id=self.ids.new_id(INSTALLMENT_ID_PREFIX),
            title=self._clean_title(payload.title) or TITLE_NEW,
            amount=amount,
            percentage=percentage,
            status=InstallmentStatus.PENDING,
            due_date=due_date,
            created_at=self.clock.now(),
        )
        sequence.insert(index, installment)

        rebalanced = rebalance(
            sequence, total, self._absorber_index(sequence, exclude=index), self.threshold
        )
        return self._commit("insert", rebalanced, installment.installment_id, check=True)

    def edit(self, installment_id: str, payload: InstallmentDraft) -> MutationResult:
        """Overwrite a pending installment's title, allocation and due date.

        The payload amount is authoritative; the percentage is validated and
        then re-derived from the amount by the rebalance. The only pending
        installment cannot change its amount, since nothing could absorb it.
        """
        index = self._locate(installment_id)
        if isinstance(index, RejectionReason):
            return self._reject("edit", index, installment_id)

        sequence = list(self.installments)
        current = sequence[index]
        total = self._loan.total_amount

        result = can_edit(current)
        if not result:
            return self._reject("edit", result.reason, installment_id)

        normalized = self._normalize(payload)
        if isinstance(normalized, ValidationResult):
            return self._reject("edit", normalized.reason, installment_id)
        amount, percentage, due_date = normalized

        funder = self._absorber_index(sequence, exclude=index)
        result = validate_full_payment(
            amount,
            percentage,
            due_date,
            min_date_for(index, sequence),
            available_amount_for(sequence, total, index=index, funder_index=funder),
            available_percentage_for(sequence, index=index, funder_index=funder),
        )
        if result:
            result = self._check_successor_date(due_date, max_date_for(index, sequence))
        if not result:
            return self._reject("edit", result.reason, installment_id)

        if funder is None and amount != round_value(remaining_amount(sequence, total) + current.amount):
            # Sole pending installment: its amount is whatever the paid ones leave
            return self._reject("edit", RejectionReason.AMOUNT_MUST_COVER_REMAINING, installment_id)

        sequence[index] = replace(
            current,
            title=self._clean_title(payload.title) or current.title,
            amount=amount,
            percentage=percentage,
            due_date=due_date,
        )

        absorber = funder if funder is not None else index
        rebalanced = rebalance(sequence, total, absorber, self.threshold)
        return self._commit("edit", rebalanced, installment_id, check=True)

    def mark_paid(self, installment_id: str) -> MutationResult:
        """Mark an installment paid; its predecessor must already be paid."""
        index = self._locate(installment_id)
        if isinstance(index, RejectionReason):
            return self._reject("mark_paid", index, installment_id)

        sequence = list(self.installments)
        if sequence[index].is_paid:
            return self._reject("mark_paid", RejectionReason.INSTALLMENT_ALREADY_PAID, installment_id)

        result = can_pay(index, sequence)
        if not result:
            return self._reject("mark_paid", result.reason, installment_id)

        sequence[index] = replace(
            sequence[index],
            status=InstallmentStatus.PAID,
            paid_at=self.clock.now(),
        )
        return self._commit("mark_paid", sequence, installment_id)

    def update_date(self, installment_id: str, due_date: date | str) -> MutationResult:
        """Correct a due date, regardless of status.

        Sequential ordering is only enforced when
        ``config.enforce_sequential_dates_on_update`` is set.
        """
        index = self._locate(installment_id)
        if isinstance(index, RejectionReason):
            return self._reject("update_date", index, installment_id)

        try:
            parsed = parse_date(due_date)
        except (TypeError, ValueError):
            parsed = None
        if parsed is None:
            return self._reject("update_date", RejectionReason.DATE_REQUIRED, installment_id)

        sequence = list(self.installments)
        if self.config.enforce_sequential_dates_on_update:
            result = validate_date_sequential(parsed, min_date_for(index, sequence))
            if result:
                result = self._check_successor_date(parsed, max_date_for(index, sequence))
            if not result:
                return self._reject("update_date", result.reason, installment_id)

        sequence[index] = replace(sequence[index], due_date=parsed)
        return self._commit("update_date", sequence, installment_id)

    def delete(self, installment_id: str) -> MutationResult:
        """Delete a pending installment, moving its allocation to a pending neighbour.

        The nearest pending installment after it receives the amount and
        percentage; failing that, the nearest one before it.
        """
        index = self._locate(installment_id)
        if isinstance(index, RejectionReason):
            return self._reject("delete", index, installment_id)

        sequence = list(self.installments)
        result = can_delete_with_redistribution(index, sequence)
        if not result:
            return self._reject("delete", result.reason, installment_id)

        target = find_redistribution_target(index, sequence)
        removed = sequence[index]
        receiver = sequence[target]
        sequence[target] = replace(
            receiver,
            amount=round_value(receiver.amount + removed.amount),
            percentage=round_value(receiver.percentage + removed.percentage),
        )
        del sequence[index]
        if target > index:
            target -= 1

        logger.debug(
            "Redistributed %s (%s%%) from %s to %s",
            removed.amount,
            removed.percentage,
            removed.installment_id,
            receiver.installment_id,
        )
        rebalanced = rebalance_from_amounts(
            sequence, self._loan.total_amount, target, self.threshold
        )
        return self._commit("delete", rebalanced, installment_id, check=True)

    # --- Queries ---

    def index_of(self, installment_id: str) -> int | None:
        for index, installment in enumerate(self.installments):
            if installment.installment_id == installment_id:
                return index
        return None

    def get(self, installment_id: str) -> Installment | None:
        index = self.index_of(installment_id)
        return None if index is None else self.installments[index]

    def min_date_for(self, index: int) -> date:
        """Earliest due date a form should offer at ``index`` (today for the first slot)."""
        return min_date_for(index, self.installments) or self.clock.today()

    def available_for_new(self) -> tuple[Decimal, Decimal]:
        """Amount and percentage a new installment may take."""
        sequence = self.installments
        funder = self._absorber_index(sequence, exclude=None)
        return (
            available_amount_for(sequence, self._loan.total_amount, funder_index=funder),
            available_percentage_for(sequence, funder_index=funder),
        )

    def check_invariants(self) -> ValidationResult:
        """Explicit invariant check; an empty plan has nothing to check."""
        if not self._loan.is_initialized:
            return ValidationResult.success()
        return validate_percentage_sum_is_complete(self.installments, self.tolerance)

    def summary(self) -> PlanSummary:
        sequence = self.installments
        return PlanSummary(
            count_paid=count_paid(sequence),
            count_pending=len(sequence) - count_paid(sequence),
            paid_amount=paid_amount(sequence),
            pending_amount=pending_amount(sequence),
            remaining_amount=remaining_amount(sequence, self._loan.total_amount),
            percentages=percentage_status(sequence, self.tolerance),
        )

    # --- Internals ---

    def _locate(self, installment_id: str) -> int | RejectionReason:
        if not self._loan.is_initialized:
            return RejectionReason.LOAN_NOT_INITIALIZED
        index = self.index_of(installment_id)
        return RejectionReason.INSTALLMENT_NOT_FOUND if index is None else index

    @staticmethod
    def _absorber_index(sequence: list[Installment] | tuple[Installment, ...], exclude: int | None) -> int | None:
        """Last pending installment other than ``exclude``; None when there is none."""
        for index in range(len(sequence) - 1, -1, -1):
            if index != exclude and sequence[index].is_pending:
                return index
        if exclude is not None and exclude < len(sequence) and sequence[exclude].is_pending:
            return exclude
        return None

    def _normalize(self, payload: InstallmentDraft) -> tuple[Decimal, Decimal, date] | ValidationResult:
        """Convert a draft's loose values; unparseable input becomes a rejection."""
        try:
            due_date = parse_date(payload.due_date)
        except (TypeError, ValueError):
            due_date = None
        if due_date is None:
            return ValidationResult.reject(RejectionReason.DATE_REQUIRED)

        try:
            raw_amount = to_decimal(payload.amount)
        except (TypeError, ValueError):
            return ValidationResult.reject(RejectionReason.AMOUNT_NOT_POSITIVE)
        try:
            amount = round_value(raw_amount)
            derived = percentage_of(amount, self._loan.total_amount)
        except ValueError:
            # More digits than any loan total can hold
            if raw_amount <= 0:
                return ValidationResult.reject(RejectionReason.AMOUNT_NOT_POSITIVE)
            return ValidationResult.reject(RejectionReason.AMOUNT_EXCEEDS_AVAILABLE)

        if payload.percentage is None:
            percentage = derived
        else:
            try:
                percentage = round_value(payload.percentage)
            except (TypeError, ValueError):
                return ValidationResult.reject(RejectionReason.PERCENTAGE_OUT_OF_RANGE)

        return amount, percentage, due_date

    @staticmethod
    def _clean_title(title: object) -> str:
        return "" if title is None else str(title).strip()

    @staticmethod
    def _check_successor_date(due_date: date, successor_date: date | None) -> ValidationResult:
        # The successor must not fall before the new date
        if successor_date is None:
            return ValidationResult.success()
        return validate_date_sequential(successor_date, due_date)

    def _commit(
        self,
        action: str,
        installments: list[Installment],
        installment_id: str,
        check: bool = False,
    ) -> MutationResult:
        loan = replace(self._loan, installments=tuple(installments))
        if check and not validate_percentage_sum_is_complete(loan.installments, self.tolerance):
            raise InvalidEntityStateError(
                f"{action} left loan {loan.loan_id} with percentages summing to "
                f"{sum(i.percentage for i in loan.installments)}"
            )

        self._loan = loan
        logger.info(
            "%s applied to installment %s of loan %s",
            action,
            installment_id,
            loan.loan_id,
            extra={"loan_id": loan.loan_id, "installment_id": installment_id},
        )
        return MutationResult(ok=True, loan=loan, installment_id=installment_id)

    def _reject(
        self,
        action: str,
        reason: RejectionReason | None,
        installment_id: str | None = None,
    ) -> MutationResult:
        logger.info(
            "%s rejected on loan %s: %s",
            action,
            self._loan.loan_id,
            reason.value if reason else None,
            extra={
                "loan_id": self._loan.loan_id,
                "installment_id": installment_id,
                "reason": reason.value if reason else None,
            },
        )
        return MutationResult(ok=False, loan=self._loan, reason=reason, installment_id=installment_id)
