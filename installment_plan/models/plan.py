"""Loan and installment models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from installment_plan.models.enums import InstallmentStatus


@dataclass(frozen=True)
class Installment:
    """One scheduled payment entry of a loan's plan."""

    installment_id: str
    title: str
    amount: Decimal  # Currency units at internal precision
    percentage: Decimal  # Share of the loan total, 0-100
    status: InstallmentStatus
    due_date: date
    created_at: datetime
    paid_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == InstallmentStatus.PAID

    @property
    def is_pending(self) -> bool:
        return self.status == InstallmentStatus.PENDING


@dataclass(frozen=True)
class Loan:
    """Loan with its ordered installment sequence.

    Instances are snapshots: every accepted mutation produces a new ``Loan``.
    """

    loan_id: str
    name: str
    total_amount: Decimal
    created_at: datetime
    installments: tuple[Installment, ...] = field(default_factory=tuple)
    notes: str | None = None

    @property
    def is_initialized(self) -> bool:
        """Whether the first installment has been created."""
        return len(self.installments) > 0


@dataclass(frozen=True)
class InstallmentDraft:
    """Caller-supplied values for a new or edited installment.

    ``percentage`` may be omitted, in which case it is derived from
    ``amount``. ``due_date`` accepts a ``date`` or an ISO ``YYYY-MM-DD``
    string; ``None`` or an empty string is rejected as ``DATE_REQUIRED``.
    """

    title: str
    amount: Decimal | int | float | str
    due_date: date | str | None
    percentage: Decimal | int | float | str | None = None
