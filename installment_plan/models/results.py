"""Result value objects returned by the validation gate and orchestrator."""

from dataclasses import dataclass
from decimal import Decimal

from installment_plan.models.enums import RejectionReason
from installment_plan.models.plan import Loan


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation predicate: ok, or rejected with a reason code."""

    ok: bool
    reason: RejectionReason | None = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def reject(cls, reason: RejectionReason) -> "ValidationResult":
        return cls(ok=False, reason=reason)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class MutationResult:
    """Outcome of an orchestrator mutation.

    On rejection ``loan`` is the unchanged snapshot and ``reason`` is set.
    ``installment_id`` names the installment created or touched, when any.
    """

    ok: bool
    loan: Loan
    reason: RejectionReason | None = None
    installment_id: str | None = None

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class PercentageStatus:
    """Summary of how much of the 100% is allocated."""

    total: Decimal
    remaining: Decimal
    is_complete: bool
    has_available: bool


@dataclass(frozen=True)
class PlanSummary:
    """Payment progress of a loan."""

    count_paid: int
    count_pending: int
    paid_amount: Decimal
    pending_amount: Decimal
    remaining_amount: Decimal
    percentages: PercentageStatus
