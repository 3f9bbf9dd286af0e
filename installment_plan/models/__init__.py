"""Domain models for installment plans."""

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
from installment_plan.models.results import (
    MutationResult,
    PercentageStatus,
    PlanSummary,
    ValidationResult,
)

__all__ = [
    "CreateInitial",
    "Delete",
    "Edit",
    "Insert",
    "Installment",
    "InstallmentDraft",
    "InstallmentStatus",
    "Loan",
    "MarkPaid",
    "MutationRequest",
    "MutationResult",
    "PercentageStatus",
    "PlanSummary",
    "RejectionReason",
    "UpdateDate",
    "ValidationResult",
]
