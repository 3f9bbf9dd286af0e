"""Mutation requests accepted by the sequence orchestrator."""

from dataclasses import dataclass
from datetime import date

from installment_plan.models.plan import InstallmentDraft


@dataclass(frozen=True)
class CreateInitial:
    """Create the advance installment (100% of the total) on an empty plan."""


@dataclass(frozen=True)
class Insert:
    index: int
    payload: InstallmentDraft


@dataclass(frozen=True)
class Edit:
    installment_id: str
    payload: InstallmentDraft


@dataclass(frozen=True)
class MarkPaid:
    installment_id: str


@dataclass(frozen=True)
class Delete:
    installment_id: str


@dataclass(frozen=True)
class UpdateDate:
    installment_id: str
    due_date: date | str


MutationRequest = CreateInitial | Insert | Edit | MarkPaid | Delete | UpdateDate
