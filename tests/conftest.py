"""Pytest configuration and fixtures."""

from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from installment_plan.clock import FixedClock
from installment_plan.ids import FakerIdGenerator
from installment_plan.models import Installment, InstallmentStatus, Loan
from installment_plan.orchestrator import SequenceOrchestrator, create_loan

FIXED_NOW = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2024-01-01 09:30 UTC."""
    return FixedClock(FIXED_NOW)


@pytest.fixture
def ids(seed: int) -> FakerIdGenerator:
    """Seeded identifier generator."""
    return FakerIdGenerator(seed=seed)


@pytest.fixture
def loan(ids: FakerIdGenerator, clock: FixedClock) -> Loan:
    """Empty loan over the default total of 182."""
    return create_loan("Test loan", Decimal("182"), ids, clock)


@pytest.fixture
def plan(loan: Loan, ids: FakerIdGenerator, clock: FixedClock) -> SequenceOrchestrator:
    """Orchestrator over the empty 182 loan."""
    return SequenceOrchestrator(loan, id_generator=ids, clock=clock)


@pytest.fixture
def make_installment() -> Callable[..., Installment]:
    """Factory for installments with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(
        amount: str = "100",
        percentage: str = "50",
        status: InstallmentStatus = InstallmentStatus.PENDING,
        due_date: date = date(2024, 1, 15),
        title: str | None = None,
    ) -> Installment:
        number = next(counter)
        return Installment(
            installment_id=f"inst-test-{number:03d}",
            title=title or f"Payment {number}",
            amount=Decimal(amount),
            percentage=Decimal(percentage),
            status=status,
            due_date=due_date,
            created_at=FIXED_NOW,
            paid_at=FIXED_NOW if status == InstallmentStatus.PAID else None,
        )

    return _make


@pytest.fixture
def make_plan(
    make_installment: Callable[..., Installment],
    ids: FakerIdGenerator,
    clock: FixedClock,
) -> Callable[..., SequenceOrchestrator]:
    """Factory for an orchestrator over a loan with given allocations.

    Allocations are ``(amount, percentage, status)`` tuples; due dates are
    spaced one month apart starting 2024-01-15.
    """

    def _make(total: str, allocations: list[tuple[str, str, InstallmentStatus]]) -> SequenceOrchestrator:
        installments = tuple(
            make_installment(amount, percentage, status, date(2024, 1 + index, 15))
            for index, (amount, percentage, status) in enumerate(allocations)
        )
        loan = Loan(
            loan_id="loan-test-001",
            name="Fixture loan",
            total_amount=Decimal(total),
            created_at=FIXED_NOW,
            installments=installments,
        )
        return SequenceOrchestrator(loan, id_generator=ids, clock=clock)

    return _make
