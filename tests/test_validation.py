"""Tests for the validation gate."""

from collections.abc import Callable
from datetime import date
from decimal import Decimal

import pytest

from installment_plan.models import Installment, InstallmentStatus, RejectionReason
from installment_plan.validation import (
    REASON_MESSAGES,
    available_amount_for,
    available_percentage_for,
    can_delete,
    can_delete_with_redistribution,
    can_edit,
    can_pay,
    find_redistribution_target,
    has_available_percentage,
    max_date_for,
    min_date_for,
    parse_date,
    validate_amount,
    validate_date_required,
    validate_date_sequential,
    validate_full_payment,
    validate_loan_total,
    validate_percentage,
    validate_percentage_sum_is_complete,
)

PAID = InstallmentStatus.PAID
PENDING = InstallmentStatus.PENDING


class TestParseDate:
    """Tests for date parsing."""

    def test_accepts_date_and_iso_string(self) -> None:
        """Test dates pass through and ISO strings parse."""
        assert parse_date(date(2024, 1, 15)) == date(2024, 1, 15)
        assert parse_date("2024-01-15") == date(2024, 1, 15)

    def test_blank_is_none(self) -> None:
        """Test missing values parse to None."""
        assert parse_date(None) is None
        assert parse_date("   ") is None

    def test_invalid_string(self) -> None:
        """Test malformed strings raise ValueError."""
        with pytest.raises(ValueError):
            parse_date("15/01/2024")

    @pytest.mark.parametrize("value", [20240115, 1.5, ["2024-01-15"]])
    def test_non_string(self, value: object) -> None:
        """Test values that are neither dates nor strings raise TypeError."""
        with pytest.raises(TypeError):
            parse_date(value)  # type: ignore[arg-type]


class TestStatusRules:
    """Tests for pay, edit and delete eligibility."""

    def test_can_pay_requires_paid_predecessor(self, make_installment: Callable[..., Installment]) -> None:
        """Test payment order is enforced."""
        sequence = [make_installment(status=PENDING), make_installment(status=PENDING)]

        assert can_pay(0, sequence)
        assert can_pay(1, sequence).reason == RejectionReason.PRIOR_INSTALLMENT_UNPAID

        sequence[0] = make_installment(status=PAID)
        assert can_pay(1, sequence)

    def test_can_edit(self, make_installment: Callable[..., Installment]) -> None:
        """Test paid installments are read-only."""
        assert can_edit(make_installment(status=PENDING))
        assert can_edit(make_installment(status=PAID)).reason == RejectionReason.INSTALLMENT_ALREADY_PAID_UNEDITABLE

    def test_can_delete(self, make_installment: Callable[..., Installment]) -> None:
        """Test sole and paid installments cannot be deleted."""
        pending = make_installment(status=PENDING)
        paid = make_installment(status=PAID)

        assert can_delete(pending, 1).reason == RejectionReason.SOLE_INSTALLMENT_UNDELETABLE
        assert can_delete(paid, 2).reason == RejectionReason.PAID_INSTALLMENT_UNDELETABLE
        assert can_delete(pending, 2)

    def test_sole_check_precedes_paid_check(self, make_installment: Callable[..., Installment]) -> None:
        """Test a sole paid installment reports the sole-installment reason."""
        assert can_delete(make_installment(status=PAID), 1).reason == RejectionReason.SOLE_INSTALLMENT_UNDELETABLE

    def test_redistribution_target_searches_forward_first(
        self, make_installment: Callable[..., Installment]
    ) -> None:
        """Test the nearest later pending installment is preferred."""
        sequence = [
            make_installment(status=PENDING),
            make_installment(status=PENDING),
            make_installment(status=PAID),
            make_installment(status=PENDING),
        ]

        assert find_redistribution_target(1, sequence) == 3
        assert find_redistribution_target(3, sequence) == 1

    def test_no_redistribution_target(self, make_installment: Callable[..., Installment]) -> None:
        """Test deleting the only pending installment is rejected."""
        sequence = [make_installment(status=PAID), make_installment(status=PAID), make_installment(status=PENDING)]

        assert find_redistribution_target(2, sequence) is None
        assert can_delete_with_redistribution(2, sequence).reason == RejectionReason.NO_REDISTRIBUTION_TARGET

    def test_delete_with_redistribution_checks_base_rules_first(
        self, make_installment: Callable[..., Installment]
    ) -> None:
        """Test paid installments are rejected before target lookup."""
        sequence = [make_installment(status=PAID), make_installment(status=PENDING)]

        assert can_delete_with_redistribution(0, sequence).reason == RejectionReason.PAID_INSTALLMENT_UNDELETABLE


class TestAllocationRules:
    """Tests for amount and percentage checks."""

    def test_has_available_percentage(self, make_installment: Callable[..., Installment]) -> None:
        """Test availability respects the tolerance."""
        assert has_available_percentage([])
        assert has_available_percentage([make_installment("100", "50")])
        assert not has_available_percentage([make_installment("100", "99.995")])

    def test_percentage_sum_is_complete(self, make_installment: Callable[..., Installment]) -> None:
        """Test the 100% invariant within tolerance."""
        assert validate_percentage_sum_is_complete([make_installment("1", "50"), make_installment("1", "50")])
        assert validate_percentage_sum_is_complete([make_installment("1", "99.995")])
        result = validate_percentage_sum_is_complete([make_installment("1", "50")])
        assert result.reason == RejectionReason.PERCENTAGE_SUM_INVALID

    @pytest.mark.parametrize("total", [0, -5, "abc", "1e35"])
    def test_loan_total_must_be_positive(self, total: object) -> None:
        """Test invalid totals are rejected."""
        assert validate_loan_total(total).reason == RejectionReason.TOTAL_NOT_POSITIVE  # type: ignore[arg-type]

    def test_validate_amount(self) -> None:
        """Test amount bounds."""
        assert validate_amount(50, 100)
        assert validate_amount(100, 100)
        assert validate_amount(0, 100).reason == RejectionReason.AMOUNT_NOT_POSITIVE
        assert validate_amount(-1, 100).reason == RejectionReason.AMOUNT_NOT_POSITIVE
        assert validate_amount("100.01", 100).reason == RejectionReason.AMOUNT_EXCEEDS_AVAILABLE

    def test_validate_percentage(self) -> None:
        """Test percentage bounds."""
        assert validate_percentage(50, 50)
        assert validate_percentage(0, 100).reason == RejectionReason.PERCENTAGE_OUT_OF_RANGE
        assert validate_percentage(101, 100).reason == RejectionReason.PERCENTAGE_OUT_OF_RANGE
        assert validate_percentage(60, 50).reason == RejectionReason.PERCENTAGE_EXCEEDS_AVAILABLE

    def test_available_for_new_installment(self, make_installment: Callable[..., Installment]) -> None:
        """Test the ceiling for a new installment."""
        sequence = [make_installment("60", "30"), make_installment("40", "20")]

        assert available_amount_for(sequence, 200) == Decimal("100")
        assert available_percentage_for(sequence) == Decimal("50")

    def test_available_includes_own_and_funder(self, make_installment: Callable[..., Installment]) -> None:
        """Test an edit may reuse its own allocation plus the funder's."""
        sequence = [make_installment("100", "50"), make_installment("100", "50")]

        assert available_amount_for(sequence, 200, index=0) == Decimal("100")
        assert available_amount_for(sequence, 200, index=0, funder_index=1) == Decimal("200")
        assert available_percentage_for(sequence, index=0, funder_index=1) == Decimal("100")

    def test_funder_equal_to_index_counts_once(self, make_installment: Callable[..., Installment]) -> None:
        """Test an installment funding itself is not double counted."""
        sequence = [make_installment("100", "50", PAID), make_installment("100", "50")]

        assert available_amount_for(sequence, 200, index=1, funder_index=1) == Decimal("100")


class TestDateRules:
    """Tests for due date checks."""

    def test_validate_date_required(self) -> None:
        """Test missing dates are rejected."""
        assert validate_date_required(date(2024, 1, 1))
        assert validate_date_required(None).reason == RejectionReason.DATE_REQUIRED
        assert validate_date_required("").reason == RejectionReason.DATE_REQUIRED

    def test_date_sequential(self) -> None:
        """Test dates before the minimum are rejected."""
        assert validate_date_sequential("2024-01-10", "2024-01-15").reason == RejectionReason.DATE_BEFORE_MINIMUM
        assert validate_date_sequential("2024-01-20", "2024-01-15")

    def test_same_date_is_allowed(self) -> None:
        """Test the minimum itself is accepted."""
        assert validate_date_sequential(date(2024, 1, 15), date(2024, 1, 15))

    def test_no_minimum(self) -> None:
        """Test any date passes when there is no minimum."""
        assert validate_date_sequential("1999-01-01", None)

    def test_min_and_max_dates(self, make_installment: Callable[..., Installment]) -> None:
        """Test bounds come from the neighbours."""
        sequence = [
            make_installment(due_date=date(2024, 1, 15)),
            make_installment(due_date=date(2024, 2, 15)),
            make_installment(due_date=date(2024, 3, 15)),
        ]

        assert min_date_for(0, sequence) is None
        assert min_date_for(2, sequence) == date(2024, 2, 15)
        assert max_date_for(1, sequence) == date(2024, 3, 15)
        assert max_date_for(2, sequence) is None
        assert max_date_for(1, sequence, inserting=True) == date(2024, 2, 15)
        assert max_date_for(3, sequence, inserting=True) is None


class TestValidateFullPayment:
    """Tests for fail-fast payload validation."""

    def test_valid_payload(self) -> None:
        """Test a complete payload passes."""
        assert validate_full_payment(50, 25, "2024-02-01", "2024-01-15", 100, 50)

    def test_reports_first_failure_only(self) -> None:
        """Test the date is checked before the amount."""
        result = validate_full_payment(0, 0, None, None, 100, 50)

        assert result.reason == RejectionReason.DATE_REQUIRED

    @pytest.mark.parametrize(
        ("amount", "percentage", "due_date", "reason"),
        [
            (50, 25, "2024-01-01", RejectionReason.DATE_BEFORE_MINIMUM),
            (0, 25, "2024-02-01", RejectionReason.AMOUNT_NOT_POSITIVE),
            (150, 25, "2024-02-01", RejectionReason.AMOUNT_EXCEEDS_AVAILABLE),
            (50, 0, "2024-02-01", RejectionReason.PERCENTAGE_OUT_OF_RANGE),
            (50, 75, "2024-02-01", RejectionReason.PERCENTAGE_EXCEEDS_AVAILABLE),
        ],
    )
    def test_rejections(self, amount: int, percentage: int, due_date: str, reason: RejectionReason) -> None:
        """Test each rule reports its reason code."""
        result = validate_full_payment(amount, percentage, due_date, "2024-01-15", 100, 50)

        assert not result
        assert result.reason == reason


def test_every_reason_has_a_message() -> None:
    """Test the presentation layer can describe every code."""
    assert set(REASON_MESSAGES) == set(RejectionReason)
