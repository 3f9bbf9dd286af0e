"""Enumeration types for installment plan entities."""

from enum import Enum


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class RejectionReason(str, Enum):
    """Stable reason codes returned by the validation gate."""

    DATE_REQUIRED = "DATE_REQUIRED"
    DATE_BEFORE_MINIMUM = "DATE_BEFORE_MINIMUM"
    AMOUNT_NOT_POSITIVE = "AMOUNT_NOT_POSITIVE"
    AMOUNT_EXCEEDS_AVAILABLE = "AMOUNT_EXCEEDS_AVAILABLE"
    PERCENTAGE_OUT_OF_RANGE = "PERCENTAGE_OUT_OF_RANGE"
    PERCENTAGE_EXCEEDS_AVAILABLE = "PERCENTAGE_EXCEEDS_AVAILABLE"
    PRIOR_INSTALLMENT_UNPAID = "PRIOR_INSTALLMENT_UNPAID"
    INSTALLMENT_ALREADY_PAID_UNEDITABLE = "INSTALLMENT_ALREADY_PAID_UNEDITABLE"
    SOLE_INSTALLMENT_UNDELETABLE = "SOLE_INSTALLMENT_UNDELETABLE"
    PAID_INSTALLMENT_UNDELETABLE = "PAID_INSTALLMENT_UNDELETABLE"
    NO_REDISTRIBUTION_TARGET = "NO_REDISTRIBUTION_TARGET"
    PERCENTAGE_SUM_INVALID = "PERCENTAGE_SUM_INVALID"
    # Entry-point guards of the orchestrator
    AMOUNT_MUST_COVER_REMAINING = "AMOUNT_MUST_COVER_REMAINING"
    INSTALLMENT_ALREADY_PAID = "INSTALLMENT_ALREADY_PAID"
    INSTALLMENT_NOT_FOUND = "INSTALLMENT_NOT_FOUND"
    INVALID_POSITION = "INVALID_POSITION"
    LOAN_ALREADY_INITIALIZED = "LOAN_ALREADY_INITIALIZED"
    LOAN_NOT_INITIALIZED = "LOAN_NOT_INITIALIZED"
    TOTAL_NOT_POSITIVE = "TOTAL_NOT_POSITIVE"
