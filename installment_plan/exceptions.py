"""Custom exception hierarchy for installment-plan.

Validation outcomes are returned as values (see ``installment_plan.validation``);
these exceptions cover integration faults only.
"""


class InstallmentPlanError(Exception):
    """Base exception for all installment-plan errors."""


class EntityNotFoundError(InstallmentPlanError):
    """Raised when a referenced loan or installment does not exist."""


class InvalidEntityStateError(InstallmentPlanError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(InstallmentPlanError):
    """Raised when configuration is invalid or missing."""


class StorageError(InstallmentPlanError):
    """Raised when a key-value store operation fails."""


class SerializationError(StorageError):
    """Raised when a stored record cannot be encoded or decoded."""
