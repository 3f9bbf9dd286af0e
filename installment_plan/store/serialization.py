"""Serialization of loans to and from JSON bytes."""

import json
from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from installment_plan.exceptions import SerializationError
from installment_plan.models.enums import InstallmentStatus
from installment_plan.models.plan import Installment, Loan


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Decimals become strings so no precision is lost on the way to storage.
    """
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def loan_to_dict(loan: Loan) -> dict:
    """Convert a loan and its installments to a JSON-ready dict."""
    return {key: serialize_value(value) for key, value in asdict(loan).items()}


def installment_from_dict(data: dict) -> Installment:
    paid_at = data.get("paid_at")
    return Installment(
        installment_id=data["installment_id"],
        title=data["title"],
        amount=Decimal(data["amount"]),
        percentage=Decimal(data["percentage"]),
        status=InstallmentStatus(data["status"]),
        due_date=date.fromisoformat(data["due_date"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        paid_at=datetime.fromisoformat(paid_at) if paid_at else None,
    )


def loan_from_dict(data: dict) -> Loan:
    """Rebuild a loan from :func:`loan_to_dict` output.

    Raises
    ------
    SerializationError
        If a field is missing or malformed.
    """
    try:
        return Loan(
            loan_id=data["loan_id"],
            name=data["name"],
            total_amount=Decimal(data["total_amount"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            installments=tuple(installment_from_dict(item) for item in data.get("installments", [])),
            notes=data.get("notes"),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise SerializationError(f"Malformed loan record: {e!r}") from e


def dumps(loan: Loan) -> bytes:
    return json.dumps(loan_to_dict(loan), ensure_ascii=False).encode("utf-8")


def loads(raw: bytes) -> Loan:
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SerializationError(f"Loan record is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SerializationError("Loan record must be a JSON object")
    return loan_from_dict(data)
