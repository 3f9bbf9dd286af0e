"""Deterministic decimal rounding for amounts and percentages."""

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation

from installment_plan.constants import CALCULATION_PRECISION, DISPLAY_PRECISION

# Room for 30 integer digits at 10 decimal places
_CONTEXT = Context(prec=40, rounding=ROUND_HALF_UP)

Number = Decimal | int | float | str


def to_decimal(value: Number) -> Decimal:
    """Convert a caller-supplied number to ``Decimal`` without float artefacts.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.

    Raises
    ------
    ValueError
        If the value is not a finite number.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Not a number: {value!r}") from e

    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def round_value(value: Number, precision: int = CALCULATION_PRECISION) -> Decimal:
    """Round half away from zero to ``precision`` decimal places.

    Examples
    --------
    >>> round_value(Decimal("46.123456"), 2)
    Decimal('46.12')
    >>> round_value(Decimal("30.5"), 0)
    Decimal('31')
    >>> round_value(Decimal("-2.5"), 0)
    Decimal('-3')

    Raises
    ------
    ValueError
        If the value is not a finite number, or has too many digits to be
        held at ``precision`` places.
    """
    exponent = Decimal(1).scaleb(-precision)
    try:
        return to_decimal(value).quantize(exponent, context=_CONTEXT)
    except InvalidOperation as e:
        raise ValueError(f"Too many digits to round: {value!r}") from e


def round_display(value: Number, precision: int = DISPLAY_PRECISION) -> Decimal:
    """Round for presentation only."""
    return round_value(value, precision)
