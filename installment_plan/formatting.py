"""Display formatting for amounts, percentages and dates.

Presentation only: nothing in the engine uses these values to decide
invariants.
"""

from datetime import date

from installment_plan.allocation.rounding import Number, round_display
from installment_plan.constants import DEFAULT_CURRENCY, DISPLAY_PRECISION

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def format_number(value: Number, precision: int = DISPLAY_PRECISION) -> str:
    """Format for display: whole numbers without decimals, others rounded.

    >>> format_number(30)
    '30'
    >>> format_number("46.16")
    '46.2'
    """
    rounded = round_display(value, precision)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return f"{rounded:.{precision}f}"


def format_currency(value: Number, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount followed by its currency code, e.g. ``"46.2 USD"``."""
    return f"{format_number(value)} {currency}"


def format_percentage(value: Number) -> str:
    return f"{format_number(value)}%"


def format_date(value: date | str) -> str:
    """Format as ``DD/MM/YYYY``; ISO strings are accepted."""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return value.strftime("%d/%m/%Y")


def parse_display_date(value: str) -> date:
    """Parse a ``DD/MM/YYYY`` date back into a ``date``."""
    day, month, year = value.strip().split("/")
    return date(int(year), int(month), int(day))


def month_name(month: int) -> str:
    """English month name for 1-12; empty string otherwise."""
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return ""


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
