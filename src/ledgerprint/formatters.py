"""Cell and amount formatting."""

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from .table_templates import ColumnKind


PLACEHOLDER = "--"

ISO_CURRENCY = re.compile(r"^[A-Z]{3}$")

# Symbols for the currencies the application commonly prints
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "TZS": "TSh ",
    "KES": "KSh ",
}


def to_number(value: Any) -> float:
    """
    Parse a raw cell value as a number.

    Accepts ints, floats and numeric strings with thousands separators.
    None, NaN, booleans and anything unparsable count as zero.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def has_value(value: Any) -> bool:
    """True when a raw value is present (not None, NaN or blank)."""
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def format_number(value: float, decimals: int = 2) -> str:
    return f"{value:,.{decimals}f}"


def format_integer(value: float) -> str:
    return f"{round(value):,d}"


def format_currency(amount: float, currency: str = "USD", symbol: Optional[str] = None) -> str:
    """
    Format an amount with a currency marker.

    An explicit symbol wins; ISO codes get their known symbol or a code prefix;
    auto-generated codes (e.g. "HAM-CUR-0001") print the bare number.
    """
    number = format_number(amount)
    if symbol:
        return f"{symbol}{number}"
    if currency and ISO_CURRENCY.match(currency):
        known = CURRENCY_SYMBOLS.get(currency)
        if known:
            return f"-{known}{number[1:]}" if amount < 0 else f"{known}{number}"
        return f"{currency} {number}"
    return number


def parse_date(value: Any) -> Optional[date]:
    """Parse ISO dates / datetimes (trailing "Z" allowed)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not has_value(value):
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def format_date(value: Any, placeholder: str = PLACEHOLDER) -> str:
    """Format a date as e.g. "Mar 5, 2025"; unparsable text passes through."""
    parsed = parse_date(value)
    if parsed is None:
        return str(value).strip() if has_value(value) else placeholder
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def format_cell(value: Any, kind: ColumnKind, placeholder: str = PLACEHOLDER) -> str:
    """Render a raw row value as cell text for a column of the given kind."""
    if kind == ColumnKind.DATE:
        return format_date(value, placeholder)
    if kind.is_numeric:
        if not has_value(value):
            return placeholder
        if isinstance(value, str) and to_number(value) == 0.0 and not _looks_numeric(value):
            return value.strip()  # Labels such as "TOTALS" in numeric columns
        number = to_number(value)
        if kind == ColumnKind.INTEGER:
            return format_integer(number)
        if kind == ColumnKind.PERCENT:
            return f"{number:.2f}%"
        return format_number(number)
    if not has_value(value):
        return placeholder
    return str(value).rstrip()  # Leading spaces carry tree indentation


def _looks_numeric(text: str) -> bool:
    try:
        float(text.strip().replace(",", ""))
    except ValueError:
        return False
    return True
