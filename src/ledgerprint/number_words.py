"""Monetary amounts in words for the legal "amount in words" line."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Union


ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
        "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
        "Seventeen", "Eighteen", "Nineteen"]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]
SCALES = ["", "Thousand", "Million", "Billion", "Trillion", "Quadrillion"]

CENT = Decimal("0.01")

Number = Union[int, float, str, Decimal]


def chunk_to_words(num: int) -> str:
    """Convert 0-999 to words. Zero gives an empty string."""
    if num < 20:
        return ONES[num]
    if num < 100:
        return TENS[num // 10] + (" " + ONES[num % 10] if num % 10 else "")
    rest = num % 100
    return ONES[num // 100] + " Hundred" + (" " + chunk_to_words(rest) if rest else "")


def integer_to_words(num: int) -> str:
    """Convert a non-negative integer to words, skipping zero chunks."""
    if num == 0:
        return "Zero"

    chunks: List[str] = []
    scale = 0
    while num > 0:
        if scale >= len(SCALES):
            raise ValueError("Amount too large to express in words")
        num, chunk = divmod(num, 1000)
        if chunk:
            words = chunk_to_words(chunk)
            chunks.append(f"{words} {SCALES[scale]}" if SCALES[scale] else words)
        scale += 1
    return " ".join(reversed(chunks))


def split_amount(amount: Number):
    """Split an amount into (negative, whole units, cents), cents rounded half-up."""
    try:
        value = Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Not a monetary amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Not a monetary amount: {amount!r}")
    negative = value < 0
    cents_total = int(abs(value) * 100)
    whole, cents = divmod(cents_total, 100)
    return negative, whole, cents


def amount_to_words(amount: Number, minor_unit: str = "Cents") -> str:
    """
    Convert a monetary amount to words.

    Examples:
        0        -> "Zero"
        1005     -> "One Thousand Five"
        1234.50  -> "One Thousand Two Hundred Thirty Four and 50/100"
        0.5      -> "Fifty Cents"
        0.01     -> "One Cent"
    """
    negative, whole, cents = split_amount(amount)

    if whole == 0 and cents:
        if cents == 1 and minor_unit.endswith("s"):
            minor_unit = minor_unit[:-1]
        words = f"{chunk_to_words(cents)} {minor_unit}".strip()
    else:
        words = integer_to_words(whole)
        if cents:
            words += f" and {cents:02d}/100"

    if negative and (whole or cents):
        words = "Minus " + words
    return words


def amount_in_words_line(amount: Number, currency_name: str = "", minor_unit: str = "Cents") -> str:
    """The full legal line, e.g. "One Hundred and 25/100 US Dollars Only"."""
    words = amount_to_words(amount, minor_unit)
    if currency_name:
        words += f" {currency_name}"
    return words + " Only"
