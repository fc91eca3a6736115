from __future__ import annotations

from decimal import Decimal

import pytest

from ledgerprint.number_words import amount_in_words_line, amount_to_words, integer_to_words


@pytest.mark.parametrize("amount, words", [
    (0, "Zero"),
    (19, "Nineteen"),
    (100, "One Hundred"),
    (110, "One Hundred Ten"),
    (1005, "One Thousand Five"),
    (1000000, "One Million"),
    (1000005, "One Million Five"),
    (2000000000, "Two Billion"),
    (1234.50, "One Thousand Two Hundred Thirty Four and 50/100"),
    (0.5, "Fifty Cents"),
    (0.01, "One Cent"),
    (Decimal("19.999"), "Twenty"),
    ("42.07", "Forty Two and 07/100"),
])
def test_amount_to_words(amount, words) -> None:
    assert amount_to_words(amount) == words


def test_cents_round_half_up() -> None:
    assert amount_to_words("0.125") == "Thirteen Cents"


def test_negative_amounts() -> None:
    assert amount_to_words(-15) == "Minus Fifteen"
    assert amount_to_words(-0.001) == "Zero"


def test_minor_unit_name() -> None:
    assert amount_to_words(0.25, minor_unit="Senti") == "Twenty Five Senti"
    assert amount_to_words(0.01, minor_unit="Senti") == "One Senti"


def test_amount_beyond_largest_scale_raises() -> None:
    assert integer_to_words(10 ** 18 - 1).startswith("Nine Hundred Ninety Nine Quadrillion")
    with pytest.raises(ValueError):
        integer_to_words(10 ** 18)


def test_non_amount_raises() -> None:
    with pytest.raises(ValueError):
        amount_to_words("abc")
    with pytest.raises(ValueError):
        amount_to_words(float("nan"))


def test_amount_in_words_line() -> None:
    assert amount_in_words_line(100.25, "US Dollars") == "One Hundred and 25/100 US Dollars Only"
    assert amount_in_words_line(7) == "Seven Only"
