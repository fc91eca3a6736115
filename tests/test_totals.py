from __future__ import annotations

import random

import pytest

from ledgerprint.table_templates import ColumnSpec
from ledgerprint.totals import TotalsAggregator, total_label_span, totals_row_cells


def test_discount_percentage_applies_to_line_subtotal() -> None:
    rows = [
        {"quantity": 2, "unitPrice": 10, "discountPercentage": 10},
        {"quantity": 0, "unitPrice": 20},
        {"quantity": 5, "unitPrice": 0},
    ]
    totals = TotalsAggregator().aggregate(rows)
    assert totals.subtotal == pytest.approx(20)
    assert totals.discount_amount == pytest.approx(2)
    assert totals.amount_after_discount == pytest.approx(18)
    assert totals.total_amount == pytest.approx(18)
    assert totals.has_discount
    assert not totals.has_wht


def test_tax_and_wht_apply_after_discount() -> None:
    line = TotalsAggregator().line_amounts(
        {"quantity": 1, "unitPrice": 100, "discountPercentage": 10, "taxPercentage": 18, "whtPercentage": 2}
    )
    assert line.tax_amount == pytest.approx(16.2)
    assert line.wht_amount == pytest.approx(1.8)
    assert line.total_amount == pytest.approx(90 + 16.2 - 1.8)


def test_explicit_amounts_win_over_percentages() -> None:
    line = TotalsAggregator().line_amounts({
        "quantity": 1, "unitPrice": 100,
        "discountAmount": 5, "discountPercentage": 50,
        "taxAmount": 3, "taxPercentage": 18,
        "lineTotal": 98,
    })
    assert line.discount_amount == 5
    assert line.tax_amount == 3
    assert line.total_amount == 98


def test_missing_and_formatted_values() -> None:
    aggregator = TotalsAggregator()
    assert aggregator.line_amounts({"quantity": "1,000", "unitPrice": "2.5"}).subtotal == 2500
    assert aggregator.line_amounts({"quantity": None, "unitPrice": "n/a"}).subtotal == 0


def test_equivalent_amount_uses_exchange_rate() -> None:
    totals = TotalsAggregator().aggregate([{"quantity": 2, "unitPrice": 5}], exchange_rate=2500)
    assert totals.equivalent_amount == pytest.approx(25000)


def test_totals_do_not_depend_on_row_order() -> None:
    rng = random.Random(7)
    rows = [{"quantity": rng.randint(1, 9), "unitPrice": rng.random() * 1000, "taxPercentage": 18}
            for _ in range(200)]
    aggregator = TotalsAggregator()
    expected = aggregator.aggregate(rows)
    shuffled = list(rows)
    for _ in range(5):
        rng.shuffle(shuffled)
        assert aggregator.aggregate(shuffled) == expected


def test_column_totals_cover_summable_numeric_columns() -> None:
    columns = [
        ColumnSpec("Product", "product", flexible=True),
        ColumnSpec("Qty", "quantity", kind="integer"),
        ColumnSpec("Unit Price", "unitPrice", kind="money", summable=False),
        ColumnSpec("Total", "lineTotal", kind="money"),
    ]
    rows = [{"product": "A", "quantity": 2, "unitPrice": 10, "lineTotal": 20},
            {"product": "B", "quantity": 3, "unitPrice": 1.5, "lineTotal": 4.5}]
    totals = TotalsAggregator().column_totals(rows, columns)
    assert totals == {"quantity": 5, "lineTotal": 24.5}
    assert totals_row_cells(columns, totals) == [None, 5, None, 24.5]


def test_total_label_spans_leading_text_columns() -> None:
    text, money = ColumnSpec("Name", "name"), ColumnSpec("Amount", "amount", kind="money")
    assert total_label_span([text, text, money]) == 2
    assert total_label_span([money, text]) == 1
    assert total_label_span([text]) == 1
