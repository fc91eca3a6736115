"""Line-item and column totals for the summary block and the totals footer."""

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .formatters import has_value, to_number
from .table_templates import ColumnSpec


@dataclass(frozen=True)
class LineFields:
    """Row keys the aggregator reads. Defaults follow the API's camelCase payloads."""
    quantity: str = "quantity"
    unit_price: str = "unitPrice"
    subtotal: str = "subtotal"
    discount_amount: str = "discountAmount"
    discount_percentage: str = "discountPercentage"
    tax_amount: str = "taxAmount"
    tax_percentage: str = "taxPercentage"
    wht_amount: str = "whtAmount"
    wht_percentage: str = "whtPercentage"
    line_total: str = "lineTotal"
    total_amount: str = "totalAmount"
    equivalent_amount: str = "equivalentAmount"
    exchange_rate: str = "exchangeRate"


@dataclass
class LineAmounts:
    """Resolved monetary amounts for one line item."""
    subtotal: float = 0.0
    discount_amount: float = 0.0
    tax_amount: float = 0.0
    wht_amount: float = 0.0
    total_amount: float = 0.0
    equivalent_amount: float = 0.0


@dataclass
class TotalsRecord:
    """Document-level sums of every line's amounts."""
    subtotal: float = 0.0
    discount_amount: float = 0.0
    tax_amount: float = 0.0
    wht_amount: float = 0.0
    total_amount: float = 0.0
    equivalent_amount: float = 0.0

    @property
    def amount_after_discount(self) -> float:
        return self.subtotal - self.discount_amount

    @property
    def has_discount(self) -> bool:
        return abs(self.discount_amount) > 1e-9

    @property
    def has_wht(self) -> bool:
        return abs(self.wht_amount) > 1e-9

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class TotalsAggregator:
    """Resolves per-line amounts and sums them across rows."""

    def __init__(self, field_map: Optional[LineFields] = None):
        self.fields = field_map or LineFields()

    def line_amounts(self, row: Mapping[str, Any], exchange_rate: Optional[float] = None) -> LineAmounts:
        """
        Resolve one line's amounts.

        Explicit amounts take precedence over percentages. Discount, tax and
        WHT percentages apply to the line subtotal; tax and WHT apply after
        the discount.
        """
        f = self.fields

        if has_value(row.get(f.subtotal)):
            subtotal = to_number(row.get(f.subtotal))
        else:
            subtotal = to_number(row.get(f.quantity)) * to_number(row.get(f.unit_price))

        if has_value(row.get(f.discount_amount)):
            discount = to_number(row.get(f.discount_amount))
        else:
            discount = subtotal * to_number(row.get(f.discount_percentage)) / 100.0

        taxable = subtotal - discount

        if has_value(row.get(f.tax_amount)):
            tax = to_number(row.get(f.tax_amount))
        else:
            tax = taxable * to_number(row.get(f.tax_percentage)) / 100.0

        if has_value(row.get(f.wht_amount)):
            wht = to_number(row.get(f.wht_amount))
        else:
            wht = taxable * to_number(row.get(f.wht_percentage)) / 100.0

        if has_value(row.get(f.line_total)):
            total = to_number(row.get(f.line_total))
        elif has_value(row.get(f.total_amount)):
            total = to_number(row.get(f.total_amount))
        else:
            total = taxable + tax - wht

        if has_value(row.get(f.equivalent_amount)):
            equivalent = to_number(row.get(f.equivalent_amount))
        else:
            rate = to_number(row.get(f.exchange_rate)) or to_number(exchange_rate) or 1.0
            equivalent = total * rate

        return LineAmounts(
            subtotal=subtotal,
            discount_amount=discount,
            tax_amount=tax,
            wht_amount=wht,
            total_amount=total,
            equivalent_amount=equivalent,
        )

    def aggregate(self, rows: Iterable[Mapping[str, Any]], exchange_rate: Optional[float] = None) -> TotalsRecord:
        """Sum every line's amounts. The result does not depend on row order."""
        lines = [self.line_amounts(row, exchange_rate) for row in rows]
        return TotalsRecord(**{
            f.name: math.fsum(getattr(line, f.name) for line in lines)
            for f in fields(LineAmounts)
        })

    def column_totals(self, rows: Sequence[Mapping[str, Any]], columns: Sequence[ColumnSpec]) -> Dict[str, float]:
        """Sum each numeric, summable column across rows."""
        return {
            column.key: math.fsum(to_number(row.get(column.key)) for row in rows)
            for column in columns
            if column.is_totalled
        }


def total_label_span(columns: Sequence[ColumnSpec]) -> int:
    """Number of leading columns the "Total" label spans (at least one)."""
    span = 0
    for column in columns:
        if column.is_numeric:
            break
        span += 1
    return max(1, span)


def totals_row_cells(
    columns: Sequence[ColumnSpec],
    column_totals: Mapping[str, float]
) -> List[Optional[float]]:
    """Per-column footer values: a sum under totalled columns, None elsewhere."""
    return [column_totals.get(column.key) if column.is_totalled else None for column in columns]
