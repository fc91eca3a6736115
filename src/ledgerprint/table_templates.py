"""Column specifications and table templates for the printable reports."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Union


class Alignment(Enum):
    """Horizontal text alignment inside a cell."""
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class ColumnKind(Enum):
    """How a column's raw values are formatted and aggregated."""
    TEXT = "text"
    INTEGER = "integer"    # Quantities, points, day counts
    NUMBER = "number"      # Plain decimals
    MONEY = "money"        # Two-decimal amounts with thousands separators
    PERCENT = "percent"
    DATE = "date"

    @property
    def is_numeric(self) -> bool:
        return self in (ColumnKind.INTEGER, ColumnKind.NUMBER, ColumnKind.MONEY, ColumnKind.PERCENT)


class ReportType(Enum):
    """Printable document families."""
    STOCK_BALANCE = "stock_balance"
    CUSTOMER_LIST = "customer_list"
    CUSTOMER_BIRTHDAYS = "customer_birthdays"
    REVENUE = "revenue"
    TRIAL_BALANCE = "trial_balance"
    INVOICE = "invoice"
    GENERIC = "generic"


# Sizing defaults for columns built from bare header strings
DEFAULT_MIN_WIDTH = 40.0
DEFAULT_PREFERRED_PERCENT = 0.0


@dataclass
class ColumnSpec:
    """Specification for a table column."""
    header: str  # Header label
    key: str  # Row key the column reads
    min_width: float = DEFAULT_MIN_WIDTH  # Points
    preferred_percent: float = DEFAULT_PREFERRED_PERCENT  # Share of usable width
    align: Alignment = Alignment.LEFT
    kind: ColumnKind = ColumnKind.TEXT
    flexible: bool = False  # Absorbs layout surplus and rounding residue
    summable: bool = True  # Numeric columns only: included in the totals footer

    def __post_init__(self):
        if isinstance(self.align, str):
            self.align = Alignment(self.align)
        if isinstance(self.kind, str):
            self.kind = ColumnKind(self.kind)
        if self.min_width <= 0:
            raise ValueError(f"Column {self.key!r}: min_width must be positive, got {self.min_width}")
        if self.preferred_percent < 0:
            raise ValueError(f"Column {self.key!r}: preferred_percent must not be negative")

    @property
    def is_numeric(self) -> bool:
        return self.kind.is_numeric

    @property
    def is_totalled(self) -> bool:
        return self.kind.is_numeric and self.summable

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ColumnSpec":
        """Build a column from the CRUD layer's camelCase column description."""
        header = data.get("header") or data.get("label") or data.get("key") or ""
        key = data.get("key") or _key_from_header(header)
        kind = ColumnKind(data.get("kind", "text"))
        align = data.get("align") or ("right" if kind.is_numeric else "left")
        return cls(
            header=header,
            key=key,
            min_width=float(data.get("minWidth", data.get("min_width", DEFAULT_MIN_WIDTH))),
            preferred_percent=float(data.get("preferredPercent", data.get("preferred_percent", 0.0))),
            align=Alignment(align),
            kind=kind,
            flexible=bool(data.get("flexible", False)),
            summable=bool(data.get("summable", True)),
        )


@dataclass
class TableTemplate:
    """Column layout and titles for one report family."""
    report_type: ReportType
    title: str
    table_title: str
    column_specs: List[ColumnSpec]
    orientation: str = "landscape"
    show_totals: bool = True
    empty_message: Optional[str] = None
    subtitle: Optional[str] = None

    def visible_columns(self, visible: Optional[Mapping[str, bool]] = None) -> List[ColumnSpec]:
        """Columns switched on in the caller's visibility map (all when absent)."""
        if not visible:
            return list(self.column_specs)
        return [spec for spec in self.column_specs if visible.get(spec.key, False)]


def _key_from_header(header: str) -> str:
    """Derive a camelCase row key from a header label ("Unit Cost" -> "unitCost")."""
    words = [w for w in "".join(ch if ch.isalnum() else " " for ch in header).split() if w]
    if not words:
        return ""
    return words[0].lower() + "".join(w[:1].upper() + w[1:].lower() for w in words[1:])


def columns_from_headers(headers: Sequence[Union[str, ColumnSpec, Mapping[str, Any]]]) -> List[ColumnSpec]:
    """
    Normalise the input contract's headers into ColumnSpecs.

    Headers may be plain strings (keys derived from the label, default sizing),
    ready ColumnSpecs, or dicts in the CRUD layer's shape. When no column is
    marked flexible, the first text column becomes the flexible one.
    """
    columns: List[ColumnSpec] = []
    for header in headers:
        if isinstance(header, ColumnSpec):
            columns.append(header)
        elif isinstance(header, Mapping):
            columns.append(ColumnSpec.from_dict(header))
        else:
            columns.append(ColumnSpec(header=str(header), key=_key_from_header(str(header))))

    if columns and not any(c.flexible for c in columns):
        for column in columns:
            if column.kind == ColumnKind.TEXT:
                column.flexible = True
                break
    return columns


def _money(header: str, key: str, min_width: float = 50, percent: float = 8, summable: bool = True) -> ColumnSpec:
    return ColumnSpec(header, key, min_width, percent, Alignment.RIGHT, ColumnKind.MONEY, summable=summable)


def get_stock_balance_template(historical: bool = False) -> TableTemplate:
    """Stock balance (current or as-of-date) report."""
    return TableTemplate(
        report_type=ReportType.STOCK_BALANCE,
        title="Stock Balance as of Date Report" if historical else "Stock Balance Report",
        table_title="Stock Balance Details",
        column_specs=[
            ColumnSpec("Product Code", "productCode", 48, 8),
            ColumnSpec("Product Name", "productName", 80, 14, flexible=True),
            ColumnSpec("Part Number", "partNumber", 48, 8),
            ColumnSpec("Brand", "brandName", 40, 7),
            ColumnSpec("Category", "category", 40, 7),
            ColumnSpec("Manufacturer", "manufacturerName", 48, 8),
            ColumnSpec("Model", "modelName", 40, 7),
            ColumnSpec("Color", "colorName", 32, 5),
            ColumnSpec("Location", "storeLocation", 40, 8),
            _money("Unit Cost", "unitCost", 44, 9, summable=False),
            ColumnSpec("Quantity", "quantity", 40, 8, Alignment.RIGHT, ColumnKind.INTEGER),
            _money("Total Value", "totalValue", 52, 11),
        ],
    )


def get_customer_list_template() -> TableTemplate:
    """Customer list report."""
    return TableTemplate(
        report_type=ReportType.CUSTOMER_LIST,
        title="Customer List Report",
        subtitle="Complete Customer Information",
        table_title="Customer Details",
        empty_message="No customer data available for the selected criteria.",
        column_specs=[
            ColumnSpec("Customer ID", "customerId", 44, 7),
            ColumnSpec("Full Name", "fullName", 70, 11),
            ColumnSpec("Customer Group", "customerGroup", 50, 8),
            ColumnSpec("Phone", "phone", 48, 7),
            ColumnSpec("Email", "email", 60, 10),
            ColumnSpec("Website", "website", 50, 8),
            ColumnSpec("Fax", "fax", 40, 6),
            ColumnSpec("Birthday", "birthday", 44, 7, kind=ColumnKind.DATE),
            ColumnSpec("Loyalty Card", "loyaltyCard", 48, 7),
            ColumnSpec("Loyalty Card Points", "loyaltyCardPoints", 44, 7, Alignment.RIGHT,
                       ColumnKind.INTEGER, summable=False),
            ColumnSpec("Address", "address", 80, 13, flexible=True),
            _money("Account Balance", "accountBalance", 52, 9),
        ],
    )


def get_customer_birthdays_template(days_before: int = 30) -> TableTemplate:
    """Upcoming customer birthdays report."""
    return TableTemplate(
        report_type=ReportType.CUSTOMER_BIRTHDAYS,
        title="Customer Birthdays Report",
        subtitle=f"Upcoming Birthdays ({days_before} days)",
        table_title="Customer Birthdays",
        show_totals=False,
        empty_message="No customer birthdays data available for the selected criteria.",
        column_specs=[
            ColumnSpec("Customer ID", "customerId", 44, 10),
            ColumnSpec("Full Name", "fullName", 70, 16),
            ColumnSpec("Phone", "phone", 48, 10),
            ColumnSpec("Address", "address", 80, 20, flexible=True),
            ColumnSpec("Days Left", "daysLeft", 36, 7, Alignment.RIGHT, ColumnKind.INTEGER, summable=False),
            ColumnSpec("Birthday", "birthday", 44, 9, kind=ColumnKind.DATE),
            ColumnSpec("Customer Group", "customerGroup", 50, 14),
            ColumnSpec("Loyalty Card", "loyaltyCard", 48, 14),
        ],
    )


def get_revenue_template() -> TableTemplate:
    """Sales transactions (revenue) report."""
    return TableTemplate(
        report_type=ReportType.REVENUE,
        title="Revenue Report",
        table_title="Sales Transactions",
        empty_message="No revenue transaction data available for the selected criteria.",
        column_specs=[
            ColumnSpec("Ref Number", "transactionRefNumber", 56, 9),
            ColumnSpec("Date", "transactionDate", 44, 7, kind=ColumnKind.DATE),
            ColumnSpec("Type", "transactionType", 40, 6),
            ColumnSpec("Store", "storeName", 48, 8),
            ColumnSpec("Customer", "customerName", 70, 12, flexible=True),
            ColumnSpec("Status", "status", 40, 6),
            _money("Subtotal", "subtotal", 48, 7),
            _money("Discount", "discountAmount", 44, 7),
            _money("Tax", "taxAmount", 44, 7),
            _money("Total Amount", "totalAmount", 52, 8),
            _money("Paid", "paidAmount", 48, 7),
            _money("Balance", "balanceAmount", 48, 7),
            ColumnSpec("Currency", "currencyName", 40, 6),
        ],
    )


def get_trial_balance_template() -> TableTemplate:
    """Trial balance report over a flattened account tree."""
    return TableTemplate(
        report_type=ReportType.TRIAL_BALANCE,
        title="Trial Balance Report",
        table_title="Trial Balance",
        show_totals=False,  # TOTALS / DIFFERENCE rows come from the ledger summary
        empty_message="No account data available for the selected criteria.",
        orientation="portrait",
        column_specs=[
            ColumnSpec("Account Code", "code", 70, 20),
            ColumnSpec("Account Name", "name", 120, 40, flexible=True),
            _money("Debit (Dr)", "debit", 70, 20),
            _money("Credit (Cr)", "credit", 70, 20),
        ],
    )


def get_invoice_template(has_discounts: bool = True, has_wht: bool = False) -> TableTemplate:
    """Line items table for single-record invoices and orders."""
    columns = [
        ColumnSpec("#", "lineNumber", 18, 4, Alignment.CENTER, ColumnKind.INTEGER, summable=False),
        ColumnSpec("Product", "productName", 110, 30, flexible=True),
        ColumnSpec("Code", "productCode", 45, 10),
        ColumnSpec("Qty", "quantity", 30, 7, Alignment.RIGHT, ColumnKind.NUMBER),
        _money("Unit Price", "unitPrice", 48, 11, summable=False),
    ]
    if has_discounts:
        columns.append(_money("Discount", "discountAmount", 44, 9))
    columns.append(ColumnSpec("Tax %", "taxPercentage", 32, 7, Alignment.RIGHT, ColumnKind.PERCENT,
                              summable=False))
    if has_wht:
        columns.append(_money("WHT", "whtAmount", 40, 8))
    columns.append(_money("Line Total", "lineTotal", 56, 13))
    return TableTemplate(
        report_type=ReportType.INVOICE,
        title="Invoice",
        table_title="Items",
        orientation="portrait",
        column_specs=columns,
    )
