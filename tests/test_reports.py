from __future__ import annotations

import asyncio

import pytest

from ledgerprint.company import CompanyDetails, DefaultsProvider
from ledgerprint.company_source import CompanySource
from ledgerprint.document_renderer import DocumentKind, DocumentRenderer
from ledgerprint.reports import (
    customer_birthdays_report, flatten_accounts, generate_report, get_builder, invoice_document,
    revenue_report, spec_from_payload, stock_balance_report, trial_balance_report,
)
from ledgerprint.table_templates import Alignment, ColumnKind


def test_stock_balance_visible_columns_and_subtitle() -> None:
    export = {
        "data": [{"productName": "Cable", "quantity": 3, "totalValue": 30.0}],
        "visibleColumns": {"productName": True, "quantity": True, "totalValue": True, "brandName": False},
        "reportType": "historical",
        "filters": {"asOfDate": "2025-03-05"},
    }
    spec = stock_balance_report(export)
    assert [c.key for c in spec.columns] == ["productName", "quantity", "totalValue"]
    assert spec.metadata.title == "Stock Balance as of Date Report"
    assert spec.metadata.subtitle == "As of Mar 5, 2025"
    assert spec.metadata.report_type == "historical"

    current = stock_balance_report({"data": [], "reportType": "current"})
    assert current.metadata.subtitle == "Current Stock Levels"
    assert len(current.columns) == 12


def test_all_columns_hidden_shows_every_column() -> None:
    spec = stock_balance_report({"data": [], "visibleColumns": {"productName": False}})
    assert len(spec.columns) == 12


def test_revenue_period_subtitle() -> None:
    spec = revenue_report({"data": [], "filters": {"dateFrom": "2025-01-01", "dateTo": "2025-01-31"}})
    assert spec.metadata.subtitle == "From Jan 1, 2025 to Jan 31, 2025"
    assert revenue_report({"data": []}).metadata.subtitle is None


def test_birthdays_subtitle_and_days_left() -> None:
    spec = customer_birthdays_report({"data": [{"fullName": "Ann", "daysLeft": "4"}],
                                      "filters": {"daysBefore": 14}})
    assert spec.metadata.subtitle == "Upcoming Birthdays (14 days)"
    assert spec.rows[0]["daysLeft"] == 4
    assert not spec.metadata.show_totals


TREE = [
    {"code": "1000", "name": "Assets", "totalDebit": 300, "totalCredit": 0, "children": [
        {"code": "1100", "name": "Cash", "totalDebit": 100, "totalCredit": 0},
        {"code": "1200", "name": "Receivables", "totalDebit": 200, "totalCredit": 0},
    ]},
    {"code": "2000", "name": "Liabilities", "totalDebit": 0, "totalCredit": 250, "children": []},
]


def test_flatten_accounts_is_depth_first_with_indent() -> None:
    rows = flatten_accounts(TREE)
    assert [r["code"] for r in rows] == ["1000", "  1100", "  1200", "2000"]
    assert [r["level"] for r in rows] == [0, 1, 1, 0]
    assert rows[1]["debit"] == 100


def test_trial_balance_summary_rows() -> None:
    export = {
        "data": TREE,
        "summary": {"totalDebit": 300, "totalCredit": 250, "difference": 50, "isBalanced": False},
        "metadata": {"generatedBy": {"name": "Jane Accountant"}, "generatedAt": "2025-03-05T08:00:00Z"},
    }
    spec = trial_balance_report(export)
    assert [r["code"] for r in spec.rows[-2:]] == ["TOTALS", "DIFFERENCE"]
    assert spec.rows[-1]["debit"] == 50 and spec.rows[-1]["credit"] == 0
    assert spec.metadata.generated_by == "Jane Accountant"
    assert spec.metadata.generated_on == "2025-03-05T08:00:00Z"
    assert spec.orientation == "portrait"

    balanced = dict(export, summary={"totalDebit": 300, "totalCredit": 300, "difference": 0, "isBalanced": True})
    assert trial_balance_report(balanced).rows[-1]["code"] == "TOTALS"


def test_trial_balance_keeps_indentation_in_rendered_cells() -> None:
    document = DocumentRenderer().render(trial_balance_report({"data": TREE, "generatedOn": "today"}))
    cells = [c.text for c in document.commands_tagged("cell")]
    assert "  1100" in cells


def test_invoice_derives_line_amounts() -> None:
    spec = invoice_document({
        "number": "INV-7",
        "currency": "USD",
        "customer": {"name": "Globex", "phone": "555-0100"},
        "items": [
            {"productName": "Cable", "quantity": 2, "unitPrice": 10, "discountPercentage": 10},
            {"productName": "Router", "quantity": 1, "unitPrice": 50, "taxPercentage": 18, "lineTotal": 59},
        ],
        "signatures": ["Cashier", "Manager"],
    })
    assert spec.kind == DocumentKind.INVOICE
    assert [item["lineNumber"] for item in spec.rows] == [1, 2]
    assert spec.rows[0]["discountAmount"] == pytest.approx(2)
    assert spec.rows[0]["lineTotal"] == pytest.approx(18)
    assert spec.rows[1]["lineTotal"] == 59
    assert "discountAmount" in [c.key for c in spec.columns]
    assert "whtAmount" not in [c.key for c in spec.columns]
    assert spec.metadata.recipient.lines == ["Globex", "Tel: 555-0100"]
    assert spec.metadata.signature_labels == ("Cashier", "Manager")
    assert spec.metadata.invoice.document_number == "INV-7"


def test_invoice_without_discounts_drops_discount_column() -> None:
    spec = invoice_document({"items": [{"productName": "Cable", "quantity": 1, "unitPrice": 5}]})
    assert "discountAmount" not in [c.key for c in spec.columns]
    assert spec.metadata.recipient is None


def test_generic_payload_infers_numeric_columns() -> None:
    spec = spec_from_payload({
        "title": "Ad hoc",
        "headers": ["Item Name", "Units", "Weight", {"header": "Code", "key": "code", "kind": "text"}],
        "data": [
            {"itemName": "Bolt", "units": 4, "weight": 0.5, "code": 100},
            {"itemName": "Nut", "units": 6, "weight": 0.25, "code": 200},
        ],
    })
    kinds = {c.key: c.kind for c in spec.columns}
    assert kinds == {"itemName": ColumnKind.TEXT, "units": ColumnKind.INTEGER,
                     "weight": ColumnKind.NUMBER, "code": ColumnKind.TEXT}
    assert spec.columns[1].align == Alignment.RIGHT
    assert [c.flexible for c in spec.columns] == [True, False, False, False]


def test_generic_payload_without_headers_uses_row_keys() -> None:
    spec = spec_from_payload({"data": [{"storeName": "Main", "salesTotal": 10.5}]})
    assert [c.header for c in spec.columns] == ["Store Name", "Sales Total"]


def test_get_builder() -> None:
    assert get_builder("invoice") is invoice_document
    with pytest.raises(ValueError):
        get_builder("payroll")


def test_generate_report_prefers_payload_company_without_api() -> None:
    captured = {}

    def builder(export, company=None, logo=None):
        captured["company"] = company
        return spec_from_payload(export, company, logo)

    pdf = asyncio.run(generate_report(builder, {"data": [{"a": 1}], "companyDetails": {"name": "Acme"}}))
    assert pdf.startswith(b"%PDF")
    assert captured["company"] is None


def test_generate_report_uses_fetched_company() -> None:
    class StaticSource(CompanySource):
        async def fetch_company(self) -> CompanyDetails:
            return self.defaults.merge({"name": "Fetched Co"})

    source = StaticSource("http://api.test", DefaultsProvider())
    captured = {}

    def builder(export, company=None, logo=None):
        captured["company"] = company
        return spec_from_payload(export, company, logo)

    asyncio.run(generate_report(builder, {"data": []}, source=source))
    assert captured["company"].name == "Fetched Co"
