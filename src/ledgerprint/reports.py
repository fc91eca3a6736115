"""Report builders: turn export payloads into report specs, and generate PDFs."""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .company import CompanyDetails
from .company_source import CompanySource
from .document_renderer import (
    DocumentKind, DocumentMetadata, DocumentRenderer, InvoiceDetails, Party, ReportSpec,
)
from .formatters import format_date, has_value, to_number
from .sections import label_from_key
from .table_templates import (
    Alignment, ColumnKind, ColumnSpec, TableTemplate, columns_from_headers,
    get_customer_birthdays_template, get_customer_list_template, get_invoice_template,
    get_revenue_template, get_stock_balance_template, get_trial_balance_template,
)
from .totals import TotalsAggregator

logger = logging.getLogger(__name__)


ReportBuilder = Callable[..., ReportSpec]


def _rows(export: Mapping[str, Any], key: str = "data") -> List[Dict[str, Any]]:
    return [dict(row) for row in (export.get(key) or []) if isinstance(row, Mapping)]


def _infer_kind(column: ColumnSpec, rows: Sequence[Mapping[str, Any]]) -> None:
    """Right-align and total a bare-header column whose values are all numbers."""
    values = [row.get(column.key) for row in rows if has_value(row.get(column.key))]
    if not values or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return
    column.kind = ColumnKind.INTEGER if all(isinstance(v, int) for v in values) else ColumnKind.NUMBER
    column.align = Alignment.RIGHT
    column.flexible = False


def _metadata(
    template: TableTemplate,
    export: Mapping[str, Any],
    company: Optional[CompanyDetails],
    logo: Optional[bytes],
    subtitle: Optional[str] = None,
) -> DocumentMetadata:
    return DocumentMetadata(
        title=export.get("title") or template.title,
        subtitle=subtitle if subtitle is not None else template.subtitle,
        company=company if company is not None else export.get("companyDetails"),
        logo=logo,
        generated_on=export.get("generatedOn"),
        generated_by=export.get("generatedBy"),
        filters=dict(export.get("filters") or {}),
        search_term=export.get("searchTerm"),
        report_type=str(export.get("reportType") or template.report_type.value),
        table_title=template.table_title,
        show_totals=template.show_totals,
        empty_message=template.empty_message,
    )


def _from_template(
    template: TableTemplate,
    export: Mapping[str, Any],
    company: Optional[CompanyDetails],
    logo: Optional[bytes],
    subtitle: Optional[str] = None,
    rows: Optional[List[Dict[str, Any]]] = None,
) -> ReportSpec:
    columns = template.visible_columns(export.get("visibleColumns"))
    if not columns:
        logger.warning("No visible columns selected for %s, showing all", template.title)
        columns = list(template.column_specs)
    return ReportSpec(
        columns=columns,
        rows=rows if rows is not None else _rows(export),
        metadata=_metadata(template, export, company, logo, subtitle),
        kind=DocumentKind.REPORT,
        orientation=template.orientation,
    )


def spec_from_payload(
    payload: Mapping[str, Any],
    company: Optional[CompanyDetails] = None,
    logo: Optional[bytes] = None,
) -> ReportSpec:
    """
    Build a spec from the generic export contract.

    Headers may be strings, ColumnSpec dicts or ColumnSpecs. Without headers
    the columns come from the first row's keys.
    """
    rows = _rows(payload)
    headers = payload.get("headers") or []
    if not headers and rows:
        headers = [{"header": label_from_key(key), "key": key} for key in rows[0]]

    columns = columns_from_headers(headers)
    for header, column in zip(headers, columns):
        explicit = isinstance(header, ColumnSpec) or (isinstance(header, Mapping) and "kind" in header)
        if not explicit:
            _infer_kind(column, rows)
    if columns and not any(c.flexible for c in columns):
        for column in columns:
            if column.kind == ColumnKind.TEXT:
                column.flexible = True
                break

    return ReportSpec(
        columns=columns,
        rows=rows,
        metadata=DocumentMetadata(
            title=payload.get("title") or "Report",
            subtitle=payload.get("subtitle"),
            company=company if company is not None else payload.get("companyDetails"),
            logo=logo,
            generated_on=payload.get("generatedOn"),
            generated_by=payload.get("generatedBy"),
            filters=dict(payload.get("filters") or {}),
            search_term=payload.get("searchTerm"),
            report_type=str(payload.get("reportType") or "report"),
            table_title=payload.get("tableTitle"),
        ),
        kind=DocumentKind.REPORT,
    )


def stock_balance_report(export: Mapping[str, Any], company: Optional[CompanyDetails] = None,
                         logo: Optional[bytes] = None) -> ReportSpec:
    """Current or as-of-date stock balance."""
    historical = export.get("reportType") == "historical"
    filters = export.get("filters") or {}
    if historical and filters.get("asOfDate"):
        subtitle = f"As of {format_date(filters['asOfDate'])}"
    else:
        subtitle = "Current Stock Levels"
    return _from_template(get_stock_balance_template(historical), export, company, logo, subtitle)


def customer_list_report(export: Mapping[str, Any], company: Optional[CompanyDetails] = None,
                         logo: Optional[bytes] = None) -> ReportSpec:
    return _from_template(get_customer_list_template(), export, company, logo)


def customer_birthdays_report(export: Mapping[str, Any], company: Optional[CompanyDetails] = None,
                              logo: Optional[bytes] = None) -> ReportSpec:
    days_before = int(to_number((export.get("filters") or {}).get("daysBefore")) or 30)
    rows = _rows(export)
    for row in rows:
        row["daysLeft"] = int(to_number(row.get("daysLeft")))
    return _from_template(get_customer_birthdays_template(days_before), export, company, logo, rows=rows)


def revenue_report(export: Mapping[str, Any], company: Optional[CompanyDetails] = None,
                   logo: Optional[bytes] = None) -> ReportSpec:
    """Sales transactions with an optional "From X to Y" period subtitle."""
    filters = export.get("filters") or {}
    subtitle = None
    if filters.get("dateFrom") and filters.get("dateTo"):
        subtitle = f"From {format_date(filters['dateFrom'])} to {format_date(filters['dateTo'])}"
    return _from_template(get_revenue_template(), export, company, logo, subtitle)


def flatten_accounts(accounts: Sequence[Mapping[str, Any]], level: int = 0) -> List[Dict[str, Any]]:
    """Depth-first flattening of the account tree; codes are indented by level."""
    result = []
    for account in accounts:
        code = account.get("code")
        result.append({
            "level": level,
            "code": ("  " * level + str(code)) if has_value(code) else None,
            "name": account.get("name"),
            "debit": to_number(account.get("totalDebit", account.get("debit"))),
            "credit": to_number(account.get("totalCredit", account.get("credit"))),
        })
        result.extend(flatten_accounts(account.get("children") or [], level + 1))
    return result


def trial_balance_report(export: Mapping[str, Any], company: Optional[CompanyDetails] = None,
                         logo: Optional[bytes] = None) -> ReportSpec:
    """Trial balance over the account tree, with TOTALS and (if unbalanced) DIFFERENCE rows."""
    rows = flatten_accounts(export.get("data") or [])
    summary = export.get("summary")
    if rows and summary:
        rows.append({"code": "TOTALS", "name": None,
                     "debit": to_number(summary.get("totalDebit")),
                     "credit": to_number(summary.get("totalCredit"))})
        if not summary.get("isBalanced", True):
            difference = to_number(summary.get("difference"))
            rows.append({"code": "DIFFERENCE", "name": None,
                         "debit": abs(difference) if difference > 0 else 0.0,
                         "credit": abs(difference) if difference < 0 else 0.0})

    metadata = export.get("metadata") or {}
    export = dict(export)
    generated_by = metadata.get("generatedBy")
    if isinstance(generated_by, Mapping):
        export.setdefault("generatedBy", generated_by.get("name"))
    if metadata.get("generatedAt"):
        export.setdefault("generatedOn", metadata["generatedAt"])
    return _from_template(get_trial_balance_template(), export, company, logo,
                          export.get("subtitle"), rows=rows)


def invoice_document(invoice: Mapping[str, Any], company: Optional[CompanyDetails] = None,
                     logo: Optional[bytes] = None) -> ReportSpec:
    """
    Single-record document (invoice, order) with line items.

    Missing line amounts (discount, line total) are derived the same way the
    totals summary derives them, so the table and summary agree.
    """
    aggregator = TotalsAggregator()
    exchange_rate = invoice.get("exchangeRate")
    items = _rows(invoice, "items")
    for number, item in enumerate(items, start=1):
        amounts = aggregator.line_amounts(item, exchange_rate)
        item.setdefault("lineNumber", number)
        if not has_value(item.get("discountAmount")) and amounts.discount_amount:
            item["discountAmount"] = amounts.discount_amount
        if not has_value(item.get("whtAmount")) and amounts.wht_amount:
            item["whtAmount"] = amounts.wht_amount
        if not has_value(item.get("lineTotal")):
            item["lineTotal"] = amounts.total_amount

    has_discounts = any(to_number(item.get("discountAmount")) for item in items)
    has_wht = any(to_number(item.get("whtAmount")) for item in items)
    template = get_invoice_template(has_discounts=has_discounts, has_wht=has_wht)

    customer = invoice.get("customer") or {}
    recipient_lines = [
        customer.get("name"),
        customer.get("address"),
        f"Tel: {customer['phone']}" if customer.get("phone") else None,
        f"Email: {customer['email']}" if customer.get("email") else None,
        f"TIN: {customer['tin']}" if customer.get("tin") else None,
    ]
    signatures = invoice.get("signatures")

    metadata = DocumentMetadata(
        title=invoice.get("title") or template.title,
        subtitle=invoice.get("subtitle"),
        company=company if company is not None else invoice.get("companyDetails"),
        logo=logo,
        generated_on=invoice.get("generatedOn"),
        generated_by=invoice.get("generatedBy"),
        report_type=str(invoice.get("reportType") or "invoice"),
        table_title=template.table_title,
        recipient=Party(invoice.get("recipientHeading") or "Bill To",
                        [line for line in recipient_lines if line]) if customer else None,
        invoice=InvoiceDetails(
            document_number=invoice.get("number") or "",
            issue_date=invoice.get("date"),
            due_date=invoice.get("dueDate"),
            currency=invoice.get("currency") or "",
            currency_name=invoice.get("currencyName") or "",
            exchange_rate=to_number(exchange_rate) or None,
            status=invoice.get("status") or "",
            reference=invoice.get("reference") or "",
            payment_terms=invoice.get("paymentTerms") or "",
        ),
        notes=invoice.get("notes"),
        terms=invoice.get("terms"),
        signature_labels=tuple(signatures) if signatures and len(signatures) == 2 else None,
        show_totals=template.show_totals,
    )
    return ReportSpec(columns=template.column_specs, rows=items, metadata=metadata,
                      kind=DocumentKind.INVOICE)


REPORT_BUILDERS: Dict[str, ReportBuilder] = {
    "generic": spec_from_payload,
    "stock_balance": stock_balance_report,
    "customer_list": customer_list_report,
    "customer_birthdays": customer_birthdays_report,
    "revenue": revenue_report,
    "trial_balance": trial_balance_report,
    "invoice": invoice_document,
}


def get_builder(name: str) -> ReportBuilder:
    try:
        return REPORT_BUILDERS[name]
    except KeyError:
        raise ValueError(f"Unknown report: {name!r} (expected one of {sorted(REPORT_BUILDERS)})") from None


async def generate_report(
    builder: ReportBuilder,
    export: Mapping[str, Any],
    source: Optional[CompanySource] = None,
    renderer: Optional[DocumentRenderer] = None,
) -> bytes:
    """Fetch company details and logo best-effort, then render the report to PDF bytes."""
    source = source or CompanySource()
    renderer = renderer or DocumentRenderer(defaults=source.defaults)
    assets = await source.load_assets()
    # Without an API the payload's own company details take precedence
    company = assets.company if source.base_url else None
    spec = builder(export, company=company, logo=assets.logo)
    return renderer.render_pdf(spec)
