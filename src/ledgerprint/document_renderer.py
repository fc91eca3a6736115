"""Composes a full document from a report spec: sections, table, totals and footers."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .company import CompanyDetails, DefaultsProvider
from .config import RenderConfig
from .draw_commands import Document, Page
from .formatters import format_currency, format_date, format_number, has_value, to_number
from .layout_engine import ColumnWidthSolver, PageLayout
from .number_words import amount_in_words_line
from .pdf_renderer import PDFRenderer
from .sections import SectionBlock, SectionBuilder, SummaryEntry
from .table_composer import ComposedTable, TableComposer
from .table_templates import ColumnSpec
from .text_metrics import TextMeasurer
from .text_wrap import TextWrapper
from .totals import TotalsAggregator, TotalsRecord

logger = logging.getLogger(__name__)


class DocumentKind(Enum):
    """Tabular list reports print landscape, single-record documents portrait."""
    REPORT = "report"
    INVOICE = "invoice"


@dataclass
class Party:
    """One side of the two-column info block."""
    heading: str
    lines: List[str] = field(default_factory=list)


@dataclass
class InvoiceDetails:
    """Reference data shown in the detail grid of an invoice or order."""
    document_number: str = ""
    issue_date: Any = None
    due_date: Any = None
    currency: str = ""
    currency_name: str = ""
    exchange_rate: Optional[float] = None
    status: str = ""
    reference: str = ""
    payment_terms: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def pairs(self) -> List[Tuple[str, Any]]:
        rate = to_number(self.exchange_rate)
        pairs: List[Tuple[str, Any]] = [
            ("Number", self.document_number),
            ("Date", format_date(self.issue_date, "") if has_value(self.issue_date) else None),
            ("Due Date", format_date(self.due_date, "") if has_value(self.due_date) else None),
            ("Currency", self.currency),
            ("Exchange Rate", format_number(rate, 4) if rate and rate != 1.0 else None),
            ("Status", self.status),
            ("Reference", self.reference),
            ("Payment Terms", self.payment_terms),
        ]
        pairs.extend(self.extra.items())
        return pairs


@dataclass
class DocumentMetadata:
    """Text passed through to the header and info blocks."""
    title: str = "Report"
    subtitle: Optional[str] = None
    company: Any = None  # CompanyDetails, a provider payload dict, or None
    logo: Optional[bytes] = None
    generated_on: Optional[str] = None
    generated_by: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)
    search_term: Optional[str] = None
    report_type: str = "report"
    table_title: Optional[str] = None
    issuer: Optional[Party] = None
    recipient: Optional[Party] = None
    invoice: Optional[InvoiceDetails] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    signature_labels: Optional[Tuple[str, str]] = None
    show_totals: bool = True
    empty_message: Optional[str] = None


@dataclass
class ReportSpec:
    """Everything one render needs: columns, rows and document metadata."""
    columns: List[ColumnSpec]
    rows: List[Dict[str, Any]]
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    kind: DocumentKind = DocumentKind.REPORT
    orientation: Optional[str] = None  # Overrides the kind's orientation


class _PageFlow:
    """Cursor over the pages being composed; stacks blocks with fixed spacing."""

    def __init__(self, page_layout: PageLayout, spacing: float):
        self.page_layout = page_layout
        self.spacing = spacing
        self.pages: List[Page] = []
        self.cursor_y = page_layout.content_top
        self.new_page()

    @property
    def page(self) -> Page:
        return self.pages[-1]

    @property
    def at_page_top(self) -> bool:
        return self.cursor_y <= self.page_layout.content_top

    def new_page(self) -> Page:
        page = Page(index=len(self.pages), width=self.page_layout.page_width,
                    height=self.page_layout.page_height)
        self.pages.append(page)
        self.cursor_y = self.page_layout.content_top
        return page

    def ensure_page(self, index: int) -> Page:
        while len(self.pages) <= index:
            self.new_page()
        return self.pages[index]

    def next_top(self) -> float:
        return self.cursor_y if self.at_page_top else self.cursor_y + self.spacing

    def place(self, block: Optional[SectionBlock]) -> None:
        """
        Place a block below the cursor.

        A block that does not fit continues on the next page at its lowest
        line break that fits; without one it moves whole. A block that has
        no fitting break even at the top of a page is drawn there anyway.
        """
        if block is None:
            return
        bottom = self.page_layout.content_bottom
        y = self.next_top()
        while y + block.height > bottom:
            pieces = block.split(bottom - y)
            if pieces is not None:
                head, block = pieces
                self.page.add(*head.placed_at(y))
            elif self.at_page_top:
                logger.debug("Section %r overflows page %d bottom", block.name, len(self.pages))
                break
            logger.debug("Section %r continues on page %d", block.name, len(self.pages) + 1)
            self.new_page()
            y = self.cursor_y
        self.page.add(*block.placed_at(y))
        self.cursor_y = y + block.height


class DocumentRenderer:
    """
    Orchestrates width solving, wrapping, pagination, totals and sections.

    render() is pure: it returns a Document of draw commands and performs no
    I/O. render_pdf() additionally runs the ReportLab backend.
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        defaults: Optional[DefaultsProvider] = None,
        measurer: Optional[TextMeasurer] = None,
    ):
        self.config = config or RenderConfig()
        self.defaults = defaults or self.config.defaults_provider()
        self.measurer = measurer or TextMeasurer()

    def page_layout_for(self, spec: ReportSpec) -> PageLayout:
        orientation = spec.orientation
        if orientation is None:
            orientation = "portrait" if spec.kind == DocumentKind.INVOICE else "landscape"
        return self.config.page_layout(orientation)

    def render(self, spec: ReportSpec) -> Document:
        config = self.config
        meta = spec.metadata
        style = config.document_style()
        page_layout = self.page_layout_for(spec)
        wrapper = TextWrapper(self.measurer, config.placeholder)
        builder = SectionBuilder(style, self.measurer, wrapper,
                                 page_layout.content_start_x, page_layout.content_width)
        composer = TableComposer(style, self.measurer, wrapper, config.placeholder)
        aggregator = TotalsAggregator()
        flow = _PageFlow(page_layout, config.section_spacing)

        company = self.defaults.coerce(meta.company)
        layout = ColumnWidthSolver().solve(spec.columns, page_layout.content_width)
        if layout.overflow:
            logger.warning("Columns of %r are wider than the page; the table will overflow", meta.title)

        exchange_rate = meta.invoice.exchange_rate if meta.invoice else None
        totals = aggregator.aggregate(spec.rows, exchange_rate)
        column_totals = aggregator.column_totals(spec.rows, spec.columns)

        flow.place(builder.company_header(
            company,
            logo=meta.logo,
            generated_on=meta.generated_on or datetime.now().strftime("%Y-%m-%d %H:%M"),
            generated_by=meta.generated_by or self.defaults.generated_by,
        ))
        flow.place(builder.title(meta.title or "Report", meta.subtitle))
        flow.place(builder.filters(meta.filters, meta.search_term))
        flow.place(self._info_block(builder, spec, company))
        if meta.invoice:
            flow.place(builder.detail_grid(meta.invoice.pairs()))

        header_bands = 0
        if not spec.rows or not spec.columns:
            logger.info("No rows for %r, rendering the empty-data message", meta.title)
            flow.place(builder.empty_message(meta.empty_message or config.empty_message))
        else:
            caption = builder.caption(meta.table_title)
            show_footer = meta.show_totals and any(column.is_totalled for column in spec.columns)

            def compose_below(top: float) -> ComposedTable:
                return composer.compose(
                    spec.columns,
                    spec.rows,
                    layout,
                    page_layout,
                    start_y=top + caption.height + flow.spacing if caption else top,
                    start_page=flow.page.index,
                    column_totals=column_totals if show_footer else None,
                )

            table = compose_below(flow.next_top())
            if caption and table.plan.pages[0].page_index != flow.page.index and not flow.at_page_top:
                # The caption follows the table onto its first page
                flow.new_page()
                table = compose_below(flow.cursor_y)
            flow.place(caption)
            for page_index, commands in sorted(table.commands.items()):
                flow.ensure_page(page_index).add(*commands)
            flow.cursor_y = table.end_y
            header_bands = table.plan.header_redraws

            if spec.kind == DocumentKind.INVOICE:
                currency = meta.invoice.currency if meta.invoice else ""
                flow.place(builder.totals_summary(self._summary_entries(totals, currency, exchange_rate)))
                flow.place(builder.amount_in_words(self._words(totals.total_amount, meta, currency)))

            flow.place(builder.text_block("notes", "Notes", meta.notes))
            flow.place(builder.text_block("terms", "Terms & Conditions", meta.terms))
            signature = meta.signature_labels
            if signature is None and spec.kind == DocumentKind.INVOICE:
                signature = ("Prepared By", "Authorized Signature")
            if signature:
                flow.place(builder.signature(*signature))

        self._stamp_footers(builder, flow.pages, page_layout)

        return Document(
            pages=flow.pages,
            title=meta.title,
            author=company.name,
            page_layout=page_layout,
            layout=layout,
            totals=totals,
            column_totals=column_totals,
            header_bands=header_bands,
        )

    def render_pdf(self, spec: ReportSpec) -> bytes:
        """Render straight to PDF bytes."""
        return PDFRenderer().render(self.render(spec))

    def _info_block(self, builder: SectionBuilder, spec: ReportSpec, company: CompanyDetails) -> Optional[SectionBlock]:
        meta = spec.metadata
        if meta.issuer is None and meta.recipient is None:
            return None
        issuer = meta.issuer
        if issuer is None and spec.kind == DocumentKind.INVOICE:
            issuer = Party("From", [company.name, company.address, company.location, company.phone, company.email])
        return builder.info_columns(
            (issuer.heading, issuer.lines) if issuer else None,
            (meta.recipient.heading, meta.recipient.lines) if meta.recipient else None,
        )

    def _summary_entries(
        self,
        totals: TotalsRecord,
        currency: str,
        exchange_rate: Optional[float],
    ) -> List[SummaryEntry]:
        """Summary lines in print order; discount and WHT lines only when non-zero."""
        def money(value: float) -> str:
            return format_currency(value, currency) if currency else format_number(value)

        entries = [SummaryEntry("Subtotal", money(totals.subtotal))]
        if totals.has_discount:
            entries.append(SummaryEntry("Discount", money(totals.discount_amount)))
            entries.append(SummaryEntry("Amount After Discount", money(totals.amount_after_discount)))
        entries.append(SummaryEntry("Tax", money(totals.tax_amount)))
        if totals.has_wht:
            entries.append(SummaryEntry("WHT", money(totals.wht_amount)))
        entries.append(SummaryEntry("Total Amount", money(totals.total_amount), emphasized=True))
        rate = to_number(exchange_rate)
        if rate and rate != 1.0:
            entries.append(SummaryEntry("Equivalent Amount", format_number(totals.equivalent_amount)))
        return entries

    def _words(self, amount: float, meta: DocumentMetadata, currency: str) -> str:
        currency_name = meta.invoice.currency_name if meta.invoice and meta.invoice.currency_name else currency
        try:
            return amount_in_words_line(amount, currency_name, self.config.currency_minor_unit)
        except ValueError as e:
            logger.warning("Amount %s not expressible in words (%s), printing the figure", amount, e)
            return f"{format_number(amount)} {currency_name}".strip()

    def _stamp_footers(self, builder: SectionBuilder, pages: Sequence[Page], page_layout: PageLayout) -> None:
        total = len(pages)
        for page in pages:
            page.add(*builder.page_footer(page_layout.page_height, page_layout.margin_bottom,
                                          page.index + 1, total, self.config.footer_mark))
