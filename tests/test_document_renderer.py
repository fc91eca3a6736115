from __future__ import annotations

import pytest

from ledgerprint.config import RenderConfig
from ledgerprint.document_renderer import (
    DocumentKind, DocumentMetadata, DocumentRenderer, InvoiceDetails, Party, ReportSpec,
)
from ledgerprint.draw_commands import Text
from ledgerprint.table_templates import ColumnSpec


GENERATED_ON = "2025-03-05 10:00"


def line_item_columns():
    return [
        ColumnSpec("Product", "product", 80, 40, flexible=True),
        ColumnSpec("Qty", "quantity", 40, 10, "right", "integer"),
        ColumnSpec("Unit Price", "unitPrice", 50, 15, "right", "money", summable=False),
        ColumnSpec("Discount %", "discountPercentage", 50, 15, "right", "percent", summable=False),
    ]


def report(rows, columns=None, **meta) -> ReportSpec:
    meta.setdefault("generated_on", GENERATED_ON)
    return ReportSpec(
        columns=columns if columns is not None else line_item_columns(),
        rows=rows,
        metadata=DocumentMetadata(**meta),
    )


def invoice(rows, **meta) -> ReportSpec:
    meta.setdefault("generated_on", GENERATED_ON)
    meta.setdefault("title", "Invoice")
    meta.setdefault("invoice", InvoiceDetails(document_number="INV-00001", issue_date="2025-03-05",
                                              currency="USD", currency_name="US Dollars"))
    meta.setdefault("recipient", Party("Bill To", ["Globex Ltd", "P.O. Box 1"]))
    return ReportSpec(columns=line_item_columns(), rows=rows, metadata=DocumentMetadata(**meta),
                      kind=DocumentKind.INVOICE)


SMALL_ROWS = [
    {"product": "Cable", "quantity": 2, "unitPrice": 10, "discountPercentage": 10},
    {"product": "Adapter", "quantity": 0, "unitPrice": 20},
    {"product": "Router", "quantity": 5, "unitPrice": 0},
]


def texts_tagged(document, tag):
    return [c.text for c in document.commands_tagged(tag) if isinstance(c, Text)]


def test_small_report_fits_one_page(renderer) -> None:
    document = renderer.render(report(SMALL_ROWS, title="Sales"))
    assert document.page_count == 1
    assert len(document.commands_tagged("header-band")) == 1
    assert document.header_bands == 1
    assert document.totals.subtotal == pytest.approx(20)
    assert document.totals.discount_amount == pytest.approx(2)
    assert document.totals.total_amount == pytest.approx(18)
    assert document.column_totals == {"quantity": 7}
    assert texts_tagged(document, "totals-label") == ["Total"]
    assert texts_tagged(document, "totals-cell") == ["7"]


def test_every_cell_is_drawn_with_placeholder_for_missing_values(renderer) -> None:
    document = renderer.render(report(SMALL_ROWS))
    cells = texts_tagged(document, "cell")
    assert "Cable" in cells and "Router" in cells
    assert "10.00%" in cells
    assert cells.count("--") == 2


def test_resolved_widths_fill_the_content_width(renderer) -> None:
    document = renderer.render(report(SMALL_ROWS))
    assert document.layout.total == pytest.approx(document.page_layout.content_width, abs=1e-6)
    assert document.page_layout.orientation == "landscape"


def test_long_table_redraws_header_on_every_page(renderer) -> None:
    rows = [{"product": f"Product {i} with a fairly long descriptive name", "quantity": i, "unitPrice": 1.5}
            for i in range(200)]
    document = renderer.render(report(rows))
    assert document.page_count > 1
    assert len(document.commands_tagged("header-band")) == document.header_bands == document.page_count

    bottom = document.page_layout.content_bottom
    for page in document.pages:
        for command in page.commands:
            if getattr(command, "tag", None) in ("cell", "row-band", "totals-row"):
                assert command.y <= bottom

    assert texts_tagged(document, "page-number") == [
        f"Page {i} of {document.page_count}" for i in range(1, document.page_count + 1)
    ]
    assert texts_tagged(document, "totals-cell") == [f"{sum(range(200)):,d}"]


def test_empty_dataset_renders_message_on_one_page(renderer, config) -> None:
    document = renderer.render(report([], title="Stock"))
    assert document.page_count == 1
    assert document.commands_tagged("header-band") == []
    assert texts_tagged(document, "empty-message") == [config.empty_message]
    assert texts_tagged(document, "page-number") == ["Page 1 of 1"]


def test_empty_message_from_metadata(renderer) -> None:
    document = renderer.render(report([], empty_message="No customers"))
    assert texts_tagged(document, "empty-message") == ["No customers"]


def test_missing_company_uses_defaults(renderer) -> None:
    document = renderer.render(report(SMALL_ROWS, company={"name": "Acme Ltd", "address": "  "}))
    assert texts_tagged(document, "company-name") == ["Acme Ltd"]
    assert texts_tagged(document, "company-address") == ["123 Business Street, City, Country"]
    assert document.author == "Acme Ltd"

    default = renderer.render(report(SMALL_ROWS))
    assert texts_tagged(default, "company-name") == ["Your Company"]


def test_filters_line_skips_empty_values(renderer) -> None:
    document = renderer.render(report(SMALL_ROWS, filters={"storeId": "Main", "category": None},
                                      search_term="cable"))
    assert texts_tagged(document, "filters") == ["Filters Applied: Store Id: Main | Search: cable"]

    unfiltered = renderer.render(report(SMALL_ROWS, filters={"category": ""}))
    assert unfiltered.commands_tagged("filters") == []


def test_invoice_is_portrait_with_summary_and_words(renderer) -> None:
    document = renderer.render(invoice(SMALL_ROWS))
    assert document.page_layout.orientation == "portrait"
    assert texts_tagged(document, "summary-label") == [
        "Subtotal", "Discount", "Amount After Discount", "Tax", "Total Amount",
    ]
    assert texts_tagged(document, "summary-value")[-1] == "$18.00"
    assert " ".join(texts_tagged(document, "amount-in-words")) == "Eighteen US Dollars Only"
    assert texts_tagged(document, "info-heading") == ["From", "Bill To"]
    info_lines = texts_tagged(document, "info-line")
    assert info_lines[0] == "Your Company"
    assert info_lines[-2:] == ["Globex Ltd", "P.O. Box 1"]
    assert "INV-00001" in texts_tagged(document, "detail-value")
    assert "Mar 5, 2025" in texts_tagged(document, "detail-value")
    assert texts_tagged(document, "signature-label") == ["Prepared By", "Authorized Signature"]


def test_equivalent_amount_only_for_foreign_rate(renderer) -> None:
    details = InvoiceDetails(document_number="INV-2", currency="USD", exchange_rate=2500)
    document = renderer.render(invoice([{"product": "Cable", "quantity": 1, "unitPrice": 4}], invoice=details))
    labels = texts_tagged(document, "summary-label")
    assert labels[-1] == "Equivalent Amount"
    assert texts_tagged(document, "summary-value")[-1] == "10,000.00"


def test_omitted_notes_leave_no_gap(renderer) -> None:
    without = renderer.render(invoice(SMALL_ROWS))
    with_notes = renderer.render(invoice(SMALL_ROWS, notes="Thank you for your business."))
    assert without.commands_tagged("notes") == []
    assert without.commands_tagged("notes-heading") == []
    assert texts_tagged(with_notes, "notes") == ["Thank you for your business."]

    words_bottom = max(c.y for c in without.commands_tagged("amount-in-words"))
    sig_without = without.commands_tagged("signature-line")[0].y
    sig_with = with_notes.commands_tagged("signature-line")[0].y
    assert sig_without < sig_with
    # Only one section gap separates the words line from the signature block
    assert sig_without - words_bottom < 28 + renderer.config.section_spacing + 12


def test_amount_too_large_for_words_prints_figure(renderer) -> None:
    rows = [{"product": "Everything", "quantity": 1, "unitPrice": 1e19}]
    document = renderer.render(invoice(rows))
    words = " ".join(texts_tagged(document, "amount-in-words"))
    assert "Only" not in words
    assert words.endswith("US Dollars")


def test_overflowing_columns_still_render(renderer) -> None:
    columns = [ColumnSpec(f"Column {i}", f"c{i}", min_width=200) for i in range(6)]
    document = renderer.render(report([{"c0": "x"}], columns=columns))
    assert document.layout.overflow
    assert document.page_count == 1


def test_explicit_orientation_overrides_kind(renderer) -> None:
    spec = report(SMALL_ROWS)
    spec.orientation = "portrait"
    assert renderer.render(spec).page_layout.orientation == "portrait"


def test_letter_pages_and_footer_mark(tmp_path) -> None:
    config = RenderConfig(page_size="LETTER", footer_mark="Printed by Acme", out_dir=tmp_path)
    document = DocumentRenderer(config).render(report(SMALL_ROWS))
    assert document.pages[0].width == pytest.approx(792)
    assert texts_tagged(document, "footer-mark") == ["Printed by Acme"]


def test_render_pdf_returns_pdf_bytes(renderer) -> None:
    assert renderer.render_pdf(invoice(SMALL_ROWS, notes="Paid")).startswith(b"%PDF")


def tagged_on_pages(document, tag):
    return [(page.index, c) for page in document.pages for c in page.commands if c.tag == tag]


def test_long_notes_continue_on_following_pages(renderer) -> None:
    notes = "\n".join(f"Note line {i}" for i in range(300))
    document = renderer.render(report(SMALL_ROWS[:1], notes=notes))
    bottom = document.page_layout.content_bottom
    placed = tagged_on_pages(document, "notes")
    assert [c.text for _, c in placed] == [f"Note line {i}" for i in range(300)]
    assert all(c.y <= bottom for _, c in placed)
    assert document.page_count > 2
    # Heading stays on the page of the first line under it
    heading_page = tagged_on_pages(document, "notes-heading")[0][0]
    assert heading_page == placed[0][0]
    assert texts_tagged(document, "page-number")[-1] == f"Page {document.page_count} of {document.page_count}"


def test_long_info_columns_continue_on_following_pages(renderer) -> None:
    lines = [f"Branch {i}" for i in range(120)]
    document = renderer.render(invoice(SMALL_ROWS, recipient=Party("Bill To", lines)))
    bottom = document.page_layout.content_bottom
    placed = tagged_on_pages(document, "info-line")
    assert all(c.y <= bottom for _, c in placed)
    assert [c.text for _, c in placed if c.text.startswith("Branch")] == lines
    assert len({page for page, _ in placed}) > 1


def test_table_caption_stays_with_table(renderer) -> None:
    moved = 0
    for count in range(10, 70):
        recipient = Party("Bill To", [f"Address line {i}" for i in range(count)])
        document = renderer.render(report(SMALL_ROWS, table_title="Items", recipient=recipient))
        [(caption_page, caption)] = tagged_on_pages(document, "table-title")
        band_page, band = tagged_on_pages(document, "header-band")[0]
        assert caption_page == band_page
        assert caption.y < band.y
        if band.y == pytest.approx(document.page_layout.content_top + caption.font_size * 1.3
                                   + renderer.config.section_spacing):
            moved += 1
    assert moved > 0
