from __future__ import annotations

import io
from datetime import date, datetime

import pytest

from ledgerprint.draw_commands import Document, Image, Line, Page, Rect, Text
from ledgerprint.pdf_renderer import PDFRenderer, build_filename


def one_page(*commands) -> Document:
    return Document(pages=[Page(index=0, width=595.27, height=841.89, commands=list(commands))],
                    title="Sample", author="Acme Ltd")


def test_build_filename() -> None:
    assert build_filename("Stock Balance Report", "current", date(2025, 3, 5)) == \
        "stock-balance-report-current-2025-03-05.pdf"
    assert build_filename("Trial Balance", "trial_balance", datetime(2025, 12, 31, 23, 59)) == \
        "trial-balance-trial-balance-2025-12-31.pdf"
    assert build_filename("", "", date(2025, 1, 1)) == "document-report-2025-01-01.pdf"


def test_render_produces_pdf_with_every_page() -> None:
    pages = [Page(index=i, width=841.89, height=595.27) for i in range(3)]
    for page in pages:
        page.add(Text(40, 40, f"Page {page.index + 1}", align="right"),
                 Rect(40, 50, 100, 20, fill_color="#F2F2F2", stroke_color="#999999"),
                 Rect(40, 80, 100, 20),
                 Line(40, 100, 140, 100))
    pdf = PDFRenderer(compress=False).render(Document(pages=pages, title="Three pages"))
    assert pdf.startswith(b"%PDF")
    assert b"/Count 3" in pdf


def test_undecodable_logo_is_skipped(caplog) -> None:
    document = one_page(Image(40, 40, 50, 50, b"definitely not an image", tag="logo"),
                        Text(100, 60, "Acme Ltd"))
    with caplog.at_level("WARNING"):
        pdf = PDFRenderer().render(document)
    assert pdf.startswith(b"%PDF")
    assert "Skipping image" in caplog.text


def test_png_logo_is_drawn() -> None:
    pil_image = pytest.importorskip("PIL.Image")
    buffer = io.BytesIO()
    pil_image.new("RGB", (8, 8), (200, 30, 30)).save(buffer, format="PNG")
    pdf = PDFRenderer().render(one_page(Image(40, 40, 50, 50, buffer.getvalue(), tag="logo")))
    assert pdf.startswith(b"%PDF")


def test_save_writes_named_file(tmp_path) -> None:
    path = PDFRenderer().save(one_page(Text(40, 40, "hello")), tmp_path / "nested", report_type="current")
    assert path.parent == tmp_path / "nested"
    assert path.name.startswith("sample-current-")
    assert path.read_bytes().startswith(b"%PDF")

    named = PDFRenderer().save(one_page(), tmp_path, filename="custom.pdf")
    assert named == tmp_path / "custom.pdf"
    assert named.exists()
