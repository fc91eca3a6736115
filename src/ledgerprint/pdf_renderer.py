"""PDF rendering using ReportLab."""

import io
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from slugify import slugify

from .draw_commands import Document, DrawCommand, Image, Line, Rect, Text

logger = logging.getLogger(__name__)


def build_filename(
    title: str,
    report_type: str,
    when: Optional[Union[date, datetime]] = None,
    ext: str = "pdf",
) -> str:
    """Output name of the form <slug(title)>-<reportType>-<YYYY-MM-DD>.<ext>."""
    when = when or date.today()
    if isinstance(when, datetime):
        when = when.date()
    title_slug = slugify(title or "") or "document"
    type_slug = slugify(report_type or "") or "report"
    return f"{title_slug}-{type_slug}-{when.isoformat()}.{ext}"


class PDFRenderer:
    """Executes a Document's draw commands on a ReportLab canvas."""

    def __init__(self, compress: bool = True):
        self.compress = compress

    def render(self, document: Document) -> bytes:
        """Render the document into an in-memory PDF and return its bytes."""
        buffer = io.BytesIO()
        first = document.pages[0] if document.pages else None
        pagesize = (first.width, first.height) if first else (595.27, 841.89)

        c = canvas.Canvas(buffer, pagesize=pagesize, pageCompression=1 if self.compress else 0)
        c.setTitle(document.title or "")
        if document.author:
            c.setAuthor(document.author)

        for page in document.pages:
            c.setPageSize((page.width, page.height))
            for command in page.commands:
                self._draw(c, command, page.height)
            c.showPage()

        c.save()
        return buffer.getvalue()

    def save(self, document: Document, out_dir: Path, filename: Optional[str] = None,
             report_type: str = "report") -> Path:
        """Render and write the PDF, creating out_dir if needed."""
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / (filename or build_filename(document.title, report_type))
        path.write_bytes(self.render(document))
        logger.info("Wrote %s (%d page(s))", path, document.page_count)
        return path

    def _draw(self, c: canvas.Canvas, command: DrawCommand, page_height: float) -> None:
        # Layout y grows downward; ReportLab's origin is the bottom-left corner
        if isinstance(command, Text):
            c.setFont(command.font_name, command.font_size)
            c.setFillColor(HexColor(command.color))
            y = page_height - command.y
            if command.align == "right":
                c.drawRightString(command.x, y, command.text)
            elif command.align == "center":
                c.drawCentredString(command.x, y, command.text)
            else:
                c.drawString(command.x, y, command.text)

        elif isinstance(command, Rect):
            fill = command.fill_color is not None
            stroke = command.stroke_color is not None
            if not fill and not stroke:
                return
            if fill:
                c.setFillColor(HexColor(command.fill_color))
            if stroke:
                c.setStrokeColor(HexColor(command.stroke_color))
                c.setLineWidth(command.line_width)
            c.rect(command.x, page_height - command.y - command.height, command.width, command.height,
                   fill=fill, stroke=stroke)

        elif isinstance(command, Line):
            c.setStrokeColor(HexColor(command.color))
            c.setLineWidth(command.line_width)
            c.line(command.x1, page_height - command.y1, command.x2, page_height - command.y2)

        elif isinstance(command, Image):
            self._draw_image(c, command, page_height)

    def _draw_image(self, c: canvas.Canvas, command: Image, page_height: float) -> None:
        """Draw an image, skipping it when the bytes do not decode."""
        try:
            reader = ImageReader(io.BytesIO(command.data))
            c.drawImage(reader, command.x, page_height - command.y - command.height,
                        width=command.width, height=command.height,
                        preserveAspectRatio=True, anchor="nw", mask="auto")
        except Exception as e:
            logger.warning("Skipping image that could not be drawn: %s", e)
