"""Non-table sections of a document: header, info blocks, summary, signature, footer."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .company import CompanyDetails
from .draw_commands import DrawCommand, Image, Line, Rect, Text
from .formatters import format_date, has_value, parse_date
from .styles import DocumentStyle
from .text_metrics import FontSpec, TextMeasurer
from .text_wrap import TextWrapper


# Baseline offset below a line's top, as a share of the font size
BASELINE_RATIO = 0.85
COLUMN_GAP = 20.0


@dataclass
class SectionBlock:
    """
    A section's draw commands, laid out from y=0 at the block's top.

    The renderer stacks blocks by moving them to the running cursor, so a
    block never knows where on the page it ends up.
    """
    name: str
    commands: List[DrawCommand] = field(default_factory=list)
    height: float = 0.0
    # Offsets between text lines where the block may continue on the next page
    breaks: List[float] = field(default_factory=list)

    def placed_at(self, y: float) -> List[DrawCommand]:
        return [command.moved(0, y) for command in self.commands]

    def split(self, limit: float) -> Optional[Tuple["SectionBlock", "SectionBlock"]]:
        """
        Cut the block at its lowest break that is not below limit.

        Returns the part above the cut and the rest moved up to y=0, or None
        when no break fits.
        """
        fitting = [b for b in self.breaks if 0 < b <= limit]
        if not fitting:
            return None
        at = max(fitting)
        head = [c for c in self.commands if _command_top(c) < at]
        tail = [c.moved(0, -at) for c in self.commands if _command_top(c) >= at]
        rest = [b - at for b in self.breaks if b > at]
        return SectionBlock(self.name, head, at), SectionBlock(self.name, tail, self.height - at, rest)


def _command_top(command: DrawCommand) -> float:
    if isinstance(command, Line):
        return min(command.y1, command.y2)
    return command.y


@dataclass
class SummaryEntry:
    """One line of the totals summary box."""
    label: str
    value: str
    emphasized: bool = False


def label_from_key(key: str) -> str:
    """Turn a filter key into a label ("asOfDate" -> "As Of Date")."""
    words = []
    current = ""
    for ch in key.replace("_", " "):
        if ch == " ":
            if current:
                words.append(current)
            current = ""
        elif ch.isupper() and current and not current[-1].isupper():
            words.append(current)
            current = ch
        else:
            current += ch
    if current:
        words.append(current)
    return " ".join(w[:1].upper() + w[1:] for w in words)


def format_filter_value(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if has_value(v))
    if isinstance(value, str) and parse_date(value) is not None:
        return format_date(value)
    return str(value)


class SectionBuilder:
    """Builds position-independent section blocks at a fixed x and width."""

    def __init__(
        self,
        style: DocumentStyle,
        measurer: TextMeasurer,
        wrapper: TextWrapper,
        x: float,
        width: float,
    ):
        self.style = style
        self.measurer = measurer
        self.wrapper = wrapper
        self.x = x
        self.width = width

    # Fonts

    @property
    def body_font(self) -> FontSpec:
        return FontSpec(self.style.font_family, self.style.body_font_size)

    @property
    def small_font(self) -> FontSpec:
        return FontSpec(self.style.font_family, self.style.small_font_size)

    def _text(
        self,
        x: float,
        top: float,
        text: str,
        font: FontSpec,
        color: Optional[str] = None,
        align: str = "left",
        tag: Optional[str] = None,
    ) -> Text:
        """A text line whose box starts at top."""
        return Text(
            x=x,
            y=top + font.size * BASELINE_RATIO,
            text=text,
            font_name=font.name,
            font_size=font.size,
            color=color or self.style.text_color,
            align=align,
            tag=tag,
        )

    def _flow(
        self,
        commands: List[DrawCommand],
        text: Optional[str],
        x: float,
        top: float,
        width: float,
        font: FontSpec,
        line_height: float,
        color: Optional[str] = None,
        tag: Optional[str] = None,
        breaks: Optional[List[float]] = None,
    ) -> float:
        """Wrap text into commands; returns the y below the last line."""
        y = top
        for line in self.wrapper.wrap(text, width, font):
            if breaks is not None:
                breaks.append(y)
            if line:
                commands.append(self._text(x, y, line, font, color, tag=tag))
            y += line_height
        return y

    # Sections

    def company_header(
        self,
        company: CompanyDetails,
        logo: Optional[bytes] = None,
        generated_on: str = "",
        generated_by: str = "",
    ) -> SectionBlock:
        """Logo, company name and contact lines, generation info, separator."""
        style = self.style
        commands: List[DrawCommand] = []

        text_x = self.x
        if logo:
            commands.append(Image(self.x, 0.0, style.logo_size, style.logo_size, logo, tag="logo"))
            text_x = self.x + style.logo_size + 8

        # Generated on/by, right aligned in the top corner
        meta_y = 0.0
        meta_width = 0.0
        meta_font = self.small_font
        for label in (
            f"Generated on: {generated_on}" if generated_on else "",
            f"Generated by: {generated_by}" if generated_by else "",
        ):
            if not label:
                continue
            commands.append(self._text(self.x + self.width, meta_y, label, meta_font,
                                       style.muted_color, align="right", tag="generated"))
            meta_width = max(meta_width, self.measurer.width(label, meta_font))
            meta_y += meta_font.size * 1.5

        text_width = max(self.x + self.width - text_x - (meta_width + COLUMN_GAP if meta_width else 0), 1.0)

        name_font = FontSpec(style.font_family, style.company_font_size).bold()
        y = self._flow(commands, company.name, text_x, 0.0, text_width, name_font,
                       name_font.size * 1.2, tag="company-name")
        y += 2

        body = self.body_font
        line_height = style.text_line_height
        if company.address:
            y = self._flow(commands, company.address, text_x, y, text_width, body, line_height,
                           style.muted_color, tag="company-address")
        contact_lines = [
            company.location,
            f"Tel: {company.phone}" if company.phone else "",
            f"Email: {company.email}" if company.email else "",
            f"Web: {company.website}" if company.website else "",
            "   ".join(part for part in (
                f"TIN: {company.tin}" if company.tin else "",
                f"VRN: {company.vrn}" if company.vrn else "",
            ) if part),
        ]
        for line in contact_lines:
            if line:
                y = self._flow(commands, line, text_x, y, text_width, body, line_height,
                               style.muted_color, tag="company-contact")

        height = max(y, style.logo_size if logo else 0.0, meta_y) + 6
        commands.append(Line(self.x, height, self.x + self.width, height,
                             color=style.grid_color, line_width=0.75, tag="separator"))
        return SectionBlock("header", commands, height + 1)

    def title(self, title: str, subtitle: Optional[str] = None) -> SectionBlock:
        style = self.style
        commands: List[DrawCommand] = []
        title_font = FontSpec(style.font_family, style.title_font_size).bold()
        y = self._flow(commands, title, self.x, 0.0, self.width, title_font,
                       title_font.size * 1.25, tag="title")
        if subtitle:
            subtitle_font = FontSpec(style.font_family, style.subtitle_font_size)
            y = self._flow(commands, subtitle, self.x, y, self.width, subtitle_font,
                           subtitle_font.size * 1.3, style.muted_color, tag="subtitle")
        return SectionBlock("title", commands, y)

    def filters(self, filters: Optional[Mapping[str, Any]], search_term: Optional[str] = None) -> Optional[SectionBlock]:
        """Applied filters on one flowed line; omitted when nothing was filtered."""
        parts = [
            f"{label_from_key(key)}: {format_filter_value(value)}"
            for key, value in (filters or {}).items()
            if has_value(value) and value is not False and format_filter_value(value)
        ]
        if search_term and search_term.strip():
            parts.append(f"Search: {search_term.strip()}")
        if not parts:
            return None

        commands: List[DrawCommand] = []
        font = self.small_font
        y = self._flow(commands, "Filters Applied: " + " | ".join(parts), self.x, 0.0, self.width,
                       font, font.size * 1.4, self.style.muted_color, tag="filters")
        return SectionBlock("filters", commands, y)

    def caption(self, text: Optional[str]) -> Optional[SectionBlock]:
        """Table title shown above the column headers."""
        if not text:
            return None
        commands: List[DrawCommand] = []
        font = FontSpec(self.style.font_family, self.style.body_font_size + 2).bold()
        y = self._flow(commands, text, self.x, 0.0, self.width, font, font.size * 1.3, tag="table-title")
        return SectionBlock("caption", commands, y)

    def info_columns(
        self,
        left: Optional[Tuple[str, Sequence[str]]],
        right: Optional[Tuple[str, Sequence[str]]],
    ) -> Optional[SectionBlock]:
        """
        Two side-by-side blocks (issuer left, recipient right).

        Each column is wrapped and flowed on its own; the block is as tall as
        the taller column.
        """
        present = [bool(c and (c[0] or any(has_value(v) for v in c[1]))) for c in (left, right)]
        if not any(present):
            return None

        style = self.style
        commands: List[DrawCommand] = []
        column_width = (self.width - COLUMN_GAP) / 2
        heading_font = self.body_font.bold()
        bottoms = []
        breaks = set()

        for i, column in enumerate((left, right)):
            if not present[i]:
                continue
            heading, lines = column
            x = self.x + i * (column_width + COLUMN_GAP)
            y = 0.0
            if heading:
                y = self._flow(commands, heading, x, y, column_width, heading_font,
                               style.text_line_height, style.accent_color, tag="info-heading")
            heading_bottom = y
            column_breaks: List[float] = []
            for line in lines:
                if has_value(line):
                    y = self._flow(commands, str(line), x, y, column_width, self.body_font,
                                   style.text_line_height, tag="info-line", breaks=column_breaks)
            # A heading stays with the first line under it
            breaks.update(b for b in column_breaks if b > heading_bottom)
            bottoms.append(y)

        return SectionBlock("info", commands, max(bottoms), sorted(breaks))

    def detail_grid(self, pairs: Sequence[Tuple[str, Any]], columns: int = 2) -> Optional[SectionBlock]:
        """Label/value pairs (reference number, dates, currency...) in a boxed grid."""
        entries = [(label, str(value)) for label, value in pairs if has_value(value)]
        if not entries:
            return None

        style = self.style
        commands: List[DrawCommand] = []
        padding = style.cell_padding + 2
        label_font = self.body_font.bold()
        column_width = self.width / columns
        label_width = max(self.measurer.width(f"{label}:", label_font) for label, _ in entries) + 6
        label_width = min(label_width, column_width * 0.5)
        value_width = max(column_width - label_width - 2 * padding, 1.0)

        y = padding
        for start in range(0, len(entries), columns):
            row_bottom = y
            for i, (label, value) in enumerate(entries[start:start + columns]):
                x = self.x + i * column_width + padding
                commands.append(self._text(x, y, f"{label}:", label_font, style.muted_color, tag="detail-label"))
                bottom = self._flow(commands, value, x + label_width, y, value_width, self.body_font,
                                    style.text_line_height, tag="detail-value")
                row_bottom = max(row_bottom, bottom)
            y = row_bottom

        height = y + padding
        commands.insert(0, Rect(self.x, 0.0, self.width, height, stroke_color=style.grid_color,
                                line_width=style.grid_line_width, tag="detail-box"))
        return SectionBlock("details", commands, height)

    def totals_summary(self, entries: Sequence[SummaryEntry]) -> Optional[SectionBlock]:
        """Right-aligned summary box: subtotal, discount, tax, WHT, total..."""
        if not entries:
            return None

        style = self.style
        commands: List[DrawCommand] = []
        padding = style.cell_padding + 2
        box_width = min(max(self.width * 0.4, 200.0), self.width)
        box_x = self.x + self.width - box_width
        row_height = style.text_line_height + 2

        y = padding
        for entry in entries:
            font = self.body_font.bold() if entry.emphasized else self.body_font
            if entry.emphasized:
                commands.append(Line(box_x + padding, y - 1, box_x + box_width - padding, y - 1,
                                     color=style.grid_color, line_width=style.grid_line_width))
            commands.append(self._text(box_x + padding, y, entry.label, font, tag="summary-label"))
            commands.append(self._text(box_x + box_width - padding, y, entry.value, font,
                                       align="right", tag="summary-value"))
            y += row_height

        height = y + padding
        commands.insert(0, Rect(box_x, 0.0, box_width, height, fill_color=style.totals_bg_color,
                                stroke_color=style.grid_color, line_width=style.grid_line_width,
                                tag="summary-box"))
        return SectionBlock("summary", commands, height)

    def amount_in_words(self, words: Optional[str], label: str = "Amount in Words:") -> Optional[SectionBlock]:
        if not words:
            return None
        style = self.style
        commands: List[DrawCommand] = []
        label_font = self.body_font.bold()
        commands.append(self._text(self.x, 0.0, label, label_font, tag="words-label"))
        indent = self.measurer.width(label, label_font) + 6
        y = self._flow(commands, words, self.x + indent, 0.0, max(self.width - indent, 1.0),
                       self.body_font, style.text_line_height, tag="amount-in-words")
        return SectionBlock("amount_in_words", commands, y)

    def text_block(self, name: str, heading: str, text: Optional[str]) -> Optional[SectionBlock]:
        """Free-text block (notes, terms and conditions); omitted when empty."""
        if not has_value(text):
            return None
        style = self.style
        commands: List[DrawCommand] = []
        y = self._flow(commands, heading, self.x, 0.0, self.width, self.body_font.bold(),
                       style.text_line_height, tag=f"{name}-heading")
        body_top = y
        breaks: List[float] = []
        y = self._flow(commands, text, self.x, y, self.width, self.body_font,
                       style.text_line_height, style.muted_color, tag=name, breaks=breaks)
        return SectionBlock(name, commands, y, [b for b in breaks if b > body_top])

    def signature(self, left_label: str, right_label: str) -> SectionBlock:
        """Two side-by-side signature blocks with a date line under each."""
        style = self.style
        commands: List[DrawCommand] = []
        column_width = (self.width - COLUMN_GAP) / 2
        line_width = min(column_width * 0.8, 220.0)
        sign_y = 28.0

        for i, label in enumerate((left_label, right_label)):
            x = self.x + i * (column_width + COLUMN_GAP)
            commands.append(Line(x, sign_y, x + line_width, sign_y, color=style.text_color,
                                 line_width=0.5, tag="signature-line"))
            commands.append(self._text(x, sign_y + 3, label, self.body_font.bold(), tag="signature-label"))
            commands.append(self._text(x, sign_y + 3 + style.text_line_height, "Date: ____________________",
                                       self.small_font, style.muted_color, tag="signature-date"))

        return SectionBlock("signature", commands, sign_y + 3 + 2 * style.text_line_height)

    def empty_message(self, message: str) -> SectionBlock:
        """Centered notice drawn instead of an empty table."""
        style = self.style
        commands: List[DrawCommand] = []
        font = FontSpec(style.font_family, style.subtitle_font_size)
        y = 12.0
        for line in self.wrapper.wrap(message, self.width - 24, font):
            commands.append(self._text(self.x + self.width / 2, y, line, font, style.muted_color,
                                       align="center", tag="empty-message"))
            y += font.size * 1.4
        height = y + 12
        commands.insert(0, Rect(self.x, 0.0, self.width, height, stroke_color=style.grid_color,
                                line_width=style.grid_line_width, tag="empty-box"))
        return SectionBlock("empty", commands, height)

    def page_footer(
        self,
        page_height: float,
        margin_bottom: float,
        page_number: int,
        total_pages: int,
        footer_mark: str = "",
    ) -> List[DrawCommand]:
        """Footer mark and page number, drawn in the bottom margin of a page."""
        style = self.style
        font = self.small_font
        top = page_height - margin_bottom + 6
        commands: List[DrawCommand] = [
            Line(self.x, top, self.x + self.width, top, color=style.grid_color,
                 line_width=style.grid_line_width, tag="footer-rule"),
            self._text(self.x + self.width, top + 4, f"Page {page_number} of {total_pages}", font,
                       style.muted_color, align="right", tag="page-number"),
        ]
        if footer_mark:
            commands.append(self._text(self.x, top + 4, footer_mark, font, style.muted_color, tag="footer-mark"))
        return commands
