"""Table composition: cell wrapping, header bands, rows, totals footer and grid lines."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .draw_commands import DrawCommand, Line, Rect, Text
from .formatters import PLACEHOLDER, format_cell
from .layout_engine import PageLayout, PaginationPlan, Paginator, ResolvedLayout, TablePage
from .styles import DocumentStyle, GridStyle
from .table_templates import Alignment, ColumnSpec
from .text_metrics import FontSpec, TextMeasurer
from .text_wrap import TextWrapper, WrappedText
from .totals import total_label_span

logger = logging.getLogger(__name__)


MIN_ROW_HEIGHT = 14.0
TOTAL_LABEL = "Total"


@dataclass
class PreparedRow:
    """A row's wrapped cells and resulting height."""
    cells: List[WrappedText]
    height: float
    is_totals: bool = False
    totals: Dict[str, float] = field(default_factory=dict)


@dataclass
class ComposedTable:
    """Draw commands per page index, plus the pagination they follow."""
    commands: Dict[int, List[DrawCommand]]
    plan: PaginationPlan

    @property
    def last_page_index(self) -> int:
        return self.plan.last_page_index

    @property
    def end_y(self) -> float:
        return self.plan.end_y


class TableComposer:
    """Turns columns, rows and a resolved layout into paginated draw commands."""

    def __init__(
        self,
        style: DocumentStyle,
        measurer: TextMeasurer,
        wrapper: TextWrapper,
        placeholder: str = PLACEHOLDER,
    ):
        self.style = style
        self.measurer = measurer
        self.wrapper = wrapper
        self.placeholder = placeholder

    @property
    def cell_font(self) -> FontSpec:
        return FontSpec(self.style.font_family, self.style.table_font_size)

    @property
    def header_font(self) -> FontSpec:
        return FontSpec(self.style.font_family, self.style.table_header_font_size).bold()

    @property
    def single_line_height(self) -> float:
        return max(MIN_ROW_HEIGHT, self.style.line_height + 2 * self.style.cell_padding)

    def _text_width(self, column_width: float) -> float:
        return max(column_width - 2 * self.style.cell_padding, 1.0)

    def header_cells(self, columns: Sequence[ColumnSpec], layout: ResolvedLayout) -> List[WrappedText]:
        return [
            self.wrapper.wrap(column.header, self._text_width(width), self.header_font)
            for column, width in zip(columns, layout.widths)
        ]

    def header_height(self, columns: Sequence[ColumnSpec], layout: ResolvedLayout) -> float:
        cells = self.header_cells(columns, layout)
        return Paginator.row_height((len(cell) for cell in cells), self.style.line_height,
                                    self.single_line_height, self.style.cell_padding)

    def prepare_row(self, row: Mapping[str, Any], columns: Sequence[ColumnSpec], layout: ResolvedLayout) -> PreparedRow:
        """Format and wrap every cell of a row, then size the row."""
        cells = [
            self.wrapper.wrap(
                format_cell(row.get(column.key), column.kind, self.placeholder),
                self._text_width(width),
                self.cell_font,
            )
            for column, width in zip(columns, layout.widths)
        ]
        height = Paginator.row_height((len(cell) for cell in cells), self.style.line_height,
                                      self.single_line_height, self.style.cell_padding)
        return PreparedRow(cells=cells, height=height)

    def prepare_totals(self, column_totals: Dict[str, float]) -> PreparedRow:
        return PreparedRow(cells=[], height=self.single_line_height, is_totals=True, totals=column_totals)

    def compose(
        self,
        columns: Sequence[ColumnSpec],
        rows: Sequence[Mapping[str, Any]],
        layout: ResolvedLayout,
        page_layout: PageLayout,
        start_y: float,
        start_page: int = 0,
        column_totals: Optional[Dict[str, float]] = None,
    ) -> ComposedTable:
        """
        Lay the table out across pages starting at start_y on start_page.

        The totals footer, when given, paginates like any other row.
        """
        prepared = [self.prepare_row(row, columns, layout) for row in rows]
        if column_totals is not None:
            prepared.append(self.prepare_totals(column_totals))

        header_cells = self.header_cells(columns, layout)
        header_height = self.header_height(columns, layout)
        paginator = Paginator(page_layout, header_height)
        plan = paginator.plan([row.height for row in prepared], start_y, start_page)
        logger.debug("Table of %d rows spans %d page(s)", len(rows), len(plan.pages))

        x0 = page_layout.content_start_x
        offsets = layout.column_offsets(x0)
        commands: Dict[int, List[DrawCommand]] = {}

        for page in plan.pages:
            page_commands = commands.setdefault(page.page_index, [])
            page_commands.extend(self._header_band(columns, layout, offsets, header_cells, page))
            for placement in page.rows:
                row = prepared[placement.row_index]
                if row.is_totals:
                    page_commands.extend(self._totals_row(columns, layout, offsets, row, placement.y_top))
                else:
                    page_commands.extend(self._data_row(columns, layout, offsets, row,
                                                        placement.row_index, placement.y_top))
            page_commands.extend(self._grid_lines(columns, layout, offsets, page, prepared))

        return ComposedTable(commands=commands, plan=plan)

    def _cell_lines(
        self,
        lines: WrappedText,
        column: ColumnSpec,
        x: float,
        width: float,
        y_top: float,
        font: FontSpec,
        color: str,
        tag: str,
    ) -> List[DrawCommand]:
        style = self.style
        padding = style.cell_padding
        if column.align == Alignment.RIGHT:
            anchor, align = x + width - padding, "right"
        elif column.align == Alignment.CENTER:
            anchor, align = x + width / 2, "center"
        else:
            anchor, align = x + padding, "left"

        commands: List[DrawCommand] = []
        for i, line in enumerate(lines):
            if not line:
                continue
            baseline = y_top + padding + i * style.line_height + font.size
            commands.append(Text(anchor, baseline, line, font.name, font.size, color, align, tag))
        return commands

    def _header_band(
        self,
        columns: Sequence[ColumnSpec],
        layout: ResolvedLayout,
        offsets: List[float],
        header_cells: List[WrappedText],
        page: TablePage,
    ) -> List[DrawCommand]:
        """Column header band drawn at the top of the table on every page."""
        style = self.style
        commands: List[DrawCommand] = [
            Rect(offsets[0], page.header_y, layout.total, page.header_height,
                 fill_color=style.header_bg_color, tag="header-band"),
        ]
        for column, x, width, lines in zip(columns, offsets, layout.widths, header_cells):
            commands.extend(self._cell_lines(lines, column, x, width, page.header_y, self.header_font,
                                             style.header_text_color, "header-cell"))
        return commands

    def _data_row(
        self,
        columns: Sequence[ColumnSpec],
        layout: ResolvedLayout,
        offsets: List[float],
        row: PreparedRow,
        row_index: int,
        y_top: float,
    ) -> List[DrawCommand]:
        style = self.style
        commands: List[DrawCommand] = []
        if row_index % 2 == 1:
            commands.append(Rect(offsets[0], y_top, layout.total, row.height,
                                 fill_color=style.alternating_row_color, tag="row-band"))
        for column, x, width, lines in zip(columns, offsets, layout.widths, row.cells):
            commands.extend(self._cell_lines(lines, column, x, width, y_top, self.cell_font,
                                             style.text_color, "cell"))
        return commands

    def _totals_row(
        self,
        columns: Sequence[ColumnSpec],
        layout: ResolvedLayout,
        offsets: List[float],
        row: PreparedRow,
        y_top: float,
    ) -> List[DrawCommand]:
        """Footer row: "Total" over the leading text columns, sums under totalled columns."""
        style = self.style
        font = self.cell_font.bold()
        padding = style.cell_padding
        baseline = y_top + padding + font.size
        commands: List[DrawCommand] = [
            Rect(offsets[0], y_top, layout.total, row.height, fill_color=style.totals_bg_color, tag="totals-row"),
            Text(offsets[0] + padding, baseline, TOTAL_LABEL, font.name, font.size, style.text_color,
                 "left", "totals-label"),
        ]
        span = total_label_span(columns)
        for i, (column, x, width) in enumerate(zip(columns, offsets, layout.widths)):
            if i < span or not column.is_totalled or column.key not in row.totals:
                continue
            text = format_cell(row.totals[column.key], column.kind, self.placeholder)
            text = self.wrapper.truncate(text, self._text_width(width), font)
            commands.append(Text(x + width - padding, baseline, text, font.name, font.size,
                                 style.text_color, "right", "totals-cell"))
        return commands

    def _grid_lines(
        self,
        columns: Sequence[ColumnSpec],
        layout: ResolvedLayout,
        offsets: List[float],
        page: TablePage,
        prepared: List[PreparedRow],
    ) -> List[DrawCommand]:
        """Grid lines for one page's slice of the table, per the style's grid style."""
        style = self.style
        color, weight = style.grid_color, style.grid_line_width
        left, right = offsets[0], offsets[0] + layout.total
        top, header_bottom, bottom = page.header_y, page.header_y + page.header_height, page.y_bottom

        def hline(y):
            return Line(left, y, right, y, color, weight, tag="grid")

        def vline(x, y1, y2):
            return Line(x, y1, x, y2, color, weight, tag="grid")

        commands: List[DrawCommand] = [hline(top), hline(header_bottom), hline(bottom)]

        if style.grid_style == GridStyle.BOX_BORDERS:
            commands.extend([vline(left, top, bottom), vline(right, top, bottom)])
            return commands

        for placement in page.rows:
            commands.append(hline(placement.y_bottom))

        if style.grid_style == GridStyle.HORIZONTAL_ONLY:
            return commands

        # Full grid: column separators, interrupted inside the "Total" label span
        totals_rows = [p for p in page.rows if prepared[p.row_index].is_totals]
        body_bottom = totals_rows[0].y_top if totals_rows else bottom
        span = total_label_span(columns)
        boundaries = offsets[1:]
        commands.extend([vline(left, top, bottom), vline(right, top, bottom)])
        for i, x in enumerate(boundaries, start=1):
            commands.append(vline(x, top, body_bottom))
            if totals_rows and i >= span:
                commands.append(vline(x, body_bottom, bottom))
        return commands
