"""Layout engine: page geometry, column width solving and table pagination."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from reportlab.lib.pagesizes import A4, LETTER, landscape
from reportlab.lib.units import mm

from .table_templates import ColumnSpec

logger = logging.getLogger(__name__)


# Page dimensions
PAGE_SIZES = {
    "A4": A4,  # 595.27 x 841.89 points
    "LETTER": LETTER,  # 612 x 792 points
}
DEFAULT_MARGIN = 15 * mm
ROUNDING_UNIT = 0.01
WIDTH_EPSILON = 1e-6


@dataclass
class PageLayout:
    """Defines the layout parameters for a page (top-down coordinates)."""
    page_width: float = A4[0]
    page_height: float = A4[1]
    margin_left: float = DEFAULT_MARGIN
    margin_right: float = DEFAULT_MARGIN
    margin_top: float = DEFAULT_MARGIN
    margin_bottom: float = DEFAULT_MARGIN
    orientation: str = "portrait"  # "portrait" or "landscape"

    @classmethod
    def portrait(cls, page_size: str = "A4", margin: float = DEFAULT_MARGIN) -> "PageLayout":
        """Create a portrait layout."""
        width, height = PAGE_SIZES[page_size]
        return cls(
            page_width=width,
            page_height=height,
            margin_left=margin,
            margin_right=margin,
            margin_top=margin,
            margin_bottom=margin,
            orientation="portrait",
        )

    @classmethod
    def landscape(cls, page_size: str = "A4", margin: float = DEFAULT_MARGIN) -> "PageLayout":
        """Create a landscape layout."""
        width, height = landscape(PAGE_SIZES[page_size])
        return cls(
            page_width=width,
            page_height=height,
            margin_left=margin,
            margin_right=margin,
            margin_top=margin,
            margin_bottom=margin,
            orientation="landscape",
        )

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def content_start_x(self) -> float:
        return self.margin_left

    @property
    def content_top(self) -> float:
        """Top of the content area."""
        return self.margin_top

    @property
    def content_bottom(self) -> float:
        """Lowest y a row may reach before a page break."""
        return self.page_height - self.margin_bottom


@dataclass(frozen=True)
class ResolvedLayout:
    """Concrete column widths for one document. Immutable once solved."""
    widths: Tuple[float, ...]
    usable_width: float

    @property
    def total(self) -> float:
        return sum(self.widths)

    @property
    def overflow(self) -> bool:
        """True when minimum widths forced the table wider than the page."""
        return self.total > self.usable_width + WIDTH_EPSILON

    def column_offsets(self, start_x: float) -> List[float]:
        """Left edge x of every column."""
        offsets = []
        x = start_x
        for width in self.widths:
            offsets.append(x)
            x += width
        return offsets


class ColumnWidthSolver:
    """Resolves column specifications against an available width."""

    def solve(self, columns: Sequence[ColumnSpec], usable_width: float) -> ResolvedLayout:
        """
        Compute absolute column widths.

        Columns start at max(min_width, preferred share). An oversubscribed
        table is scaled down, freezing columns that hit their minimum and
        rescaling the rest against what remains. Leftover space goes to the
        flexible columns (or the widest column). The rounding residual lands
        on the residual column: first flexible column, else the first column.
        """
        if not columns:
            return ResolvedLayout(widths=(), usable_width=usable_width)

        minimums = [spec.min_width for spec in columns]
        widths = [
            max(spec.min_width, usable_width * spec.preferred_percent / 100.0)
            for spec in columns
        ]

        if sum(widths) > usable_width:
            widths = self._scale_down(widths, minimums, usable_width)
        elif sum(widths) < usable_width:
            widths = self._distribute_surplus(widths, columns, usable_width - sum(widths))

        widths = [round(w / ROUNDING_UNIT) * ROUNDING_UNIT for w in widths]

        residual_index = self._residual_column(columns)
        residual = usable_width - sum(widths)
        if abs(residual) > WIDTH_EPSILON and widths[residual_index] + residual >= minimums[residual_index]:
            widths[residual_index] += residual

        layout = ResolvedLayout(widths=tuple(widths), usable_width=usable_width)
        if layout.overflow:
            logger.debug(
                "Minimum column widths exceed usable width: %.2f > %.2f",
                layout.total, usable_width,
            )
        return layout

    def _scale_down(self, widths: List[float], minimums: List[float], usable_width: float) -> List[float]:
        """Shrink candidates toward usable_width without crossing any minimum."""
        frozen = set()
        while True:
            free = [i for i in range(len(widths)) if i not in frozen]
            budget = usable_width - sum(minimums[i] for i in frozen)
            free_total = sum(widths[i] for i in free)
            if not free or budget <= 0 or free_total <= 0:
                return list(minimums)

            factor = budget / free_total
            clamped = [i for i in free if widths[i] * factor < minimums[i]]
            if not clamped:
                return [minimums[i] if i in frozen else widths[i] * factor for i in range(len(widths))]
            frozen.update(clamped)

    def _distribute_surplus(
        self,
        widths: List[float],
        columns: Sequence[ColumnSpec],
        surplus: float
    ) -> List[float]:
        """Hand spare width to flexible columns in proportion to their width."""
        widths = list(widths)
        flexible = [i for i, spec in enumerate(columns) if spec.flexible]
        if flexible:
            flexible_total = sum(widths[i] for i in flexible)
            for i in flexible:
                widths[i] += surplus * widths[i] / flexible_total
        else:
            widest = max(range(len(widths)), key=lambda i: (widths[i], -i))
            widths[widest] += surplus
        return widths

    def _residual_column(self, columns: Sequence[ColumnSpec]) -> int:
        for i, spec in enumerate(columns):
            if spec.flexible:
                return i
        return 0


@dataclass
class PageState:
    """Drawing cursor for the page being composed."""
    cursor_y: float
    page_index: int = 0


@dataclass
class RowPlacement:
    """Where a table row is placed."""
    row_index: int
    page_index: int
    y_top: float
    row_height: float

    @property
    def y_bottom(self) -> float:
        return self.y_top + self.row_height


@dataclass
class TablePage:
    """The slice of a table that lands on one page, under its own header band."""
    page_index: int
    header_y: float
    header_height: float
    rows: List[RowPlacement] = field(default_factory=list)

    @property
    def y_bottom(self) -> float:
        if self.rows:
            return self.rows[-1].y_bottom
        return self.header_y + self.header_height


@dataclass
class PaginationPlan:
    """Page assignment for every row, with one header band per page."""
    pages: List[TablePage]

    @property
    def header_redraws(self) -> int:
        return len(self.pages)

    @property
    def last_page_index(self) -> int:
        return self.pages[-1].page_index

    @property
    def end_y(self) -> float:
        return self.pages[-1].y_bottom

    def placements(self) -> List[RowPlacement]:
        return [row for page in self.pages for row in page.rows]


class Paginator:
    """Decides where table rows land and where page breaks occur."""

    def __init__(self, layout: PageLayout, header_height: float, top_offset: Optional[float] = None):
        self.layout = layout
        self.header_height = header_height
        self.top_offset = layout.content_top if top_offset is None else top_offset

    @staticmethod
    def row_height(
        line_counts: Iterable[int],
        line_height: float,
        single_line_height: float,
        padding: float = 0.0
    ) -> float:
        """Height of a row whose cells wrapped to the given line counts."""
        max_lines = max(line_counts, default=1)
        return max(single_line_height, max_lines * line_height + 2 * padding)

    def can_fit(self, state: PageState, height: float) -> bool:
        """Check if content of given height fits below the cursor."""
        return state.cursor_y + height <= self.layout.content_bottom

    def plan(self, row_heights: Sequence[float], start_y: float, start_page: int = 0) -> PaginationPlan:
        """
        Assign rows to pages.

        The header band opens every page of the table. A row that would
        cross the bottom margin moves to a new page, unless the page holds no
        rows yet; such a row is drawn anyway and may overflow.
        """
        state = PageState(cursor_y=start_y, page_index=start_page)
        limit = self.layout.content_bottom

        # Keep the first header band together with the first row
        first_height = row_heights[0] if row_heights else 0.0
        if start_y > self.top_offset and start_y + self.header_height + first_height > limit:
            logger.debug("Table does not fit below y=%.1f, starting on a new page", start_y)
            state = PageState(cursor_y=self.top_offset, page_index=start_page + 1)

        page = self._open_page(state)
        pages = [page]

        for row_index, height in enumerate(row_heights):
            if page.rows and state.cursor_y + height > limit:
                state = PageState(cursor_y=self.top_offset, page_index=state.page_index + 1)
                page = self._open_page(state)
                pages.append(page)

            page.rows.append(RowPlacement(
                row_index=row_index,
                page_index=state.page_index,
                y_top=state.cursor_y,
                row_height=height,
            ))
            state.cursor_y += height

            if state.cursor_y > limit:
                logger.debug("Row %d overflows page %d bottom", row_index, state.page_index)

        return PaginationPlan(pages=pages)

    def _open_page(self, state: PageState) -> TablePage:
        """Place the header band at the cursor and move below it."""
        page = TablePage(
            page_index=state.page_index,
            header_y=state.cursor_y,
            header_height=self.header_height,
        )
        state.cursor_y += self.header_height
        return page
