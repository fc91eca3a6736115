"""Backend-independent drawing primitives and the composed document."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Union

from .layout_engine import PageLayout, ResolvedLayout


@dataclass(frozen=True)
class Text:
    """A single line of text. (x, y) is the baseline start, top-down coordinates."""
    x: float
    y: float
    text: str
    font_name: str = "Helvetica"
    font_size: float = 8.0
    color: str = "#000000"
    align: str = "left"  # "left", "right" or "center"; x is the anchor
    tag: Optional[str] = None

    def moved(self, dx: float, dy: float) -> "Text":
        return replace(self, x=self.x + dx, y=self.y + dy)


@dataclass(frozen=True)
class Rect:
    """A rectangle. (x, y) is the top-left corner."""
    x: float
    y: float
    width: float
    height: float
    fill_color: Optional[str] = None
    stroke_color: Optional[str] = None
    line_width: float = 0.5
    tag: Optional[str] = None

    def moved(self, dx: float, dy: float) -> "Rect":
        return replace(self, x=self.x + dx, y=self.y + dy)


@dataclass(frozen=True)
class Line:
    """A straight line segment."""
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = "#000000"
    line_width: float = 0.5
    tag: Optional[str] = None

    def moved(self, dx: float, dy: float) -> "Line":
        return replace(self, x1=self.x1 + dx, y1=self.y1 + dy, x2=self.x2 + dx, y2=self.y2 + dy)


@dataclass(frozen=True)
class Image:
    """Raster image bytes placed in a box. (x, y) is the top-left corner."""
    x: float
    y: float
    width: float
    height: float
    data: bytes = field(repr=False)
    tag: Optional[str] = None

    def moved(self, dx: float, dy: float) -> "Image":
        return replace(self, x=self.x + dx, y=self.y + dy)


DrawCommand = Union[Text, Rect, Line, Image]


@dataclass
class Page:
    """One fixed-size page and the commands drawn on it, in paint order."""
    index: int
    width: float
    height: float
    commands: List[DrawCommand] = field(default_factory=list)

    def add(self, *commands: DrawCommand) -> None:
        self.commands.extend(commands)


@dataclass
class Document:
    """A composed, paginated document ready for a backend."""
    pages: List[Page]
    title: str = ""
    author: str = ""
    page_layout: Optional[PageLayout] = None
    layout: Optional[ResolvedLayout] = None
    totals: Optional[Any] = None  # TotalsRecord
    column_totals: Dict[str, float] = field(default_factory=dict)
    header_bands: int = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def iter_commands(self) -> Iterator[DrawCommand]:
        for page in self.pages:
            yield from page.commands

    def commands_tagged(self, tag: str) -> List[DrawCommand]:
        return [command for command in self.iter_commands() if command.tag == tag]

    def texts(self) -> List[str]:
        """Every text string in the document, in paint order."""
        return [command.text for command in self.iter_commands() if isinstance(command, Text)]
