"""Visual style presets for printed documents."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class GridStyle(Enum):
    """Table grid line rendering styles."""
    FULL_GRID = "full_grid"           # Bordered cells
    HORIZONTAL_ONLY = "horizontal"     # Row separators only
    BOX_BORDERS = "box_borders"        # Outer border + header separator


@dataclass
class DocumentStyle:
    """Fonts, sizes and colors used by every section of a document."""
    name: str
    font_family: str  # Base font name (Helvetica, Times-Roman, Courier)
    body_font_size: float
    table_font_size: float
    table_header_font_size: float
    title_font_size: float
    subtitle_font_size: float
    company_font_size: float
    small_font_size: float
    line_height: float  # Table body line height
    text_line_height: float  # Line height for flowed section text
    cell_padding: float
    grid_style: GridStyle
    grid_line_width: float
    grid_color: str
    header_bg_color: str
    header_text_color: str
    alternating_row_color: str
    totals_bg_color: str
    text_color: str
    muted_color: str
    accent_color: str
    logo_size: float


DOCUMENT_STYLES: Dict[str, DocumentStyle] = {
    "professional": DocumentStyle(
        name="professional",
        font_family="Helvetica",
        body_font_size=10,
        table_font_size=7,
        table_header_font_size=8,
        title_font_size=16,
        subtitle_font_size=12,
        company_font_size=20,
        small_font_size=8,
        line_height=9.0,
        text_line_height=13.0,
        cell_padding=3.0,
        grid_style=GridStyle.FULL_GRID,
        grid_line_width=0.3,
        grid_color="#C8C8C8",
        header_bg_color="#2980B9",
        header_text_color="#FFFFFF",
        alternating_row_color="#F5F5F5",
        totals_bg_color="#F0F8FF",
        text_color="#000000",
        muted_color="#646464",
        accent_color="#2980B9",
        logo_size=36.0,
    ),
    "compact": DocumentStyle(
        name="compact",
        font_family="Helvetica",
        body_font_size=8,
        table_font_size=6,
        table_header_font_size=7,
        title_font_size=13,
        subtitle_font_size=10,
        company_font_size=15,
        small_font_size=7,
        line_height=7.5,
        text_line_height=10.5,
        cell_padding=2.0,
        grid_style=GridStyle.HORIZONTAL_ONLY,
        grid_line_width=0.25,
        grid_color="#D1D5DB",
        header_bg_color="#E8E8E8",
        header_text_color="#000000",
        alternating_row_color="#FFFFFF",
        totals_bg_color="#F3F4F6",
        text_color="#000000",
        muted_color="#6B7280",
        accent_color="#111827",
        logo_size=28.0,
    ),
    "classic": DocumentStyle(
        name="classic",
        font_family="Times-Roman",
        body_font_size=10,
        table_font_size=8,
        table_header_font_size=9,
        title_font_size=15,
        subtitle_font_size=11,
        company_font_size=18,
        small_font_size=8,
        line_height=10.0,
        text_line_height=13.0,
        cell_padding=3.0,
        grid_style=GridStyle.BOX_BORDERS,
        grid_line_width=0.75,
        grid_color="#000000",
        header_bg_color="#F0F0F0",
        header_text_color="#000000",
        alternating_row_color="#FFFFFF",
        totals_bg_color="#F0F0F0",
        text_color="#000000",
        muted_color="#505050",
        accent_color="#000000",
        logo_size=36.0,
    ),
}


def get_style(name: str) -> DocumentStyle:
    """Get a style preset by name, falling back to the professional preset."""
    return DOCUMENT_STYLES.get(name, DOCUMENT_STYLES["professional"])


def get_bold_font(font_family: str) -> str:
    """Get the bold variant of a font family."""
    if font_family == "Times-Roman":
        return "Times-Bold"
    elif font_family.endswith("-Bold"):
        return font_family
    else:
        return f"{font_family}-Bold"
