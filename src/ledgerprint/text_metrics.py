"""Text measurement using ReportLab's standard font metrics."""

from dataclasses import dataclass

from reportlab.pdfbase import pdfmetrics

from .styles import get_bold_font


# Sample used to estimate the average glyph width of a font
AVERAGE_SAMPLE = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


@dataclass(frozen=True)
class FontSpec:
    """A font face and size."""
    name: str = "Helvetica"
    size: float = 8.0

    def bold(self) -> "FontSpec":
        """Get the bold variant of this font at the same size."""
        return FontSpec(get_bold_font(self.name), self.size)

    def sized(self, size: float) -> "FontSpec":
        return FontSpec(self.name, size)


class TextMeasurer:
    """Measures rendered string widths. Pure, holds no state."""

    def width(self, text: str, font: FontSpec) -> float:
        """Width of text in points when set in the given font."""
        if not text:
            return 0.0
        return pdfmetrics.stringWidth(text, font.name, font.size)

    def average_char_width(self, font: FontSpec) -> float:
        """Average glyph width, used to estimate character break points."""
        return self.width(AVERAGE_SAMPLE, font) / len(AVERAGE_SAMPLE)
