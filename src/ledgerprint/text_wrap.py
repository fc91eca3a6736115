"""Greedy word wrapping with a character-level fallback for unbreakable tokens."""

import math
from typing import Iterator, List, Optional

from .formatters import PLACEHOLDER
from .text_metrics import FontSpec, TextMeasurer


ELLIPSIS = "..."


class WrappedText:
    """
    Lines of one wrapped string.

    Lazy and restartable: every iteration re-runs the wrap, so the same
    object can be walked once to size a row and again to draw it.
    """

    def __init__(self, wrapper: "TextWrapper", text: Optional[str], max_width: float, font: FontSpec):
        self._wrapper = wrapper
        self.text = text
        self.max_width = max_width
        self.font = font

    def __iter__(self) -> Iterator[str]:
        return self._wrapper.iter_lines(self.text, self.max_width, self.font)

    def lines(self) -> List[str]:
        return list(self)

    def __len__(self) -> int:
        return sum(1 for _ in self)


class TextWrapper:
    """Breaks strings into display lines that fit a width."""

    def __init__(self, measurer: Optional[TextMeasurer] = None, placeholder: str = PLACEHOLDER):
        self.measurer = measurer or TextMeasurer()
        self.placeholder = placeholder

    def wrap(self, text: Optional[str], max_width: float, font: FontSpec) -> WrappedText:
        """Wrap text to max_width; the result is evaluated lazily."""
        return WrappedText(self, text, max_width, font)

    def iter_lines(self, text: Optional[str], max_width: float, font: FontSpec) -> Iterator[str]:
        """Yield wrapped lines. Empty text yields the placeholder exactly once."""
        if text is None or not str(text).strip():
            yield self.placeholder
            return

        for paragraph in str(text).splitlines():
            words = paragraph.split()
            if not words:
                yield ""
                continue
            indent = paragraph[:len(paragraph) - len(paragraph.lstrip(" "))]
            yield from self._wrap_words(words, max_width, font, indent)

    def _wrap_words(self, words: List[str], max_width: float, font: FontSpec, indent: str = "") -> Iterator[str]:
        """Greedy wrap. A leading indent is kept on the first line only."""
        measure = self.measurer.width
        current = ""

        for word in words:
            candidate = f"{current} {word}" if current else indent + word
            if measure(candidate, font) <= max_width:
                current = candidate
                continue

            if current:
                yield current
                current = ""
                indent = ""

            if measure(indent + word, font) <= max_width:
                current = indent + word
                continue

            # Unbreakable token (codes, barcodes): break between characters
            pieces = self._break_word(word, max_width, font)
            yield from pieces[:-1]
            current = pieces[-1]
            indent = ""

        if current:
            yield current

    def _break_word(self, word: str, max_width: float, font: FontSpec) -> List[str]:
        """Split a word into pieces that each measure within max_width."""
        measure = self.measurer.width
        average = self.measurer.average_char_width(font)
        estimate = int(math.floor(max_width / average)) if average > 0 else 1

        pieces = []
        remaining = word
        while remaining:
            break_point = max(1, min(len(remaining), estimate))
            while break_point > 1 and measure(remaining[:break_point], font) > max_width:
                break_point -= 1
            while break_point < len(remaining) and measure(remaining[:break_point + 1], font) <= max_width:
                break_point += 1
            pieces.append(remaining[:break_point])
            remaining = remaining[break_point:]
        return pieces

    def truncate(self, text: str, max_width: float, font: FontSpec) -> str:
        """Truncate single-line text to fit within max_width, adding '...' if needed."""
        if not text:
            return text

        measure = self.measurer.width
        if measure(text, font) <= max_width:
            return text

        available_width = max_width - measure(ELLIPSIS, font)
        if available_width <= 0:
            return ELLIPSIS[:1]

        # Start from full text and reduce
        for i in range(len(text), 0, -1):
            truncated = text[:i].rstrip()
            if measure(truncated, font) <= available_width:
                return truncated + ELLIPSIS

        return ELLIPSIS
