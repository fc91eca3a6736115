from __future__ import annotations

import pytest

from ledgerprint.company import DefaultsProvider
from ledgerprint.config import RenderConfig
from ledgerprint.document_renderer import DocumentRenderer
from ledgerprint.text_metrics import FontSpec
from ledgerprint.text_wrap import TextWrapper


class FixedWidthMeasurer:
    """Every character is char_width points wide, whatever the font."""

    def __init__(self, char_width: float = 5.0):
        self.char_width = char_width

    def width(self, text: str, font: FontSpec) -> float:
        return len(text) * self.char_width

    def average_char_width(self, font: FontSpec) -> float:
        return self.char_width


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    return FixedWidthMeasurer()


@pytest.fixture
def wrapper(measurer) -> TextWrapper:
    return TextWrapper(measurer)


@pytest.fixture
def font() -> FontSpec:
    return FontSpec("Helvetica", 8)


@pytest.fixture
def config(tmp_path) -> RenderConfig:
    return RenderConfig(out_dir=tmp_path)


@pytest.fixture
def renderer(config) -> DocumentRenderer:
    return DocumentRenderer(config, DefaultsProvider())
