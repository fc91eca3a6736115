from __future__ import annotations

import pytest

from ledgerprint.text_metrics import FontSpec, TextMeasurer
from ledgerprint.text_wrap import ELLIPSIS, TextWrapper


def test_greedy_wrap_packs_words(wrapper, font) -> None:
    lines = wrapper.wrap("the quick brown fox jumps", 50, font).lines()
    assert lines == ["the quick", "brown fox", "jumps"]


@pytest.mark.parametrize("text", [None, "", "   ", "\n"])
def test_empty_text_yields_placeholder_once(wrapper, font, text) -> None:
    assert wrapper.wrap(text, 50, font).lines() == ["--"]


def test_custom_placeholder(measurer, font) -> None:
    assert TextWrapper(measurer, placeholder="N/A").wrap(None, 50, font).lines() == ["N/A"]


def test_unbreakable_token_breaks_between_characters(wrapper, font) -> None:
    lines = wrapper.wrap("ab ABCDEFGHIJKLMNOPQRSTUVWXY tail", 50, font).lines()
    assert lines == ["ab", "ABCDEFGHIJ", "KLMNOPQRST", "UVWXY tail"]


def test_width_narrower_than_one_character_still_progresses(wrapper, font) -> None:
    assert wrapper.wrap("abc", 3, font).lines() == ["a", "b", "c"]


def test_explicit_newlines_start_new_lines(wrapper, font) -> None:
    assert wrapper.wrap("first\nsecond", 200, font).lines() == ["first", "second"]


def test_leading_indent_is_kept(wrapper, font) -> None:
    assert wrapper.wrap("    1100 cash", 200, font).lines() == ["    1100 cash"]


def test_wrapped_text_is_restartable(wrapper, font) -> None:
    wrapped = wrapper.wrap("the quick brown fox jumps", 50, font)
    assert list(wrapped) == list(wrapped)
    assert len(wrapped) == 3


def test_lines_fit_and_keep_words_in_order_with_real_metrics() -> None:
    wrapper = TextWrapper(TextMeasurer())
    font = FontSpec("Helvetica", 7)
    text = ("Roofing sheet 28 gauge pre-painted galvanised, delivered to site "
            "with ridge caps and fixings SKU-0000123456789-BLUE")
    lines = wrapper.wrap(text, 60, font).lines()
    assert len(lines) > 1
    for line in lines:
        assert wrapper.measurer.width(line, font) <= 60
    assert "".join(lines).replace(" ", "") == text.replace(" ", "")


def test_truncate_adds_ellipsis(wrapper, font) -> None:
    assert wrapper.truncate("short", 50, font) == "short"
    assert wrapper.truncate("abcdefghijklmnop", 50, font) == "abcdefg" + ELLIPSIS
