"""
Unit Tests for Greedy Character-wise Wrapping
"""

import pytest

from smartgrade.report.layout.wrapping import layout_text, wrap_text


def ten_px(text):
    return 10 * len(text)


class TestWrapText:
    def test_when_text_fits_then_single_line(self):
        assert wrap_text("abc", 100, ten_px) == ["abc"]

    def test_when_text_too_wide_then_split_at_limit(self):
        assert wrap_text("abcdef", 30, ten_px) == ["abc", "def"]

    def test_when_exactly_at_limit_then_not_split(self):
        assert wrap_text("abcd", 40, ten_px) == ["abcd"]

    def test_when_empty_then_one_empty_line(self):
        assert wrap_text("", 30, ten_px) == [""]

    def test_when_char_wider_than_limit_then_still_progresses(self):
        """Each character gets its own line rather than looping forever."""
        assert wrap_text("abc", 5, ten_px) == ["a", "b", "c"]

    def test_when_negative_width_then_terminates(self):
        assert wrap_text("xyz", -50, ten_px) == ["x", "y", "z"]

    def test_when_chinese_without_spaces_then_wrapped_per_character(self):
        assert wrap_text("正确答案是四", 40, ten_px) == ["正确答案", "是四"]

    def test_when_joined_then_original_text(self):
        text = "The quick brown fox jumps over the lazy dog"
        assert "".join(wrap_text(text, 70, ten_px)) == text


class TestLayoutText:
    def test_when_two_lines_then_cursor_advanced_twice(self):
        lines, next_y = layout_text("abcdef", 100, 30, 22.5, ten_px)
        assert lines == ["abc", "def"]
        assert next_y == pytest.approx(145)

    @pytest.mark.parametrize("text", ["", "a", "abcdefghijklmnop"])
    def test_when_positive_line_height_then_cursor_always_advances(self, text):
        _, next_y = layout_text(text, 10, 30, 1.5, ten_px)
        assert next_y > 10
