"""
Module: report.layout.wrapping

Purpose:
    Greedy character-wise line wrapping for sidebar text.

Algorithm:
    Characters are appended one at a time. When appending the next
    character would make the line wider than the limit, the current line
    is flushed and the character starts the next line. The first
    character of a text is never flushed on its own, so a single glyph
    wider than the limit still makes progress.

    Wrapping is per character, not per word, so scripts without spaces
    between words (Chinese) wrap the same way as English.

Key Functions:
    - wrap_text(): Split text into lines
    - layout_text(): Lines + next cursor position

Used By:
    - report.layout.composer
"""

from __future__ import annotations

from typing import Callable, List, Protocol, Tuple

from .models import FontSpec


class TextMeasurer(Protocol):
    """Anything that can report the rendered width of a string."""

    def measure(self, text: str, font: FontSpec) -> float:
        ...


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    """
    Wrap text greedily, one character at a time.

    Args:
        text: Text to wrap
        max_width: Maximum line width in pixels
        measure: Width of a string in pixels

    Returns:
        Lines in order; at least one (possibly empty) line

    Example:
        >>> wrap_text("abcdef", 30, lambda s: 10 * len(s))
        ['abc', 'def']
    """
    lines: List[str] = []
    line = ""
    for i, ch in enumerate(text):
        candidate = line + ch
        if i > 0 and measure(candidate) > max_width:
            lines.append(line)
            line = ch
        else:
            line = candidate
    lines.append(line)
    return lines


def layout_text(
    text: str,
    y: float,
    max_width: float,
    line_height: float,
    measure: Callable[[str], float],
) -> Tuple[List[str], float]:
    """
    Wrap text starting at baseline ``y`` and return the next cursor.

    Returns:
        (lines, next_y) where next_y = y + line_height * len(lines),
        strictly greater than y for any positive line height
    """
    lines = wrap_text(text, max_width, measure)
    return lines, y + line_height * len(lines)
