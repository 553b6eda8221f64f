"""
Module: report.output.fonts

Purpose:
    Resolve fonts for sidebar text and measure strings with them.
    Sidebar text may be Chinese, so CJK-capable families are tried before
    Latin-only ones. Pillow's built-in font is the last resort.

Key Functions:
    - load_font(): FontSpec → Pillow font (cached)

Key Classes:
    - PillowTextMeasurer: TextMeasurer backed by load_font()

Dependencies:
    - PIL: Font loading and metrics

Used By:
    - report.output.rasterizer: Drawing text
    - report.controller: Measuring text during layout
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import ImageFont

from smartgrade.report.layout.models import FontSpec, FontWeight

logger = logging.getLogger(__name__)

PillowFont = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# CJK families first so Chinese sidebars render; Latin fallbacks after
_CJK_REGULAR = (
    "NotoSansCJK-Regular.ttc",
    "NotoSansSC-Regular.otf",
    "msyh.ttc",                 # Microsoft YaHei (Windows)
    "PingFang.ttc",             # macOS
    "wqy-microhei.ttc",         # WenQuanYi (Linux)
    "Arial Unicode.ttf",
)
_CJK_BOLD = (
    "NotoSansCJK-Bold.ttc",
    "NotoSansSC-Bold.otf",
    "msyhbd.ttc",
)

FONT_CANDIDATES: dict[FontWeight, Tuple[str, ...]] = {
    FontWeight.REGULAR: _CJK_REGULAR + ("arial.ttf", "Arial.ttf", "DejaVuSans.ttf"),
    FontWeight.BOLD: _CJK_BOLD + _CJK_REGULAR + (
        "arialbd.ttf",
        "Arial Bold.ttf",
        "DejaVuSans-Bold.ttf",
    ),
    # No CJK family ships an italic; upright CJK beats Latin-only italics
    FontWeight.ITALIC: _CJK_REGULAR + (
        "ariali.ttf",
        "Arial Italic.ttf",
        "DejaVuSans-Oblique.ttf",
    ),
}


@lru_cache(maxsize=64)
def load_font(
    size: int,
    weight: FontWeight = FontWeight.REGULAR,
    font_path: Optional[Path] = None,
) -> PillowFont:
    """
    Load a font for sidebar text.

    Args:
        size: Font size in pixels
        weight: Regular, bold or italic
        font_path: Explicit font file tried before the search list

    Returns:
        Font object (TrueType when any candidate is installed)
    """
    candidates = FONT_CANDIDATES[FontWeight(weight)]
    if font_path is not None:
        candidates = (str(font_path),) + candidates

    for font_name in candidates:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.warning(f"Could not load TrueType font for {weight} {size}px, using default")
    return ImageFont.load_default(size=size)


def font_for(spec: FontSpec, font_path: Optional[Path] = None) -> PillowFont:
    return load_font(spec.size, spec.weight, font_path)


class PillowTextMeasurer:
    """
    Measure text with the same fonts the rasterizer draws with.

    Layout and drawing must agree on widths, otherwise wrapped lines
    overrun the sidebar.

    Example:
        >>> measurer = PillowTextMeasurer()
        >>> measurer.measure("Ans: 42", FontSpec(15)) > 0
        True
    """

    def __init__(self, font_path: Optional[Path] = None) -> None:
        self.font_path = font_path

    def measure(self, text: str, font: FontSpec) -> float:
        if not text:
            return 0.0
        return float(font_for(font, self.font_path).getlength(text))
