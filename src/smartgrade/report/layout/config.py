"""
Module: report.layout.config

Purpose:
    Configuration for the report compositor.
    Defines sidebar proportions, typography ratios, colours and the
    overflow policy. All sizes scale with the page image width so a
    report looks the same for any source resolution.

Key Classes:
    - ReportConfig: Immutable compositor configuration
    - OverflowPolicy: What to do when sidebar text outgrows the page

Dependencies:
    - dataclasses (std)

Used By:
    - report.layout.composer: Layout computation
    - report.output.rasterizer: Font override
    - report.output.renderer: JPEG quality
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class OverflowPolicy(str, Enum):
    """
    Handling of sidebar content taller than the page image.

    EXTEND grows the surface height to fit the content (default).
    CLIP keeps the image height and reports the overflow as a warning.
    """

    EXTEND = "extend"
    CLIP = "clip"


@dataclass(frozen=True)
class ReportConfig:
    """
    Configuration for report compositing (immutable).

    Attributes:
        sidebar_ratio: Sidebar width as a fraction of image width
        sidebar_padding: Horizontal padding inside the sidebar (px)
        sidebar_top: Baseline of the sidebar title (px)
        title_spacing: Cursor advance after the title (px)
        title_font_ratio: Title font size / image width
        base_font_ratio: Body font size / image width
        line_height_factor: Line height / body font size
        note_scale: Explanation font and line height / body values
        block_gap: Gap before each block after the first (px)
        item_spacing_lines: Gap between marks, in line heights
        glyph_ratio: Glyph size / image width
        glyph_stroke_ratio: Glyph stroke / image width
        min_glyph_stroke: Minimum glyph stroke (px)
        connector_width: Dashed connector width (px)
        connector_dash: Dash and gap length (px)
        divider_width: Sidebar divider width (px)
        badge_radius: Status dot radius (px)
        badge_offset: Status dot distance left of the text (px)
        overflow: Overflow policy
        bottom_padding: Space kept below content when extending (px)
        show_title: Draw the sidebar title
        jpeg_quality: Quality of page rasters embedded in the PDF
        font_path: TrueType/OpenType font overriding the search list

    Example:
        >>> config = ReportConfig()
        >>> config.sidebar_width(1000)
        450
    """

    # Geometry
    sidebar_ratio: float = 0.45
    sidebar_padding: int = 40
    sidebar_top: int = 60
    title_spacing: int = 60

    # Typography
    title_font_ratio: float = 0.025
    base_font_ratio: float = 0.015
    line_height_factor: float = 1.5
    note_scale: float = 0.9
    block_gap: int = 5
    item_spacing_lines: float = 1.5

    # Glyphs and connectors
    glyph_ratio: float = 0.03
    glyph_stroke_ratio: float = 0.005
    min_glyph_stroke: int = 3
    connector_width: int = 2
    connector_dash: int = 10
    divider_width: int = 2
    badge_radius: int = 6
    badge_offset: int = 15

    # Colours
    background_color: str = "#ffffff"
    sidebar_color: str = "#f8f9fa"
    divider_color: str = "#e5e7eb"
    title_color: str = "#1f2937"
    correct_color: str = "#22c55e"
    incorrect_color: str = "#ef4444"
    connector_color: str = "#d1d5db"
    question_color: str = "#6b7280"
    answer_color: str = "#111827"
    correct_answer_color: str = "#15803d"
    note_color: str = "#4b5563"

    # Behavior
    overflow: OverflowPolicy = OverflowPolicy.EXTEND
    bottom_padding: int = 40
    show_title: bool = True
    jpeg_quality: int = 85
    font_path: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.sidebar_ratio <= 0:
            raise ValueError(f"sidebar_ratio must be positive: {self.sidebar_ratio}")
        if self.base_font_ratio <= 0 or self.title_font_ratio <= 0:
            raise ValueError("font ratios must be positive")
        if self.line_height_factor <= 0:
            raise ValueError(f"line_height_factor must be positive: {self.line_height_factor}")
        if not 0 < self.note_scale <= 1:
            raise ValueError(f"note_scale must be within (0, 1]: {self.note_scale}")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be within [1, 100]: {self.jpeg_quality}")
        if not isinstance(self.overflow, OverflowPolicy):
            object.__setattr__(self, "overflow", OverflowPolicy(self.overflow))

    def sidebar_width(self, image_width: int) -> int:
        """Sidebar width for an image (floored to whole pixels)."""
        return int(math.floor(image_width * self.sidebar_ratio))

    def content_width(self, image_width: int) -> int:
        """Width available for sidebar text."""
        return self.sidebar_width(image_width) - 2 * self.sidebar_padding

    def base_font_size(self, image_width: int) -> int:
        return max(1, int(math.floor(image_width * self.base_font_ratio)))

    def title_font_size(self, image_width: int) -> int:
        return max(1, int(math.floor(image_width * self.title_font_ratio)))
