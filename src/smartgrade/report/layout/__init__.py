"""
Module: report.layout

Purpose:
    Pure page layout for grading reports.
    Turns a page's marks into an ordered list of draw commands; no pixels
    are touched here.

Key Functions:
    - compose_page(): Main entry point for one report page
    - wrap_text(): Greedy character-wise wrapping

Key Classes:
    - ReportConfig: Compositor configuration
    - PagePlan: Single page layout plan

Used By:
    - report.controller
    - report.output.rasterizer
"""

from .config import OverflowPolicy, ReportConfig
from .models import (
    DrawCommand,
    DrawDashedLine,
    DrawGlyph,
    DrawImage,
    DrawWrappedText,
    FillRect,
    FontSpec,
    FontWeight,
    GlyphKind,
    PagePlan,
)
from .wrapping import TextMeasurer, layout_text, wrap_text
from .composer import compose_page, sort_marks

__all__ = [
    # Config
    "OverflowPolicy",
    "ReportConfig",
    # Models
    "DrawCommand",
    "DrawDashedLine",
    "DrawGlyph",
    "DrawImage",
    "DrawWrappedText",
    "FillRect",
    "FontSpec",
    "FontWeight",
    "GlyphKind",
    "PagePlan",
    # Functions
    "TextMeasurer",
    "compose_page",
    "layout_text",
    "sort_marks",
    "wrap_text",
]
