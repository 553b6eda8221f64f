"""
Module: report.layout.composer

Purpose:
    Compute the layout of one report page: the page image at the origin
    plus a right-hand sidebar listing every mark's feedback, linked to the
    mark by a dashed connector.

Key Functions:
    - compose_page(): Marks + image size → PagePlan
    - sort_marks(): Top-to-bottom order used for the sidebar flow

Algorithm:
    1. Surface = image width + floor(0.45 × image width), image height
    2. Background, image, sidebar fill and divider
    3. Sidebar title, then for each mark sorted by y (stable):
       glyph on the image → dashed connector to the write cursor →
       status dot → question / answer / correct answer / note blocks,
       each wrapped character-wise and advancing the cursor
    4. Inter-item spacing after each mark
    5. If the cursor passed the image height, EXTEND grows the surface,
       CLIP keeps it and records a warning

Dependencies:
    - report.layout.wrapping: Greedy wrapping
    - core.utils: Geometry, localized labels

Used By:
    - report.controller: Per-page compositing
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from smartgrade.core.models import Language, Mark
from smartgrade.core.utils.geometry import percent_to_pixel
from smartgrade.core.utils.localization import REPORT_TITLE, labels_for

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
from .wrapping import TextMeasurer, layout_text

logger = logging.getLogger(__name__)


def sort_marks(marks: Iterable[Mark]) -> List[Mark]:
    """Marks ordered top-to-bottom; ties keep their original order."""
    return sorted(marks, key=lambda m: m.y)


class _SidebarWriter:
    """Write cursor for the sidebar; every block advances ``y``."""

    def __init__(self, x: float, y: float, max_width: float, measurer: TextMeasurer) -> None:
        self.x = x
        self.y = y
        self.max_width = max_width
        self.measurer = measurer
        self.commands: List[DrawCommand] = []
        self.bottom = y

    def write(self, text: str, font: FontSpec, line_height: float, color: str) -> None:
        lines, next_y = layout_text(
            text,
            self.y,
            self.max_width,
            line_height,
            lambda s: self.measurer.measure(s, font),
        )
        self.commands.append(
            DrawWrappedText(
                lines=tuple(lines),
                origin=(self.x, self.y),
                line_height=line_height,
                font=font,
                color=color,
            )
        )
        self.y = next_y
        self.bottom = max(self.bottom, next_y)

    def skip(self, amount: float) -> None:
        self.y += amount


def compose_page(
    page_index: int,
    image_size: Tuple[int, int],
    marks: Sequence[Mark],
    config: Optional[ReportConfig],
    measurer: TextMeasurer,
    language: Optional[Language] = None,
) -> PagePlan:
    """
    Lay out one report page.

    Pure: no pixels are touched. The returned commands are painted in
    order by report.output.rasterizer.

    Args:
        page_index: Index of the page (ingestion order)
        image_size: (width, height) of the corrected page image
        marks: Marks of this page (any order)
        config: Compositor configuration (None for defaults)
        measurer: Text width oracle used for wrapping
        language: Page language, used for sidebar prefixes

    Returns:
        PagePlan for the page

    Raises:
        ValueError: If the image size is not positive

    Example:
        >>> plan = compose_page(0, (1000, 1400), marks, None, measurer)
        >>> plan.width
        1450
    """
    config = config or ReportConfig()
    image_width, image_height = image_size
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image size must be positive: {image_size}")

    labels = labels_for(language)
    sidebar_width = config.sidebar_width(image_width)
    total_width = image_width + sidebar_width
    sidebar_x = image_width + config.sidebar_padding

    base_size = config.base_font_size(image_width)
    line_height = base_size * config.line_height_factor
    note_font = FontSpec(max(1, int(math.floor(base_size * config.note_scale))))
    note_line_height = line_height * config.note_scale

    glyph_size = image_width * config.glyph_ratio
    glyph_stroke = max(config.min_glyph_stroke, image_width * config.glyph_stroke_ratio)

    writer = _SidebarWriter(sidebar_x, config.sidebar_top, config.content_width(image_width), measurer)

    title_commands: List[DrawCommand] = []
    if config.show_title:
        title_size = config.title_font_size(image_width)
        writer.write(REPORT_TITLE, FontSpec(title_size, FontWeight.BOLD), title_size, config.title_color)
        writer.y = config.sidebar_top + config.title_spacing
        title_commands, writer.commands = writer.commands, []

    ordered = sort_marks(marks)
    mark_commands: List[DrawCommand] = []

    for mark in ordered:
        mark_x, mark_y = percent_to_pixel(mark.x, mark.y, image_width, image_height)
        color = config.correct_color if mark.is_correct else config.incorrect_color

        # On-image glyph and connector to the current write position
        mark_commands.append(
            DrawGlyph(
                kind=GlyphKind.CHECK if mark.is_correct else GlyphKind.CROSS,
                center=(mark_x, mark_y),
                size=glyph_size,
                color=color,
                stroke=glyph_stroke,
            )
        )
        mark_commands.append(
            DrawDashedLine(
                start=(mark_x + glyph_size, mark_y),
                end=(image_width, writer.y + base_size),
                color=config.connector_color,
                width=config.connector_width,
                dash=config.connector_dash,
            )
        )
        mark_commands.append(
            DrawGlyph(
                kind=GlyphKind.DOT,
                center=(sidebar_x - config.badge_offset, writer.y + base_size / 2),
                size=config.badge_radius,
                color=color,
            )
        )

        # Sidebar blocks
        writer.write(
            mark.question or labels.question_placeholder,
            FontSpec(base_size, FontWeight.BOLD),
            line_height,
            config.question_color,
        )
        writer.skip(config.block_gap)
        writer.write(
            f"{labels.answer_prefix}{mark.student_answer or ''}",
            FontSpec(base_size),
            line_height,
            config.answer_color,
        )
        if not mark.is_correct and mark.correct_answer:
            writer.skip(config.block_gap)
            writer.write(
                f"{labels.correct_answer_prefix}{mark.correct_answer}",
                FontSpec(base_size, FontWeight.ITALIC),
                line_height,
                config.correct_answer_color,
            )
        if mark.explanation:
            writer.skip(config.block_gap)
            writer.write(
                f"{labels.note_prefix}{mark.explanation}",
                note_font,
                note_line_height,
                config.note_color,
            )
        mark_commands.extend(writer.commands)
        writer.commands = []
        writer.skip(line_height * config.item_spacing_lines)

        logger.debug(f"Page {page_index}: mark {mark.id} at ({mark_x:.0f}, {mark_y:.0f}), cursor → {writer.y:.0f}")

    content_bottom = writer.bottom
    overflowed = content_bottom > image_height
    height = image_height
    warnings: List[str] = []
    if overflowed:
        if config.overflow is OverflowPolicy.EXTEND:
            height = int(math.ceil(content_bottom + config.bottom_padding))
            message = (
                f"Page {page_index + 1}: sidebar content ({content_bottom:.0f}px) exceeds image "
                f"height ({image_height}px); extended page to {height}px"
            )
        else:
            message = (
                f"Page {page_index + 1}: sidebar content ({content_bottom:.0f}px) exceeds image "
                f"height ({image_height}px); content below the page edge is clipped"
            )
        logger.warning(message)
        warnings.append(message)

    background: List[DrawCommand] = [
        FillRect((0, 0, total_width, height), config.background_color),
        DrawImage((0, 0)),
        FillRect((image_width, 0, total_width, height), config.sidebar_color),
        FillRect(
            (image_width - config.divider_width / 2, 0, image_width + config.divider_width / 2, height),
            config.divider_color,
        ),
    ]

    return PagePlan(
        index=page_index,
        width=total_width,
        height=height,
        image_size=(image_width, image_height),
        commands=tuple(background + title_commands + mark_commands),
        content_bottom=content_bottom,
        overflowed=overflowed,
        warnings=warnings,
    )
