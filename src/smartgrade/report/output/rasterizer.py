"""
Module: report.output.rasterizer

Purpose:
    Paint a PagePlan onto a Pillow RGB surface.
    One call renders exactly one page; commands are painted in the order
    the composer emitted them.

Key Functions:
    - rasterize(): PagePlan + page image → PIL image

Dependencies:
    - PIL: Drawing
    - report.output.fonts: Font resolution

Used By:
    - report.controller: Per-page compositing
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from smartgrade.report.layout.config import ReportConfig
from smartgrade.report.layout.models import (
    DrawDashedLine,
    DrawGlyph,
    DrawImage,
    DrawWrappedText,
    FillRect,
    GlyphKind,
    PagePlan,
)

from .fonts import font_for

logger = logging.getLogger(__name__)


def rasterize(
    plan: PagePlan,
    image: Image.Image,
    config: Optional[ReportConfig] = None,
) -> Image.Image:
    """
    Render a page plan to an RGB image.

    Args:
        plan: Layout from compose_page()
        image: Corrected page image (size must equal plan.image_size)
        config: Used for the font override only

    Returns:
        New RGB image of size (plan.width, plan.height)

    Raises:
        ValueError: If the image does not match the plan
    """
    if image.size != tuple(plan.image_size):
        raise ValueError(f"Image size {image.size} does not match plan {plan.image_size}")

    config = config or ReportConfig()
    surface = Image.new("RGB", (plan.width, plan.height), config.background_color)
    draw = ImageDraw.Draw(surface)

    for command in plan.commands:
        if isinstance(command, FillRect):
            _fill_rect(draw, command)
        elif isinstance(command, DrawImage):
            source = image if image.mode == "RGB" else image.convert("RGB")
            surface.paste(source, (int(command.origin[0]), int(command.origin[1])))
        elif isinstance(command, DrawGlyph):
            _draw_glyph(draw, command)
        elif isinstance(command, DrawDashedLine):
            _draw_dashed_line(draw, command)
        elif isinstance(command, DrawWrappedText):
            _draw_text(draw, command, config)
        else:
            raise TypeError(f"Unknown draw command: {type(command).__name__}")

    logger.debug(f"Rasterized page {plan.index}: {plan.width}x{plan.height}, {len(plan.commands)} commands")
    return surface


def _fill_rect(draw: ImageDraw.ImageDraw, command: FillRect) -> None:
    left, top, right, bottom = command.box
    # Pillow rectangles include the far edge
    draw.rectangle(
        [round(left), round(top), max(round(left), round(right) - 1), max(round(top), round(bottom) - 1)],
        fill=command.color,
    )


def _draw_glyph(draw: ImageDraw.ImageDraw, command: DrawGlyph) -> None:
    cx, cy = command.center
    s = command.size
    width = max(1, round(command.stroke))

    if command.kind is GlyphKind.CHECK:
        points = [
            (cx - s / 2, cy),
            (cx - s / 10, cy + s / 2),
            (cx + s / 2, cy - s),
        ]
        draw.line(points, fill=command.color, width=width, joint="curve")
    elif command.kind is GlyphKind.CROSS:
        h = s * 0.4
        draw.line([(cx - h, cy - h), (cx + h, cy + h)], fill=command.color, width=width)
        draw.line([(cx + h, cy - h), (cx - h, cy + h)], fill=command.color, width=width)
    else:
        draw.ellipse([cx - s, cy - s, cx + s, cy + s], fill=command.color)


def _draw_dashed_line(draw: ImageDraw.ImageDraw, command: DrawDashedLine) -> None:
    (x0, y0), (x1, y1) = command.start, command.end
    length = math.hypot(x1 - x0, y1 - y0)
    if length == 0 or command.dash <= 0:
        return
    ux, uy = (x1 - x0) / length, (y1 - y0) / length
    width = max(1, round(command.width))

    # Equal dash and gap
    pos = 0.0
    while pos < length:
        end = min(pos + command.dash, length)
        draw.line(
            [(x0 + ux * pos, y0 + uy * pos), (x0 + ux * end, y0 + uy * end)],
            fill=command.color,
            width=width,
        )
        pos += 2 * command.dash


def _draw_text(draw: ImageDraw.ImageDraw, command: DrawWrappedText, config: ReportConfig) -> None:
    font = font_for(command.font, config.font_path)
    x, y = command.origin
    for i, line in enumerate(command.lines):
        if not line:
            continue
        baseline = y + i * command.line_height
        if isinstance(font, ImageFont.FreeTypeFont):
            draw.text((x, baseline), line, fill=command.color, font=font, anchor="ls")
        else:
            # Bitmap fonts have no anchors; approximate the baseline
            draw.text((x, baseline - command.font.size), line, fill=command.color, font=font)
