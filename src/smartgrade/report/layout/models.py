"""
Module: report.layout.models

Purpose:
    Draw commands and page plans for the report compositor.
    Layout produces an ordered tuple of immutable commands; the
    rasterizer consumes them. Keeping the two apart makes layout pure
    and testable without touching pixels.

Key Classes:
    - FontSpec: Size + weight of a text run
    - FillRect, DrawImage, DrawGlyph, DrawDashedLine, DrawWrappedText:
      The draw command set
    - PagePlan: Complete layout for one report page

Dependencies:
    - dataclasses (std)

Used By:
    - report.layout.composer: Creates PagePlans
    - report.output.rasterizer: Draws PagePlans
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union

Point = Tuple[float, float]


class FontWeight(str, Enum):
    REGULAR = "regular"
    BOLD = "bold"
    ITALIC = "italic"


class GlyphKind(str, Enum):
    CHECK = "check"
    CROSS = "cross"
    DOT = "dot"


@dataclass(frozen=True)
class FontSpec:
    """Font size in pixels and weight."""

    size: int
    weight: FontWeight = FontWeight.REGULAR


@dataclass(frozen=True)
class FillRect:
    """Solid rectangle; box is (left, top, right, bottom), right/bottom exclusive."""

    box: Tuple[float, float, float, float]
    color: str


@dataclass(frozen=True)
class DrawImage:
    """The page image, drawn unscaled with its top-left at ``origin``."""

    origin: Point = (0, 0)


@dataclass(frozen=True)
class DrawGlyph:
    """
    Correctness glyph centred on ``center``.

    For CHECK/CROSS ``size`` is the mark size and ``stroke`` the line
    width; for DOT ``size`` is the radius and the dot is filled.
    """

    kind: GlyphKind
    center: Point
    size: float
    color: str
    stroke: float = 0


@dataclass(frozen=True)
class DrawDashedLine:
    start: Point
    end: Point
    color: str
    width: float
    dash: float


@dataclass(frozen=True)
class DrawWrappedText:
    """
    Pre-wrapped text block.

    ``origin`` is the left edge and the BASELINE of the first line; each
    following line sits ``line_height`` lower.
    """

    lines: Tuple[str, ...]
    origin: Point
    line_height: float
    font: FontSpec
    color: str

    @property
    def bottom(self) -> float:
        """Cursor position after this block."""
        return self.origin[1] + self.line_height * len(self.lines)


DrawCommand = Union[FillRect, DrawImage, DrawGlyph, DrawDashedLine, DrawWrappedText]


@dataclass(frozen=True)
class PagePlan:
    """
    Complete layout for one report page.

    Attributes:
        index: Page number (0-indexed, ingestion order)
        width: Surface width (image width + sidebar width)
        height: Surface height (image height, or more when extended)
        image_size: Size of the page image drawn at the origin
        commands: Draw commands in painting order
        content_bottom: Lowest sidebar cursor position reached
        overflowed: True if content passed the image height
        warnings: Human-readable layout warnings

    Example:
        >>> plan.width, plan.height
        (1450, 1000)
    """

    index: int
    width: int
    height: int
    image_size: Tuple[int, int]
    commands: Tuple[DrawCommand, ...]
    content_bottom: float
    overflowed: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def sidebar_left(self) -> int:
        return self.image_size[0]

    @property
    def is_landscape(self) -> bool:
        return self.width > self.height

    def commands_of(self, kind: type) -> list:
        """Commands of one type, in painting order."""
        return [c for c in self.commands if isinstance(c, kind)]
