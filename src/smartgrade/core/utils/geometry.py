"""
Percentage-space geometry helpers.

Marks store positions as percentages (0-100) of the page image. These
helpers convert at the boundaries: user clicks arrive in pixels, layout
needs pixels, everything in between stays in percent.
"""

from __future__ import annotations

from typing import Tuple

PERCENT_MIN = 0.0
PERCENT_MAX = 100.0


def clamp_percent(value: float) -> float:
    """Clamp a percentage into [0, 100]."""
    return max(PERCENT_MIN, min(PERCENT_MAX, float(value)))


def clamp_point(x: float, y: float) -> Tuple[float, float]:
    return clamp_percent(x), clamp_percent(y)


def pixel_to_percent(
    px: float,
    py: float,
    width: float,
    height: float,
) -> Tuple[float, float]:
    """
    Convert a pixel position on a displayed image to clamped percentages.

    Args:
        px: X offset from the image's left edge in pixels
        py: Y offset from the image's top edge in pixels
        width: Displayed image width in pixels
        height: Displayed image height in pixels

    Returns:
        (x, y) percentages, each clamped to [0, 100]

    Raises:
        ValueError: If width or height is not positive

    Example:
        >>> pixel_to_percent(50, 300, 200, 200)
        (25.0, 100.0)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive: {width}x{height}")
    return clamp_point(px / width * 100.0, py / height * 100.0)


def percent_to_pixel(
    x: float,
    y: float,
    width: float,
    height: float,
) -> Tuple[float, float]:
    """Convert percentages to a pixel position on an image of the given size."""
    return x / 100.0 * width, y / 100.0 * height
