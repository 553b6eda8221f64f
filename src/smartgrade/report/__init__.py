"""
SmartGrade Report Package

Composites graded pages with a feedback sidebar and assembles them into
a PDF.

**DESIGN NOTES:**

1. **Layout is Pure**
   - compose_page() returns draw commands only
   - Pixels are touched once, in the rasterizer

2. **Everything Scales With the Image**
   - Sidebar, fonts and glyphs are ratios of the image width
   - 1 px = 1 pt in the PDF, so pages keep their native size

3. **Overflow is Explicit**
   - Sidebar content taller than the page extends it by default
   - Clipping is opt-in and always reported as a warning
"""

from .controller import ReportError, ReportResult, build_report
from .layout import OverflowPolicy, ReportConfig, compose_page
from .output import rasterize, render_document, suggest_filename, write_document

__all__ = [
    "ReportError",
    "ReportResult",
    "build_report",
    "OverflowPolicy",
    "ReportConfig",
    "compose_page",
    "rasterize",
    "render_document",
    "suggest_filename",
    "write_document",
]
