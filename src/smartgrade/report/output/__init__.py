"""
Module: report.output

Purpose:
    Pixel and document output for grading reports.
    Rasterizes page plans with Pillow and assembles the PDF with ReportLab.

Key Functions:
    - rasterize(): Paint one PagePlan
    - render_document(): Assemble surfaces into PDF bytes
    - suggest_filename(): Report filename for a student

Dependencies:
    - PIL: Drawing and fonts
    - reportlab: PDF generation

Used By:
    - report.controller: Pipeline orchestration
"""

from .fonts import PillowTextMeasurer, load_font
from .rasterizer import rasterize
from .renderer import render_document, suggest_filename, write_document

__all__ = [
    "PillowTextMeasurer",
    "load_font",
    "rasterize",
    "render_document",
    "suggest_filename",
    "write_document",
]
