"""
Module: builder.output

Purpose:
    Presentation layer: turns LayoutResults into PDF files.

Key Functions:
    - render_to_pdf(): Render a layout to PDF
    - to_paragraph_markup(): Interpret html-fragment markup for ReportLab

Dependencies:
    - reportlab: PDF generation

Used By:
    - builder.controller: Pipeline orchestration
"""

from .renderer import render_to_pdf, to_paragraph_markup

__all__ = [
    "render_to_pdf",
    "to_paragraph_markup",
]
