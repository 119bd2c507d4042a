"""
Module: builder.output.renderer

Purpose:
    Reference presentation layer: render a LayoutResult to PDF using
    ReportLab. Each PagePlan becomes one landscape page with a repeated
    header and two columns; every section is drawn top-down in its column.

    This is the only component that interprets html-fragment markup.
    Nothing is re-flowed: a column the packer over-filled is drawn past
    its bottom edge.

Key Functions:
    - render_to_pdf(): Main rendering function
    - to_paragraph_markup(): html fragment -> ReportLab paragraph markup

Dependencies:
    - reportlab: PDF generation, CID font for Korean text
    - bs4: Parsing html fragments for markup conversion
    - builder.layout.models: LayoutResult, PagePlan

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from reportlab.lib import colors
from reportlab.lib.units import cm
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas
from reportlab.platypus import Flowable, Paragraph, Spacer, Table, TableStyle

from quizprint import __version__
from quizprint.builder.layout.config import LayoutConfig
from quizprint.builder.layout.models import LayoutResult, PagePlan
from quizprint.builder.normalize import PrintMode
from quizprint.core.models import NormalizedItem, Section, SectionKind

logger = logging.getLogger(__name__)

# Built-in Korean CID font, no font file needed
FONT_NAME = "HYSMyeongJo-Medium"

BODY_FONT_SIZE = 8.5
TITLE_FONT_SIZE = 10.5
HEADER_FONT_SIZE = 9
FOOTER_FONT_SIZE = 6
SECTION_GAP_PT = 3
ITEM_GAP_PT = 8

MODE_LABELS = {
    PrintMode.PROBLEM: "문제지",
    PrintMode.ANSWER: "정답지",
}


def _register_fonts() -> None:
    """Register the CID font once per process."""
    if FONT_NAME in pdfmetrics.getRegisteredFontNames():
        return
    pdfmetrics.registerFont(UnicodeCIDFont(FONT_NAME))
    # CID fonts have no bold face; map every style to the same font
    pdfmetrics.registerFontFamily(
        FONT_NAME, normal=FONT_NAME, bold=FONT_NAME, italic=FONT_NAME, boldItalic=FONT_NAME
    )


def _build_styles() -> dict[str, ParagraphStyle]:
    base = ParagraphStyle(
        "body",
        fontName=FONT_NAME,
        fontSize=BODY_FONT_SIZE,
        leading=BODY_FONT_SIZE * 1.4,
    )
    return {
        "body": base,
        "title": ParagraphStyle(
            "title", parent=base, fontSize=TITLE_FONT_SIZE, leading=TITLE_FONT_SIZE * 1.3,
            textColor=colors.HexColor("#1a237e"),
        ),
        "instruction": ParagraphStyle("instruction", parent=base, textColor=colors.HexColor("#333333")),
        "option": ParagraphStyle("option", parent=base, leftIndent=6),
        "correct": ParagraphStyle("correct", parent=base, leftIndent=6, textColor=colors.HexColor("#1976d2")),
        "translation": ParagraphStyle(
            "translation", parent=base, fontSize=BODY_FONT_SIZE - 0.5,
            textColor=colors.HexColor("#555555"),
        ),
        "option_translation": ParagraphStyle(
            "option_translation", parent=base, fontSize=BODY_FONT_SIZE - 1,
            leftIndent=16, textColor=colors.HexColor("#666666"),
        ),
        "answer": ParagraphStyle("answer", parent=base, textColor=colors.HexColor("#c62828")),
        "cell": ParagraphStyle("cell", parent=base, fontSize=BODY_FONT_SIZE - 0.5),
    }


# ─────────────────────────────────────────────────────────────────────────────
# Markup conversion
# ─────────────────────────────────────────────────────────────────────────────


_DIRECT_TAGS = {"b": "b", "strong": "b", "i": "i", "em": "i", "u": "u"}
_BLOCK_TAGS = {"p", "div"}


def _tag_markup(node: Tag) -> tuple[str, str]:
    """Opening and closing paragraph markup for one element."""
    tag = node.name.lower()
    if tag in _DIRECT_TAGS:
        name = _DIRECT_TAGS[tag]
        return f"<{name}>", f"</{name}>"
    if tag == "ins":
        return "<u><b>", "</b></u>"
    if tag == "span" and any("highlight" in c for c in node.get("class") or []):
        return "<b>", "</b>"
    return "", ""


def _walk(node, parts: List[str]) -> None:
    if isinstance(node, Comment):
        return
    if isinstance(node, NavigableString):
        parts.append(html.escape(str(node), quote=False))
        return

    tag = node.name.lower()
    if tag == "br":
        parts.append("<br/>")
        return

    opening, closing = _tag_markup(node)
    parts.append(opening)
    for child in node.children:
        _walk(child, parts)
    parts.append(closing)
    if tag in _BLOCK_TAGS:
        parts.append("<br/>")


def to_paragraph_markup(fragment: str) -> str:
    """
    Convert an html fragment into ReportLab paragraph markup.

    `<ins>` becomes bold underline, highlight spans become bold, line
    breaks are kept and any other tag is dropped (its text is kept).
    Unbalanced input is closed by the parser.

    Example:
        >>> to_paragraph_markup('I ( <ins class="blank-answer">like</ins> ) it.')
        'I ( <u><b>like</b></u> ) it.'
    """
    soup = BeautifulSoup(fragment or "", "html.parser")
    parts: List[str] = []
    for child in soup.children:
        _walk(child, parts)
    return "".join(parts)


def _plain(text: str) -> str:
    return html.escape(text or "", quote=False).replace("\n", "<br/>")


# ─────────────────────────────────────────────────────────────────────────────
# Section -> flowables
# ─────────────────────────────────────────────────────────────────────────────


def _section_flowables(
    section: Section,
    styles: dict[str, ParagraphStyle],
    config: LayoutConfig,
    width_pt: float,
) -> List[Flowable]:
    kind = section.kind

    if kind is SectionKind.TITLE:
        return [Paragraph(f"<b>{_plain(section.text)}</b>", styles["title"])]

    if kind is SectionKind.INSTRUCTION:
        return [Paragraph(_plain(section.text), styles["instruction"])]

    if kind in (SectionKind.PARAGRAPH, SectionKind.TEXT):
        label = f"<b>{_plain(section.label)}</b> " if section.label else ""
        flowables: List[Flowable] = [Paragraph(label + _plain(section.text), styles["body"])]
        if section.secondary_text:
            flowables.append(Paragraph(_plain(section.secondary_text), styles["translation"]))
        return flowables

    if kind is SectionKind.HTML:
        return [Paragraph(to_paragraph_markup(section.html), styles["body"])]

    if kind is SectionKind.OPTIONS:
        flowables = []
        for option in section.options:
            prefix = f"{_plain(option.label)} " if option.label else ""
            style = styles["correct"] if option.is_correct else styles["option"]
            text = prefix + _plain(option.text)
            flowables.append(Paragraph(f"<b>{text}</b>" if option.is_correct else text, style))
            if option.translation:
                flowables.append(Paragraph(_plain(option.translation), styles["option_translation"]))
        return flowables

    if kind is SectionKind.TABLE:
        data = []
        if section.headers:
            data.append([Paragraph(f"<b>{_plain(h)}</b>", styles["cell"]) for h in section.headers])
        data.extend([Paragraph(_plain(cell), styles["cell"]) for cell in row] for row in section.rows)
        if not data:
            return []
        column_count = max(len(row) for row in data)
        table = Table(data, colWidths=[width_pt / column_count] * column_count)
        table.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#999999")),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#eeeeee") if section.headers else colors.white),
        ]))
        return [table]

    if kind is SectionKind.ANSWER:
        flowables = [Paragraph(f"<b>{_plain(item)}</b>", styles["answer"]) for item in section.items]
        if section.description:
            flowables.append(Paragraph(_plain(section.description), styles["answer"]))
        return flowables

    if kind is SectionKind.TRANSLATION:
        return [Paragraph(_plain(section.text), styles["translation"])]

    if kind is SectionKind.LIST:
        return [Paragraph(f"• {_plain(item)}", styles["body"]) for item in section.items]

    return [Spacer(1, config.spacer_height * cm)]


def _draw_column(
    c: canvas.Canvas,
    items: tuple[NormalizedItem, ...],
    x_pt: float,
    top_pt: float,
    width_pt: float,
    styles: dict[str, ParagraphStyle],
    config: LayoutConfig,
) -> float:
    """Draw chunks top-down from `top_pt`; returns the final y position."""
    y = top_pt
    for item in items:
        for section in item.sections:
            for flowable in _section_flowables(section, styles, config, width_pt):
                _, height = flowable.wrapOn(c, width_pt, y)
                flowable.drawOn(c, x_pt, y - height)
                y -= height
            y -= SECTION_GAP_PT
        y -= ITEM_GAP_PT
    return y


def _draw_header(
    c: canvas.Canvas,
    page: PagePlan,
    config: LayoutConfig,
    header_text: str,
    mode: PrintMode,
) -> None:
    page_width_pt = config.page_width * cm
    page_height_pt = config.page_height * cm
    left = config.margin_horizontal * cm
    right = page_width_pt - config.margin_horizontal * cm
    baseline = page_height_pt - config.header_height * cm * 0.6

    c.saveState()
    c.setFont(FONT_NAME, HEADER_FONT_SIZE)
    c.drawString(left, baseline, header_text)
    c.drawRightString(right, baseline, f"{MODE_LABELS[mode]}  {page.index + 1}")
    c.setStrokeColor(colors.HexColor("#999999"))
    c.setLineWidth(0.5)
    rule = page_height_pt - config.header_height * cm * 0.85
    c.line(left, rule, right, rule)
    c.restoreState()


def _draw_footer(c: canvas.Canvas, config: LayoutConfig) -> None:
    c.saveState()
    c.setFont(FONT_NAME, FOOTER_FONT_SIZE)
    c.setFillColorRGB(0.4, 0.4, 0.4)
    c.drawCentredString(config.page_width * cm / 2, 10, f"quizprint v{__version__}")
    c.restoreState()


def _render_page(
    c: canvas.Canvas,
    page: PagePlan,
    config: LayoutConfig,
    styles: dict[str, ParagraphStyle],
    header_text: str,
    mode: PrintMode,
    show_footer: bool,
) -> None:
    _draw_header(c, page, config, header_text, mode)

    width_pt = config.column_width * cm
    top_pt = (config.page_height - config.content_top) * cm
    left_x = config.margin_horizontal * cm
    right_x = left_x + width_pt + config.column_gap * cm

    bottom_pt = config.content_bottom_padding * cm
    for x_pt, column in ((left_x, page.left), (right_x, page.right)):
        end = _draw_column(c, column.items, x_pt, top_pt, width_pt, styles, config)
        if end < bottom_pt:
            logger.debug(f"Page {page.index}: column at x={x_pt:.0f} drawn past bottom edge")

    if show_footer:
        _draw_footer(c, config)


def render_to_pdf(
    layout: LayoutResult,
    output_path: Path,
    *,
    config: Optional[LayoutConfig] = None,
    header_text: str = "",
    mode: PrintMode | str = PrintMode.PROBLEM,
    show_footer: bool = True,
) -> None:
    """
    Render layout result to PDF file.

    Args:
        layout: Layout result from the packer
        output_path: Path to write PDF
        config: Layout configuration (page geometry); defaults when None
        header_text: Text repeated in every page header
        mode: Problem or answer pass (shown in the header)
        show_footer: Draw the version footer

    Raises:
        OSError: If PDF cannot be written

    Example:
        >>> render_to_pdf(layout, Path("output/problem.pdf"), header_text="3학년 1반")
    """
    config = config or LayoutConfig()
    mode = PrintMode(mode)

    if layout.page_count == 0:
        logger.warning("Empty layout, creating empty PDF")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    _register_fonts()
    styles = _build_styles()

    c = canvas.Canvas(str(output_path), pagesize=(config.page_width * cm, config.page_height * cm))
    for page in layout.pages:
        _render_page(c, page, config, styles, header_text, mode, show_footer)
        c.showPage()
    c.save()

    logger.info(f"Rendered {layout.page_count} pages to {output_path}")
