"""Paint a PrintLayout onto PyMuPDF pages."""

import fitz  # PyMuPDF

from .fonts import font_runs
from .layout import PAGE_HEIGHT_MM, PAGE_WIDTH_MM
from .models import PageElement, PrintLayout

PT_PER_MM = 72 / 25.4

RULE_WIDTH_PT = 0.5


def _pt(value: float) -> float:
    return value * PT_PER_MM


def _paint_text(page: fitz.Page, element: PageElement) -> None:
    runs = font_runs(element.text, element.font)
    if not runs:
        return
    writer = fitz.TextWriter(page.rect)
    point = fitz.Point(_pt(element.x), _pt(element.y))
    for font, run in runs:
        # each run starts where the previous one ended
        _, point = writer.append(point, run, font=font, fontsize=element.size)
    writer.write_text(page, color=element.color)


def _paint(page: fitz.Page, element: PageElement) -> None:
    if element.kind == "text":
        _paint_text(page, element)
    elif element.kind == "line":
        page.draw_line(
            (_pt(element.x), _pt(element.y)),
            (_pt(element.x2), _pt(element.y2)),
            color=element.color,
            width=RULE_WIDTH_PT,
        )
    elif element.kind == "rect":
        rect = fitz.Rect(_pt(element.x), _pt(element.y), _pt(element.x2), _pt(element.y2))
        page.draw_rect(rect, color=element.color, fill=element.fill, width=0)
    elif element.kind == "bullet":
        # size holds the radius in mm
        page.draw_circle(
            (_pt(element.x), _pt(element.y)),
            _pt(element.size),
            color=element.color,
            fill=element.fill,
        )


def render_pdf(layout: PrintLayout) -> bytes:
    """Draw every element of a layout and return the PDF bytes.

    Args:
        layout: Output of layout_document().

    Returns:
        Serialized PDF with exactly layout.page_count pages.
    """
    doc = fitz.open()
    try:
        pages = [
            doc.new_page(width=_pt(PAGE_WIDTH_MM), height=_pt(PAGE_HEIGHT_MM))
            for _ in range(layout.page_count)
        ]
        for element in layout.elements:
            _paint(pages[element.page - 1], element)
        # Fixed metadata keeps repeated exports byte-identical
        doc.set_metadata({"producer": "resume_render_server", "creationDate": "", "modDate": ""})
        return doc.tobytes(garbage=3, deflate=True, no_new_id=True)
    finally:
        doc.close()
