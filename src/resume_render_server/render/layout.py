"""Paginated print layout for A4 portrait documents.

Layout is planned here without touching a rendering surface: a LayoutCursor
is threaded through one draw function per block kind, each returning the
advanced cursor and the PageElements it produced. pdf_renderer.py paints
the result.

All distances are millimetres measured from the top-left page corner; text
elements are positioned by their baseline.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable

from .filenames import DocumentHeader, extract_header
from .fonts import text_length_pt
from .models import (
    Block,
    DocumentKind,
    LayoutCursor,
    LineKind,
    PageElement,
    PrintLayout,
)
from .structure import in_section

MM_PER_PT = 25.4 / 72

# A4 portrait
PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0
MARGIN_MM = 20.0
TOP_MARGIN_MM = 20.0
CONTENT_WIDTH_MM = PAGE_WIDTH_MM - 2 * MARGIN_MM
BOTTOM_LIMIT_MM = 270.0
FOOTER_Y_MM = 285.0

# Font sizes (pt)
NAME_SIZE = 18.0
COVER_NAME_SIZE = 16.0
CONTACT_SIZE = 9.5
SECTION_SIZE = 12.0
EMPLOYER_SIZE = 11.0
BODY_SIZE = 10.0
FOOTER_SIZE = 8.0

# Vertical advances (mm)
SECTION_PRE_GAP = 5.0
SECTION_ADVANCE = 8.0
SECTION_EXTRA_LINE = 6.0
BULLET_LINE = 5.0
BULLET_INDENT = 4.0
BULLET_TEXT_OFFSET = 4.0
BULLET_RADIUS = 0.6
EMPLOYER_LINE = 5.0
AFTER_BULLETS_GAP = 2.0
BLANK_ADVANCE = 2.0
PARAGRAPH_LINE = 4.5
GREETING_ADVANCE = 10.0
CLOSING_PRE_GAP = 5.0
SIGNATURE_RESERVE = 15.0
NAME_LINE = 7.0
CONTACT_LINE = 5.0
HEADER_RULE_GAP = 4.0
HEADER_BOTTOM_GAP = 6.0

# Colours (RGB, 0-1)
TEXT_COLOR = (0.13, 0.13, 0.13)
MUTED_COLOR = (0.4, 0.4, 0.4)
ACCENT_COLOR = (0.16, 0.29, 0.55)
BAND_FILL = (0.94, 0.95, 0.97)
RULE_COLOR = (0.75, 0.75, 0.75)

GENERIC_HEADERS = {
    DocumentKind.RESUME: "Professional Resume",
    DocumentKind.COVER_LETTER: "Cover Letter",
}

Measure = Callable[[str, str, float], float]


def text_width_mm(text: str, font: str, size: float) -> float:
    """Width of a string in millimetres for one of the FONTS keys."""
    return text_length_pt(text, font, size) * MM_PER_PT


def format_letter_date(day: date) -> str:
    """Format a date the way cover letters print it, e.g. 'March 12, 2025'."""
    return f"{day:%B} {day.day}, {day.year}"


def wrap_text(
    text: str,
    width: float,
    size: float,
    font: str = "regular",
    measure: Measure = text_width_mm,
) -> list[str]:
    """Greedy word wrap against a width in millimetres.

    Words wider than the whole line are split by character so that no
    returned line exceeds the width (single characters excepted).
    """
    words = text.split()
    if not words:
        return []

    lines = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if measure(candidate, font, size) <= width:
            current = candidate
            continue
        if current:
            lines.append(current)
            current = ""
        # Hard-split words that cannot fit on a line of their own
        while measure(word, font, size) > width and len(word) > 1:
            cut = len(word) - 1
            while cut > 1 and measure(word[:cut], font, size) > width:
                cut -= 1
            lines.append(word[:cut])
            word = word[cut:]
        current = word
    if current:
        lines.append(current)
    return lines


@dataclass(frozen=True)
class LayoutContext:
    """Read-only state a draw step may consult."""

    kind: DocumentKind
    header: DocumentHeader
    previous_kind: LineKind | None = None
    measure: Measure = text_width_mm


Step = tuple[LayoutCursor, list[PageElement]]


def break_if_needed(cursor: LayoutCursor, needed: float) -> LayoutCursor:
    """Start a new page when writing `needed` mm would pass the bottom limit.

    A cursor already at the top of a page is never moved, so oversize
    requests cannot produce empty pages.
    """
    if cursor.y + needed > BOTTOM_LIMIT_MM and cursor.y > TOP_MARGIN_MM:
        return LayoutCursor(y=TOP_MARGIN_MM, page=cursor.page + 1)
    return cursor


def write_lines(
    cursor: LayoutCursor,
    lines: list[str],
    x: float,
    line_height: float,
    size: float,
    font: str = "regular",
    color: tuple[float, float, float] = TEXT_COLOR,
) -> Step:
    """Write pre-wrapped lines, breaking pages between lines as needed."""
    elements = []
    for line in lines:
        cursor = break_if_needed(cursor, line_height)
        elements.append(
            PageElement(
                page=cursor.page,
                kind="text",
                x=x,
                y=cursor.y,
                text=line,
                font=font,
                size=size,
                color=color,
            )
        )
        cursor = cursor.advance(line_height)
    return cursor, elements


def _write_wrapped(
    cursor: LayoutCursor,
    ctx: LayoutContext,
    text: str,
    line_height: float,
    size: float,
    font: str = "regular",
    color: tuple[float, float, float] = TEXT_COLOR,
    x: float = MARGIN_MM,
) -> Step:
    width = CONTENT_WIDTH_MM - (x - MARGIN_MM)
    lines = wrap_text(text, width, size, font, ctx.measure)
    return write_lines(cursor, lines, x, line_height, size, font, color)


def _centered_x(text: str, font: str, size: float, measure: Measure) -> float:
    return max(MARGIN_MM, (PAGE_WIDTH_MM - measure(text, font, size)) / 2)


# --- Header band ---


def draw_header(cursor: LayoutCursor, ctx: LayoutContext, today: date) -> Step:
    """Draw the first-page header band: name, contact line and (letters) date."""
    header = ctx.header
    name = header.name or GENERIC_HEADERS[ctx.kind]
    elements = []

    if ctx.kind == DocumentKind.RESUME:
        for line in wrap_text(name, CONTENT_WIDTH_MM, NAME_SIZE, "bold", ctx.measure):
            cursor = cursor.advance(NAME_LINE)
            elements.append(
                PageElement(
                    page=cursor.page,
                    kind="text",
                    x=_centered_x(line, "bold", NAME_SIZE, ctx.measure),
                    y=cursor.y,
                    text=line,
                    font="bold",
                    size=NAME_SIZE,
                    color=TEXT_COLOR,
                )
            )
        if header.contact:
            for line in wrap_text(header.contact, CONTENT_WIDTH_MM, CONTACT_SIZE, "regular", ctx.measure):
                cursor = cursor.advance(CONTACT_LINE)
                elements.append(
                    PageElement(
                        page=cursor.page,
                        kind="text",
                        x=_centered_x(line, "regular", CONTACT_SIZE, ctx.measure),
                        y=cursor.y,
                        text=line,
                        size=CONTACT_SIZE,
                        color=MUTED_COLOR,
                    )
                )
    else:
        cursor = cursor.advance(NAME_LINE)
        cursor, lines = _write_wrapped(
            cursor, ctx, name, NAME_LINE, COVER_NAME_SIZE, "bold"
        )
        elements.extend(lines)
        if header.contact:
            cursor, lines = _write_wrapped(
                cursor, ctx, header.contact, CONTACT_LINE, CONTACT_SIZE, color=MUTED_COLOR
            )
            elements.extend(lines)
        cursor = cursor.advance(CONTACT_LINE)
        date_text = header.date_line or format_letter_date(today)
        cursor, lines = _write_wrapped(cursor, ctx, date_text, CONTACT_LINE, BODY_SIZE)
        elements.extend(lines)
        # _write_wrapped leaves the cursor one line below the last baseline
        cursor = cursor.advance(-CONTACT_LINE)

    cursor = cursor.advance(HEADER_RULE_GAP)
    elements.append(
        PageElement(
            page=cursor.page,
            kind="line",
            x=MARGIN_MM,
            y=cursor.y,
            x2=PAGE_WIDTH_MM - MARGIN_MM,
            y2=cursor.y,
            color=RULE_COLOR,
        )
    )
    return cursor.advance(HEADER_BOTTOM_GAP), elements


# --- Block drawers ---


def draw_section_label(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    """Shaded band, bold label and a separator rule."""
    lines = wrap_text(block.text, CONTENT_WIDTH_MM - 2, SECTION_SIZE, "bold", ctx.measure)
    # an empty label still gets its band and rule
    extra_lines = max(len(lines), 1) - 1
    height = SECTION_ADVANCE + SECTION_EXTRA_LINE * extra_lines

    cursor = cursor.advance(SECTION_PRE_GAP)
    cursor = break_if_needed(cursor, height)
    top = cursor.y - 5.0
    bottom = cursor.y + SECTION_EXTRA_LINE * extra_lines + 1.5

    elements = [
        PageElement(
            page=cursor.page,
            kind="rect",
            x=MARGIN_MM,
            y=top,
            x2=PAGE_WIDTH_MM - MARGIN_MM,
            y2=bottom,
            color=BAND_FILL,
            fill=BAND_FILL,
        )
    ]
    for offset, line in enumerate(lines):
        elements.append(
            PageElement(
                page=cursor.page,
                kind="text",
                x=MARGIN_MM + 1,
                y=cursor.y + SECTION_EXTRA_LINE * offset,
                text=line,
                font="bold",
                size=SECTION_SIZE,
                color=ACCENT_COLOR,
            )
        )
    elements.append(
        PageElement(
            page=cursor.page,
            kind="line",
            x=MARGIN_MM,
            y=bottom + 0.5,
            x2=PAGE_WIDTH_MM - MARGIN_MM,
            y2=bottom + 0.5,
            color=RULE_COLOR,
        )
    )
    return cursor.advance(height), elements


def draw_heading(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    if (block.level or 1) <= 2:
        return draw_section_label(cursor, block, ctx)
    return draw_employer_line(cursor, block, ctx)


def draw_bullet(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    """Bullet glyph at the indent position, wrapped text beside it."""
    glyph_x = MARGIN_MM + (block.indent_level or 0) * BULLET_INDENT
    text_x = glyph_x + BULLET_TEXT_OFFSET
    cursor = break_if_needed(cursor, BULLET_LINE)
    glyph = PageElement(
        page=cursor.page,
        kind="bullet",
        x=glyph_x + 1.0,
        y=cursor.y - 1.2,
        size=BULLET_RADIUS,
        color=TEXT_COLOR,
        fill=TEXT_COLOR,
    )
    cursor, elements = _write_wrapped(
        cursor, ctx, block.text, BULLET_LINE, BODY_SIZE, x=text_x
    )
    if not elements:
        return cursor.advance(BULLET_LINE), [glyph]
    return cursor, [glyph, *elements]


def draw_employer_line(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    if ctx.previous_kind == LineKind.BULLET_ITEM:
        cursor = cursor.advance(AFTER_BULLETS_GAP)
    return _write_wrapped(cursor, ctx, block.text, EMPLOYER_LINE, EMPLOYER_SIZE, "bold")


def draw_blank(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    # Spacing never forces a page of its own
    limit = max(cursor.y, BOTTOM_LIMIT_MM)
    return LayoutCursor(y=min(cursor.y + BLANK_ADVANCE, limit), page=cursor.page), []


def draw_paragraph(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    muted = block.kind == LineKind.SUMMARY_PARAGRAPH or (
        block.kind == LineKind.BODY_PARAGRAPH and in_section(block, "summary", "profile")
    )
    color = MUTED_COLOR if muted else TEXT_COLOR
    return _write_wrapped(cursor, ctx, block.text, PARAGRAPH_LINE, BODY_SIZE, color=color)


def draw_name_line(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    return _write_wrapped(cursor, ctx, block.text, NAME_LINE, SECTION_SIZE, "bold")


def draw_contact_line(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    return _write_wrapped(
        cursor, ctx, block.text, PARAGRAPH_LINE, CONTACT_SIZE, color=MUTED_COLOR
    )


def draw_greeting(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    cursor, elements = _write_wrapped(cursor, ctx, block.text, PARAGRAPH_LINE, BODY_SIZE)
    return cursor.advance(GREETING_ADVANCE - PARAGRAPH_LINE), elements


def draw_closing(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    cursor = cursor.advance(CLOSING_PRE_GAP)
    cursor, elements = _write_wrapped(cursor, ctx, block.text, PARAGRAPH_LINE, BODY_SIZE)
    return cursor.advance(SIGNATURE_RESERVE - PARAGRAPH_LINE), elements


def draw_signature(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    name = ctx.header.name or block.text
    return _write_wrapped(cursor, ctx, name, PARAGRAPH_LINE, BODY_SIZE, "bold")


DRAWERS: dict[LineKind, Callable[[LayoutCursor, Block, LayoutContext], Step]] = {
    LineKind.BLANK: draw_blank,
    LineKind.HEADING: draw_heading,
    LineKind.NAME_HEADER: draw_name_line,
    LineKind.CONTACT_BLOCK: draw_contact_line,
    LineKind.GREETING: draw_greeting,
    LineKind.CLOSING: draw_closing,
    LineKind.SIGNATURE: draw_signature,
    LineKind.BULLET_ITEM: draw_bullet,
    LineKind.SECTION_LABEL: draw_section_label,
    LineKind.EMPLOYER_OR_DATE_LINE: draw_employer_line,
    LineKind.SUMMARY_PARAGRAPH: draw_paragraph,
    LineKind.BODY_PARAGRAPH: draw_paragraph,
    LineKind.DATE_LINE: draw_paragraph,
}


# Kinds with a visible treatment even without text; other empty blocks draw nothing
DRAWN_WHEN_EMPTY = frozenset(
    {LineKind.BLANK, LineKind.SIGNATURE, LineKind.BULLET_ITEM, LineKind.SECTION_LABEL}
)


def draw_block(cursor: LayoutCursor, block: Block, ctx: LayoutContext) -> Step:
    """Dispatch a block to its drawer; unknown kinds get paragraph treatment."""
    drawer = DRAWERS.get(block.kind, draw_paragraph)
    return drawer(cursor, block, ctx)


def draw_footers(page_count: int, measure: Measure = text_width_mm) -> list[PageElement]:
    """One centred 'Page X of N' stamp per page."""
    footers = []
    for page in range(1, page_count + 1):
        text = f"Page {page} of {page_count}"
        footers.append(
            PageElement(
                page=page,
                kind="text",
                x=_centered_x(text, "regular", FOOTER_SIZE, measure),
                y=FOOTER_Y_MM,
                text=text,
                size=FOOTER_SIZE,
                color=MUTED_COLOR,
            )
        )
    return footers


def layout_document(
    blocks: list[Block],
    kind: DocumentKind = DocumentKind.RESUME,
    today: date | None = None,
    measure: Measure = text_width_mm,
) -> PrintLayout:
    """Lay out a block sequence onto A4 pages.

    Args:
        blocks: Block sequence from build_blocks().
        kind: Document kind; selects the header style.
        today: Date printed on cover letters without a date line.
            Defaults to the current date.
        measure: Text width function (text, font, size) -> mm.

    Returns:
        PrintLayout with the page count and all drawing elements,
        footers included.
    """
    header = extract_header(blocks, kind)
    ctx = LayoutContext(kind=kind, header=header, measure=measure)

    cursor = LayoutCursor(y=TOP_MARGIN_MM, page=1)
    cursor, elements = draw_header(cursor, ctx, today or date.today())

    for block in blocks:
        if block.position in header.consumed:
            continue
        if not block.text and block.kind not in DRAWN_WHEN_EMPTY:
            continue
        if block.kind != LineKind.BLANK:
            cursor = break_if_needed(
                cursor, min(_estimate_height(block, ctx), BOTTOM_LIMIT_MM - TOP_MARGIN_MM)
            )
        cursor, drawn = draw_block(cursor, block, ctx)
        elements.extend(drawn)
        ctx = LayoutContext(
            kind=kind, header=header, previous_kind=block.kind, measure=measure
        )

    page_count = max(e.page for e in elements)
    elements.extend(draw_footers(page_count, measure))
    return PrintLayout(page_count=page_count, elements=elements)


# (line height, font size, font) each drawer wraps its text with
LINE_METRICS: dict[LineKind, tuple[float, float, str]] = {
    LineKind.BULLET_ITEM: (BULLET_LINE, BODY_SIZE, "regular"),
    LineKind.EMPLOYER_OR_DATE_LINE: (EMPLOYER_LINE, EMPLOYER_SIZE, "bold"),
    LineKind.HEADING: (EMPLOYER_LINE, EMPLOYER_SIZE, "bold"),
    LineKind.NAME_HEADER: (NAME_LINE, SECTION_SIZE, "bold"),
    LineKind.CONTACT_BLOCK: (PARAGRAPH_LINE, CONTACT_SIZE, "regular"),
    LineKind.SIGNATURE: (PARAGRAPH_LINE, BODY_SIZE, "bold"),
}


def _estimate_height(block: Block, ctx: LayoutContext) -> float:
    """Height a block needs so short blocks are kept on one page."""
    if block.kind in (LineKind.SECTION_LABEL, LineKind.HEADING) and (block.level or 1) <= 2:
        return SECTION_PRE_GAP + SECTION_ADVANCE
    line_height, size, font = LINE_METRICS.get(block.kind, (PARAGRAPH_LINE, BODY_SIZE, "regular"))
    width = CONTENT_WIDTH_MM
    text = block.text
    if block.kind == LineKind.BULLET_ITEM:
        width -= (block.indent_level or 0) * BULLET_INDENT + BULLET_TEXT_OFFSET
    elif block.kind == LineKind.SIGNATURE:
        text = ctx.header.name or block.text
    lines = max(1, len(wrap_text(text, width, size, font, ctx.measure)))
    return line_height * lines
