"""Text-to-output pipeline: classify, build blocks, then render."""

import time
from datetime import date

from pydantic import BaseModel

from ..logger import logger
from .classifier import classify_text
from .filenames import export_filename, extract_header
from .layout import layout_document
from .models import Block, DocumentKind, RenderedNode
from .pdf_renderer import render_pdf
from .screen import render_screen, to_html
from .structure import build_blocks


class Preview(BaseModel):
    """Screen rendering of a document."""

    nodes: list[RenderedNode]
    html: str
    blocks_count: int
    filename: str


class ExportedDocument(BaseModel):
    """A rendered PDF ready for download."""

    filename: str
    content: bytes
    page_count: int


def build_document(text: str, kind: DocumentKind = DocumentKind.RESUME) -> list[Block]:
    """Classify document text and fold it into blocks."""
    return build_blocks(classify_text(text, kind))


def render_preview(text: str, kind: DocumentKind = DocumentKind.RESUME) -> Preview:
    """Render document text for the on-screen preview."""
    blocks = build_document(text, kind)
    nodes = render_screen(blocks)
    header = extract_header(blocks, kind)
    logger.debug("preview rendered", kind=kind.value, blocks=len(blocks))
    return Preview(
        nodes=nodes,
        html=to_html(nodes),
        blocks_count=len(blocks),
        filename=export_filename(header.name, kind),
    )


def export_pdf(
    text: str,
    kind: DocumentKind = DocumentKind.RESUME,
    today: date | None = None,
) -> ExportedDocument:
    """Render document text to a paginated A4 PDF.

    Args:
        text: Generated résumé or cover-letter text.
        kind: Document kind.
        today: Date used when a cover letter has no date line.

    Returns:
        ExportedDocument with the download filename and PDF bytes.
    """
    start = time.perf_counter()

    blocks = build_document(text, kind)
    header = extract_header(blocks, kind)
    layout = layout_document(blocks, kind, today=today)
    content = render_pdf(layout)
    filename = export_filename(header.name, kind)

    if header.name is None:
        logger.info("no name detected, using generic filename", kind=kind.value)

    logger.info(
        "pdf exported",
        kind=kind.value,
        filename=filename,
        blocks=len(blocks),
        pages=layout.page_count,
        size_bytes=len(content),
        duration_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    return ExportedDocument(filename=filename, content=content, page_count=layout.page_count)
