from .models import (
    Block,
    ClassifiedLine,
    DocumentKind,
    LayoutCursor,
    LineClassification,
    LineKind,
    PageElement,
    PrintLayout,
    RenderedNode,
)
from .classifier import (
    ClassificationRule,
    LookbackWindow,
    classify_line,
    classify_lines,
    classify_text,
    rules_for,
)
from .structure import build_blocks
from .screen import render_screen, to_html
from .filenames import DocumentHeader, ascii_filename, export_filename, extract_header
from .layout import layout_document, wrap_text
from .pdf_renderer import render_pdf
from .upstream import (
    TransformRequest,
    TransformResult,
    UpstreamPayloadError,
    parse_transform_payload,
)
from .pipeline import (
    ExportedDocument,
    Preview,
    build_document,
    export_pdf,
    render_preview,
)

__all__ = [
    # Models
    "Block",
    "ClassifiedLine",
    "DocumentKind",
    "LayoutCursor",
    "LineClassification",
    "LineKind",
    "PageElement",
    "PrintLayout",
    "RenderedNode",
    # Classifier
    "ClassificationRule",
    "LookbackWindow",
    "classify_line",
    "classify_lines",
    "classify_text",
    "rules_for",
    # Structure
    "build_blocks",
    # Screen
    "render_screen",
    "to_html",
    # Header / filenames
    "DocumentHeader",
    "ascii_filename",
    "export_filename",
    "extract_header",
    # Print
    "layout_document",
    "wrap_text",
    "render_pdf",
    # Upstream
    "TransformRequest",
    "TransformResult",
    "UpstreamPayloadError",
    "parse_transform_payload",
    # Pipeline
    "ExportedDocument",
    "Preview",
    "build_document",
    "export_pdf",
    "render_preview",
]
