"""FastAPI REST API for the document rendering pipeline."""

import os
import uuid
from datetime import date
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from .logger import clear_context, logger, set_context
from .render import (
    DocumentKind,
    LineKind,
    RenderedNode,
    UpstreamPayloadError,
    ascii_filename,
    build_document,
    classify_text,
    export_pdf,
    parse_transform_payload,
    render_preview,
)

# Maximum accepted document length in characters
MAX_DOCUMENT_CHARS = int(os.getenv("MAX_DOCUMENT_CHARS", "100000"))

# Maximum raw upstream payload size in bytes
MAX_PAYLOAD_BYTES = int(os.getenv("MAX_PAYLOAD_BYTES", str(2 * 1024 * 1024)))


# --- Request/Response Models ---


class DocumentRequest(BaseModel):
    text: str = Field(..., max_length=MAX_DOCUMENT_CHARS)
    kind: DocumentKind = DocumentKind.RESUME


class ExportRequest(DocumentRequest):
    today: date | None = None


class ClassifiedLineResponse(BaseModel):
    index: int
    kind: LineKind
    text: str
    level: int | None = None
    indent_level: int | None = None


class ClassifyResponse(BaseModel):
    lines: list[ClassifiedLineResponse]


class BlockResponse(BaseModel):
    position: int
    kind: LineKind
    text: str
    level: int | None = None
    indent_level: int | None = None
    section: str | None = None


class BlocksResponse(BaseModel):
    blocks: list[BlockResponse]


class PreviewResponse(BaseModel):
    nodes: list[RenderedNode]
    html: str
    blocks_count: int
    filename: str


class TransformPreviewResponse(BaseModel):
    success: bool
    fallback_mode: bool | None = None
    resume: PreviewResponse | None = None
    cover_letter: PreviewResponse | None = None
    changes_made: list[str] = Field(default_factory=list)
    keywords_extracted: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    checks: dict[str, bool] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    code: str
    message: str


def _preview_response(text: str, kind: DocumentKind) -> PreviewResponse:
    preview = render_preview(text, kind)
    return PreviewResponse(
        nodes=preview.nodes,
        html=preview.html,
        blocks_count=preview.blocks_count,
        filename=preview.filename,
    )


def _content_disposition(filename: str) -> str:
    """Attachment header value; non-ASCII names also go in an RFC 5987 parameter."""
    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{ascii_filename(filename)}\"; filename*=utf-8''{quoted}"


app = FastAPI(
    title="Resume Render API",
    description="Structure inference, preview and PDF export for generated résumés and cover letters",
    version="0.1.0",
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line of a request with a request id."""
    set_context(request_id=request.headers.get("x-request-id") or str(uuid.uuid4()))
    try:
        return await call_next(request)
    finally:
        clear_context()


# --- Exception Handlers ---


@app.exception_handler(UpstreamPayloadError)
async def upstream_payload_handler(request, exc: UpstreamPayloadError):
    logger.warn("invalid upstream payload", error=str(exc))
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(code="INVALID_PAYLOAD", message=str(exc)).model_dump(),
    )


# --- Health Endpoints ---


@app.get("/health", response_model=HealthResponse)
def health():
    """Liveness check."""
    return HealthResponse(status="healthy")


# --- Document Endpoints ---


@app.post("/api/v1/documents/classify", response_model=ClassifyResponse)
def classify(request: DocumentRequest):
    """Classify every line of a document."""
    lines = classify_text(request.text, request.kind)
    return ClassifyResponse(
        lines=[
            ClassifiedLineResponse(
                index=line.index,
                kind=line.kind,
                text=line.text,
                level=line.classification.level,
                indent_level=line.classification.indent_level,
            )
            for line in lines
        ]
    )


@app.post("/api/v1/documents/blocks", response_model=BlocksResponse)
def blocks(request: DocumentRequest):
    """Return the block sequence renderers consume."""
    return BlocksResponse(
        blocks=[
            BlockResponse(
                position=b.position,
                kind=b.kind,
                text=b.text,
                level=b.level,
                indent_level=b.indent_level,
                section=b.section,
            )
            for b in build_document(request.text, request.kind)
        ]
    )


@app.post("/api/v1/documents/preview", response_model=PreviewResponse)
def preview(request: DocumentRequest):
    """Render a document for on-screen preview."""
    return _preview_response(request.text, request.kind)


@app.post("/api/v1/documents/export")
def export(request: ExportRequest):
    """Render a document to a downloadable A4 PDF."""
    exported = export_pdf(request.text, request.kind, today=request.today)
    return Response(
        content=exported.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": _content_disposition(exported.filename),
            "X-Page-Count": str(exported.page_count),
        },
    )


# --- Upstream Transform Endpoints ---


@app.post("/api/v1/transform/preview", response_model=TransformPreviewResponse)
async def transform_preview(request: Request):
    """Render both documents of an upstream transformation response.

    Accepts the raw response body, either a single JSON object or a
    newline-delimited stream of partial objects.
    """
    raw = await request.body()
    if len(raw) > MAX_PAYLOAD_BYTES:
        raise UpstreamPayloadError(
            f"Payload too large. Maximum size is {MAX_PAYLOAD_BYTES} bytes"
        )
    result = parse_transform_payload(raw)

    if result.fallback_mode:
        logger.info("upstream returned fallback content")

    return TransformPreviewResponse(
        success=result.success,
        fallback_mode=result.fallback_mode,
        resume=_preview_response(result.transformed_resume, DocumentKind.RESUME)
        if result.transformed_resume.strip()
        else None,
        cover_letter=_preview_response(result.cover_letter, DocumentKind.COVER_LETTER)
        if result.cover_letter.strip()
        else None,
        changes_made=result.changes_made,
        keywords_extracted=result.keywords_extracted,
    )
