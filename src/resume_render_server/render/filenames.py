"""Header extraction (candidate/sender name, contact line) and export filenames."""

import re
import unicodedata

from pydantic import BaseModel

from .models import Block, DocumentKind, LineKind

# Only blocks starting within this many lines feed the header band
HEADER_SCAN_LINES = 10

GENERIC_NAME = "Professional"
FILENAME_SUFFIXES = {
    DocumentKind.RESUME: "_Resume.pdf",
    DocumentKind.COVER_LETTER: "_Cover_Letter.pdf",
}
CONTACT_SEPARATOR = " | "

_UNSAFE_RUN_RE = re.compile(r"[\W_]+")
_ASCII_UNSAFE_RUN_RE = re.compile(r"[^A-Za-z0-9]+")


class DocumentHeader(BaseModel):
    """What the header band shows, and which blocks it replaces."""

    name: str | None = None
    contact: str | None = None
    date_line: str | None = None
    consumed: frozenset[int] = frozenset()


def extract_header(
    blocks: list[Block], kind: DocumentKind = DocumentKind.RESUME
) -> DocumentHeader:
    """Find the name, contact details and (cover letters) date near the top.

    Args:
        blocks: Block sequence from build_blocks().
        kind: Document kind; date lines are only picked up for cover letters.

    Returns:
        DocumentHeader; fields are None when nothing was detected.
    """
    name = None
    contacts = []
    date_line = None
    consumed = set()

    for block in blocks:
        if block.lines[0] >= HEADER_SCAN_LINES:
            break
        if block.kind == LineKind.NAME_HEADER and name is None and block.text:
            name = block.text
            consumed.add(block.position)
        elif block.kind == LineKind.CONTACT_BLOCK and block.text:
            contacts.append(block.text)
            consumed.add(block.position)
        elif (
            block.kind == LineKind.DATE_LINE
            and kind == DocumentKind.COVER_LETTER
            and date_line is None
        ):
            date_line = block.text
            consumed.add(block.position)

    return DocumentHeader(
        name=name,
        contact=CONTACT_SEPARATOR.join(contacts) if contacts else None,
        date_line=date_line,
        consumed=frozenset(consumed),
    )


def export_filename(name: str | None, kind: DocumentKind = DocumentKind.RESUME) -> str:
    """Build the download filename for an exported document.

    Runs of characters other than letters and digits become a single
    underscore. Falls back to ``Professional_<Suffix>`` when no usable name
    is available.
    """
    safe = _UNSAFE_RUN_RE.sub("_", name or "").strip("_")
    return f"{safe or GENERIC_NAME}{FILENAME_SUFFIXES[kind]}"


def ascii_filename(filename: str) -> str:
    """ASCII-only rendition of an export filename.

    Accents are folded away (``José`` becomes ``Jose``); characters with no
    ASCII form are dropped.
    """
    stem, dot, extension = filename.rpartition(".")
    folded = unicodedata.normalize("NFKD", stem).encode("ascii", "ignore").decode("ascii")
    safe = _ASCII_UNSAFE_RUN_RE.sub("_", folded).strip("_")
    return f"{safe or GENERIC_NAME}{dot}{extension}"
