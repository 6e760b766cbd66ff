"""Line classification for generated résumé and cover-letter text.

Each line is tagged by an ordered cascade of rules; the first rule whose
predicate matches decides the tag. Rules only see the current line and a
window of the last five classified lines.
"""

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Callable

from .models import ClassifiedLine, DocumentKind, LineClassification, LineKind

LOOKBACK_SIZE = 5

# Line-index limits (0-based, exclusive) for header-region rules
NAME_HEADER_LINE_LIMIT = 3
CONTACT_BLOCK_LINE_LIMIT = 5
DATE_LINE_LINE_LIMIT = 20

SECTION_LABEL_MAX_LENGTH = 50

HEADING_RE = re.compile(r"^(#+)\s")
EMPHASIS_PAIR_RE = re.compile(r"\*\*.+?\*\*")
PLACEHOLDER_RE = re.compile(r"\*\[([^\]]+)\]\*")
BRACKETED_RE = re.compile(r"\[[^\]]*\]")
MONTH_RE = re.compile(
    r"\b(January|February|March|April|May|June|July|August|September|October|November|December)\b"
)
NUMERIC_DATE_RE = re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b")
ORDINAL_DAY_RE = re.compile(r"\b\d{1,2}(st|nd|rd|th)\b")

BULLET_GLYPHS = ("•", "-", "*")
EMPLOYER_MARKERS = ("Ltd", "Inc", "LLC")
DASH_CHARS = ("-", "–", "—")
YEAR_FRAGMENTS = ("19", "20")
SUMMARY_MARKERS = ("summary", "profile")
GREETING_PREFIXES = ("Dear ", "To ")
CLOSING_PREFIXES = (
    "Sincerely,",
    "Best regards,",
    "Regards,",
    "Yours truly,",
    "Thank you,",
)

_ALL_KINDS = frozenset(DocumentKind)
_COVER_LETTER_ONLY = frozenset({DocumentKind.COVER_LETTER})


@dataclass
class LookbackWindow:
    """The last few classified lines plus header-region state."""

    lines: deque = field(default_factory=lambda: deque(maxlen=LOOKBACK_SIZE))
    greeting_seen: bool = False

    def previous(self) -> ClassifiedLine | None:
        return self.lines[-1] if self.lines else None

    def push(self, line: ClassifiedLine) -> None:
        self.lines.append(line)
        if line.kind == LineKind.GREETING:
            self.greeting_seen = True


@dataclass(frozen=True)
class LineContext:
    """Everything a rule may look at for one line."""

    index: int
    raw: str
    stripped: str
    window: LookbackWindow


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    predicate: Callable[[LineContext], bool]
    build: Callable[[LineContext], tuple[LineClassification, str]]
    kinds: frozenset = _ALL_KINDS


def strip_emphasis(text: str) -> str:
    """Remove bold markers and unwrap ``*[placeholder]*`` tokens."""
    text = PLACEHOLDER_RE.sub(r"\1", text)
    return text.replace("**", "").strip()


def leading_whitespace(raw: str) -> int:
    return len(raw) - len(raw.lstrip())


def _tag(kind: LineKind) -> Callable[[LineContext], tuple[LineClassification, str]]:
    """Builder for rules whose display text is just the cleaned line."""

    def build(ctx: LineContext) -> tuple[LineClassification, str]:
        return LineClassification(kind=kind), strip_emphasis(ctx.stripped)

    return build


# --- Predicates ---


def _is_blank(ctx: LineContext) -> bool:
    return not ctx.stripped


def _is_heading(ctx: LineContext) -> bool:
    return HEADING_RE.match(ctx.stripped) is not None


def _is_name_header(ctx: LineContext) -> bool:
    if PLACEHOLDER_RE.search(ctx.stripped):
        return True
    return ctx.index < NAME_HEADER_LINE_LIMIT and EMPHASIS_PAIR_RE.search(ctx.stripped) is not None


def _is_contact_block(ctx: LineContext) -> bool:
    if ctx.index >= CONTACT_BLOCK_LINE_LIMIT:
        return False
    return BRACKETED_RE.search(ctx.stripped) is not None or "|" in ctx.stripped


def _is_bullet(ctx: LineContext) -> bool:
    # "**" opens an emphasis pair, not a bullet
    return ctx.stripped.startswith(BULLET_GLYPHS) and not ctx.stripped.startswith("**")


def _is_section_label(ctx: LineContext) -> bool:
    return (
        EMPHASIS_PAIR_RE.search(ctx.stripped) is not None
        and len(ctx.stripped) < SECTION_LABEL_MAX_LENGTH
    )


def _is_employer_or_date(ctx: LineContext) -> bool:
    line = ctx.stripped
    if any(marker in line for marker in EMPLOYER_MARKERS):
        return True
    return any(d in line for d in DASH_CHARS) and any(y in line for y in YEAR_FRAGMENTS)


def _is_greeting(ctx: LineContext) -> bool:
    return ctx.stripped.startswith(GREETING_PREFIXES)


def _is_closing(ctx: LineContext) -> bool:
    return ctx.stripped.startswith(CLOSING_PREFIXES)


def _is_signature(ctx: LineContext) -> bool:
    previous = ctx.window.previous()
    return previous is not None and previous.kind == LineKind.CLOSING and bool(ctx.stripped)


def _is_date_line(ctx: LineContext) -> bool:
    if ctx.index >= DATE_LINE_LINE_LIMIT or ctx.window.greeting_seen:
        return False
    line = ctx.stripped
    return bool(
        MONTH_RE.search(line) or NUMERIC_DATE_RE.search(line) or ORDINAL_DAY_RE.search(line)
    )


def _follows_summary(ctx: LineContext) -> bool:
    return any(
        marker in line.raw.lower()
        for line in ctx.window.lines
        for marker in SUMMARY_MARKERS
    )


def _always(ctx: LineContext) -> bool:
    return True


# --- Builders ---


def _build_blank(ctx: LineContext) -> tuple[LineClassification, str]:
    return LineClassification(kind=LineKind.BLANK), ""


def _build_heading(ctx: LineContext) -> tuple[LineClassification, str]:
    hashes = HEADING_RE.match(ctx.stripped).group(1)
    text = strip_emphasis(ctx.stripped[len(hashes):])
    return LineClassification(kind=LineKind.HEADING, level=len(hashes)), text


def _build_bullet(ctx: LineContext) -> tuple[LineClassification, str]:
    indent = leading_whitespace(ctx.raw) // 2
    text = strip_emphasis(ctx.stripped[1:])
    return LineClassification(kind=LineKind.BULLET_ITEM, indent_level=indent), text


RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("blank", _is_blank, _build_blank),
    ClassificationRule("heading", _is_heading, _build_heading),
    ClassificationRule("signature", _is_signature, _tag(LineKind.SIGNATURE), _COVER_LETTER_ONLY),
    ClassificationRule("greeting", _is_greeting, _tag(LineKind.GREETING), _COVER_LETTER_ONLY),
    ClassificationRule("closing", _is_closing, _tag(LineKind.CLOSING), _COVER_LETTER_ONLY),
    ClassificationRule("name_header", _is_name_header, _tag(LineKind.NAME_HEADER)),
    ClassificationRule("contact_block", _is_contact_block, _tag(LineKind.CONTACT_BLOCK)),
    ClassificationRule("date_line", _is_date_line, _tag(LineKind.DATE_LINE), _COVER_LETTER_ONLY),
    ClassificationRule("bullet_item", _is_bullet, _build_bullet),
    ClassificationRule("section_label", _is_section_label, _tag(LineKind.SECTION_LABEL)),
    ClassificationRule(
        "employer_or_date_line", _is_employer_or_date, _tag(LineKind.EMPLOYER_OR_DATE_LINE)
    ),
    ClassificationRule(
        "summary_paragraph", _follows_summary, _tag(LineKind.SUMMARY_PARAGRAPH), _COVER_LETTER_ONLY
    ),
    ClassificationRule("body_paragraph", _always, _tag(LineKind.BODY_PARAGRAPH)),
)


def rules_for(kind: DocumentKind) -> tuple[ClassificationRule, ...]:
    """Return the cascade, in priority order, active for a document kind."""
    return tuple(rule for rule in RULES if kind in rule.kinds)


def classify_line(
    raw: str,
    index: int,
    window: LookbackWindow,
    kind: DocumentKind = DocumentKind.RESUME,
) -> ClassifiedLine:
    """Classify one line given its position and the preceding window.

    The window is not modified; callers push the result themselves.
    """
    ctx = LineContext(index=index, raw=raw, stripped=raw.strip(), window=window)
    for rule in rules_for(kind):
        if rule.predicate(ctx):
            classification, text = rule.build(ctx)
            return ClassifiedLine(index=index, raw=raw, text=text, classification=classification)
    # The cascade ends with an always-true rule
    raise AssertionError("no classification rule matched")


def classify_lines(
    lines: list[str], kind: DocumentKind = DocumentKind.RESUME
) -> list[ClassifiedLine]:
    """Classify every line in a single left-to-right pass.

    Args:
        lines: Document lines in reading order.
        kind: Selects whether the cover-letter rules are active.

    Returns:
        One ClassifiedLine per input line, same order.
    """
    window = LookbackWindow()
    classified = []
    for index, raw in enumerate(lines):
        line = classify_line(raw, index, window, kind)
        window.push(line)
        classified.append(line)
    return classified


def split_lines(text: str) -> list[str]:
    """Split document text on any line break; a trailing newline adds no line."""
    if not text:
        return []
    return text.splitlines()


def classify_text(
    text: str, kind: DocumentKind = DocumentKind.RESUME
) -> list[ClassifiedLine]:
    """Split text into lines and classify them."""
    return classify_lines(split_lines(text), kind)
