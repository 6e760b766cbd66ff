"""Data models shared by the classifier, structure builder and renderers."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DocumentKind(str, Enum):
    """Which rule set the classifier runs with."""

    RESUME = "resume"
    COVER_LETTER = "cover_letter"


class LineKind(str, Enum):
    """Semantic role of a single line of generated text."""

    BLANK = "blank"
    HEADING = "heading"
    NAME_HEADER = "name_header"
    CONTACT_BLOCK = "contact_block"
    GREETING = "greeting"
    CLOSING = "closing"
    SIGNATURE = "signature"
    BULLET_ITEM = "bullet_item"
    SECTION_LABEL = "section_label"
    EMPLOYER_OR_DATE_LINE = "employer_or_date_line"
    SUMMARY_PARAGRAPH = "summary_paragraph"
    BODY_PARAGRAPH = "body_paragraph"
    DATE_LINE = "date_line"


class LineClassification(BaseModel):
    """The single tag assigned to a line."""

    model_config = ConfigDict(frozen=True)

    kind: LineKind
    level: int | None = None  # heading level (number of leading '#')
    indent_level: int | None = None  # bullet nesting depth


class ClassifiedLine(BaseModel):
    """A source line paired with its classification and display text."""

    model_config = ConfigDict(frozen=True)

    index: int
    raw: str
    text: str
    classification: LineClassification

    @property
    def kind(self) -> LineKind:
        return self.classification.kind


class Block(BaseModel):
    """A run of source lines sharing one rendering treatment."""

    model_config = ConfigDict(frozen=True)

    position: int
    kind: LineKind
    text: str
    lines: tuple[int, ...]
    level: int | None = None
    indent_level: int | None = None
    section: str | None = None  # label of the enclosing section, if any


class RenderedNode(BaseModel):
    """A presentational element for the on-screen preview."""

    model_config = ConfigDict(frozen=True)

    tag: str
    classes: tuple[str, ...] = ()
    text: str = ""
    indent_level: int = 0
    block_position: int


class PageElement(BaseModel):
    """A single drawing instruction on a fixed-size page.

    Coordinates are millimetres from the top-left corner of the page.
    """

    model_config = ConfigDict(frozen=True)

    page: int
    kind: str  # "text", "line", "rect" or "bullet"
    x: float
    y: float
    x2: float | None = None
    y2: float | None = None
    text: str = ""
    font: str = "regular"  # "regular" or "bold"
    size: float = 10.0
    color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fill: tuple[float, float, float] | None = None


class LayoutCursor(BaseModel):
    """Vertical write head and current page of the print layout."""

    model_config = ConfigDict(frozen=True)

    y: float
    page: int = 1

    def advance(self, amount: float) -> "LayoutCursor":
        return LayoutCursor(y=self.y + amount, page=self.page)


class PrintLayout(BaseModel):
    """Result of laying out a document onto pages."""

    page_count: int
    elements: list[PageElement] = Field(default_factory=list)

    def elements_on(self, page: int) -> list[PageElement]:
        return [e for e in self.elements if e.page == page]
