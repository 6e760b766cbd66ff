"""On-screen preview rendering: one presentational node per block."""

import html
from itertools import groupby

from .models import Block, LineKind, RenderedNode
from .structure import in_section

# (tag, classes) per block kind; headings pick their tag from the level
SCREEN_STYLES: dict[LineKind, tuple[str, tuple[str, ...]]] = {
    LineKind.HEADING: ("h2", ("text-xl", "font-bold", "text-primary", "mt-4")),
    LineKind.NAME_HEADER: ("h1", ("text-center", "text-2xl", "font-bold")),
    LineKind.CONTACT_BLOCK: ("p", ("text-center", "text-muted-foreground")),
    LineKind.BULLET_ITEM: ("li", ("list-disc", "ml-5")),
    LineKind.SECTION_LABEL: ("h3", ("font-bold", "border-b", "pb-1", "mb-3")),
    LineKind.EMPLOYER_OR_DATE_LINE: ("p", ("font-bold", "text-base", "mt-3")),
    LineKind.BLANK: ("div", ("h-3",)),
    LineKind.SUMMARY_PARAGRAPH: ("p", ("text-muted-foreground",)),
    LineKind.BODY_PARAGRAPH: ("p", ()),
    LineKind.GREETING: ("p", ("font-bold", "mb-4")),
    LineKind.CLOSING: ("p", ("mt-6", "mb-6")),
    LineKind.SIGNATURE: ("p", ("font-bold",)),
    LineKind.DATE_LINE: ("p", ("text-muted-foreground", "mb-4")),
}

# Left indent added per bullet nesting level, in rem
BULLET_INDENT_REM = 1.25


def render_block(block: Block) -> RenderedNode:
    """Map a single block to its presentational node."""
    tag, classes = SCREEN_STYLES.get(block.kind, SCREEN_STYLES[LineKind.BODY_PARAGRAPH])

    if block.kind == LineKind.HEADING:
        tag = f"h{min(max(block.level or 1, 1), 6)}"
    elif block.kind == LineKind.BODY_PARAGRAPH and in_section(block, "summary", "profile"):
        classes = SCREEN_STYLES[LineKind.SUMMARY_PARAGRAPH][1]

    indent = (block.indent_level or 0) if block.kind == LineKind.BULLET_ITEM else 0

    return RenderedNode(
        tag=tag,
        classes=classes,
        text=block.text,
        indent_level=indent,
        block_position=block.position,
    )


def render_screen(blocks: list[Block]) -> list[RenderedNode]:
    """Render a block sequence for the interactive preview."""
    return [render_block(block) for block in blocks]


def _node_to_html(node: RenderedNode) -> str:
    attrs = ""
    if node.classes:
        attrs += f' class="{" ".join(node.classes)}"'
    if node.indent_level:
        attrs += f' style="margin-left: {node.indent_level * BULLET_INDENT_REM}rem"'
    if node.tag == "div" and not node.text:
        return f"<div{attrs}></div>"
    return f"<{node.tag}{attrs}>{html.escape(node.text)}</{node.tag}>"


def to_html(nodes: list[RenderedNode]) -> str:
    """Serialize nodes as an HTML fragment with all text escaped.

    Consecutive list items are wrapped in a single ``<ul>``.
    """
    parts = ['<div class="document-preview">']
    for is_item, run in groupby(nodes, key=lambda node: node.tag == "li"):
        if is_item:
            parts.append("<ul>")
            parts.extend(_node_to_html(node) for node in run)
            parts.append("</ul>")
        else:
            parts.extend(_node_to_html(node) for node in run)
    parts.append("</div>")
    return "\n".join(parts)
