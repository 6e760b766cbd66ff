"""Fold classified lines into the block sequence consumed by renderers."""

from .models import Block, ClassifiedLine, LineKind

# Block kinds that open a new section for the blocks that follow them
SECTION_KINDS = (LineKind.SECTION_LABEL, LineKind.HEADING)


def build_blocks(classified: list[ClassifiedLine]) -> list[Block]:
    """Build one block per physical line, tagging each with its section.

    Wrapped paragraph text is not reassembled and consecutive bullets stay
    separate blocks. The only running state is the current section label,
    which is attached to every block after the label itself.

    Args:
        classified: Output of the classifier, in reading order.

    Returns:
        List of Block objects; empty when the input is empty.
    """
    blocks = []
    current_section: str | None = None

    for position, line in enumerate(classified):
        blocks.append(
            Block(
                position=position,
                kind=line.kind,
                text=line.text,
                lines=(line.index,),
                level=line.classification.level,
                indent_level=line.classification.indent_level,
                section=current_section,
            )
        )
        if line.kind in SECTION_KINDS and line.text:
            current_section = line.text

    return blocks


def in_section(block: Block, *markers: str) -> bool:
    """Whether the block's enclosing section label mentions any marker (case-insensitive)."""
    if not block.section:
        return False
    label = block.section.lower()
    return any(marker in label for marker in markers)
