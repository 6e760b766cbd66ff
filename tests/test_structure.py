"""Tests for the block structure builder."""

from resume_render_server.render import (
    DocumentKind,
    LineKind,
    build_blocks,
    build_document,
    classify_text,
)
from resume_render_server.render.structure import in_section

RESUME = "\n".join(
    [
        "**Jane Doe**",
        "jane@example.com | 555 0100",
        "",
        "**Summary**",
        "Seasoned engineer.",
        "**Experience**",
        "- Built things",
        "- Shipped things",
    ]
)


class TestBuildBlocks:
    """Tests for build_blocks function."""

    def test_empty_input(self):
        """Test that empty input yields no blocks."""
        assert build_blocks([]) == []

    def test_summary_scenario(self):
        """Test the heading, paragraph, blank and bullets scenario."""
        blocks = build_document("# Summary\nExperienced engineer.\n\n- Built systems\n- Led teams\n")
        assert [(b.kind, b.text) for b in blocks] == [
            (LineKind.HEADING, "Summary"),
            (LineKind.BODY_PARAGRAPH, "Experienced engineer."),
            (LineKind.BLANK, ""),
            (LineKind.BULLET_ITEM, "Built systems"),
            (LineKind.BULLET_ITEM, "Led teams"),
        ]
        assert [b.indent_level for b in blocks[3:]] == [0, 0]

    def test_one_block_per_line(self):
        """Test that consecutive bullets stay separate blocks."""
        blocks = build_document(RESUME)
        bullets = [b for b in blocks if b.kind == LineKind.BULLET_ITEM]
        assert len(bullets) == 2
        assert [b.lines for b in bullets] == [(6,), (7,)]

    def test_positions_are_sequential(self):
        """Test that block positions follow reading order."""
        blocks = build_document(RESUME)
        assert [b.position for b in blocks] == list(range(len(blocks)))

    def test_section_tracking(self):
        """Test that section labels apply to the blocks after them."""
        blocks = build_document(RESUME)
        assert blocks[0].section is None
        assert blocks[3].kind == LineKind.SECTION_LABEL
        assert blocks[3].section is None
        assert blocks[4].section == "Summary"
        assert blocks[5].section == "Summary"
        assert blocks[6].section == "Experience"
        assert blocks[7].section == "Experience"

    def test_headings_open_sections(self):
        """Test that markdown headings also set the current section."""
        blocks = build_document("## Skills\nPython, Go")
        assert blocks[1].section == "Skills"

    def test_carries_classification_metadata(self):
        """Test that level and indent are copied onto blocks."""
        blocks = build_document("### Acme\n      - nested detail")
        assert blocks[0].level == 3
        assert blocks[1].indent_level == 3

    def test_deterministic(self):
        """Test that rebuilding from the same text gives identical blocks."""
        assert build_document(RESUME) == build_document(RESUME)

    def test_cover_letter_blocks(self):
        """Test that the letter scenario ends with closing and signature."""
        blocks = build_document(
            "Dear Team,\nI am writing to apply.\nSincerely,\nJohn Smith\n",
            DocumentKind.COVER_LETTER,
        )
        assert [b.kind for b in blocks][-2:] == [LineKind.CLOSING, LineKind.SIGNATURE]

    def test_does_not_mutate_input(self):
        """Test that classified lines are left unchanged."""
        classified = classify_text(RESUME)
        snapshot = list(classified)
        build_blocks(classified)
        assert classified == snapshot


class TestInSection:
    """Tests for the in_section helper."""

    def test_matches_case_insensitively(self):
        """Test marker matching against the section label."""
        blocks = build_document(RESUME)
        assert in_section(blocks[4], "summary")
        assert not in_section(blocks[6], "summary", "profile")

    def test_no_section(self):
        """Test blocks outside any section."""
        blocks = build_document("Plain text")
        assert not in_section(blocks[0], "summary")
