"""Tests for PDF painting and export."""

from datetime import date

import fitz  # PyMuPDF
import pytest

from resume_render_server.render import (
    DocumentKind,
    build_document,
    export_pdf,
    layout_document,
    render_pdf,
)
from resume_render_server.render.fonts import (
    FALLBACK_FONT,
    FONTS,
    font_runs,
    load_font,
    text_length_pt,
)

TODAY = date(2025, 3, 12)

RESUME = "\n".join(
    [
        "*[Jane Doe]*",
        "jane@example.com | 555 0100",
        "",
        "**Experience**",
        "Acme Inc - 2019 to 2023",
        "- Built systems",
        "- **Led** teams",
    ]
)


@pytest.fixture
def long_resume() -> str:
    bullets = [f"- Delivered project number {n} on time" for n in range(120)]
    return "\n".join(["**Jane Doe**", "", "**Experience**", *bullets])


def open_pdf(content: bytes) -> fitz.Document:
    return fitz.open(stream=content, filetype="pdf")


class TestRenderPdf:
    """Tests for render_pdf function."""

    def test_returns_pdf_bytes(self):
        """Test that output is a PDF file."""
        content = render_pdf(layout_document(build_document(RESUME)))
        assert content.startswith(b"%PDF-")

    def test_a4_pages(self):
        """Test page size is A4 portrait."""
        doc = open_pdf(render_pdf(layout_document(build_document(RESUME))))
        try:
            assert doc.page_count == 1
            rect = doc[0].rect
            assert rect.width == pytest.approx(595.28, abs=0.5)
            assert rect.height == pytest.approx(841.89, abs=0.5)
        finally:
            doc.close()

    def test_page_count_matches_layout(self, long_resume):
        """Test that every laid-out page is allocated."""
        layout = layout_document(build_document(long_resume))
        doc = open_pdf(render_pdf(layout))
        try:
            assert layout.page_count > 1
            assert doc.page_count == layout.page_count
        finally:
            doc.close()

    def test_footer_text_on_every_page(self, long_resume):
        """Test that each page carries its own footer."""
        layout = layout_document(build_document(long_resume))
        doc = open_pdf(render_pdf(layout))
        try:
            for number, page in enumerate(doc, start=1):
                text = page.get_text()
                assert f"Page {number} of {doc.page_count}" in text
        finally:
            doc.close()

    def test_text_is_drawn_without_markers(self):
        """Test that display text reaches the page without markdown markers."""
        doc = open_pdf(render_pdf(layout_document(build_document(RESUME))))
        try:
            text = doc[0].get_text()
            assert "Jane Doe" in text
            assert "Built systems" in text
            assert "Led teams" in text
            assert "**" not in text
        finally:
            doc.close()


class TestExportPdf:
    """Tests for the export pipeline."""

    def test_filename_from_placeholder(self):
        """Test filename derived from the candidate placeholder."""
        exported = export_pdf(RESUME)
        assert exported.filename == "Jane_Doe_Resume.pdf"
        assert exported.page_count == 1

    def test_generic_filenames(self):
        """Test fallback filenames when no name is detectable."""
        assert export_pdf("Experienced engineer.").filename == "Professional_Resume.pdf"
        letter = export_pdf("Dear Team,\nHello.", DocumentKind.COVER_LETTER, today=TODAY)
        assert letter.filename == "Professional_Cover_Letter.pdf"

    def test_cover_letter_filename(self):
        """Test cover-letter suffix with a detected sender."""
        exported = export_pdf(
            "**John Smith**\nDear Team,\nSincerely,\nJohn", DocumentKind.COVER_LETTER, today=TODAY
        )
        assert exported.filename == "John_Smith_Cover_Letter.pdf"

    def test_idempotent(self):
        """Test that exporting the same text twice gives identical bytes."""
        first = export_pdf(RESUME, today=TODAY)
        second = export_pdf(RESUME, today=TODAY)
        assert first.content == second.content

    def test_empty_text_still_renders(self):
        """Test that empty input degrades to a header-only page."""
        exported = export_pdf("")
        assert exported.page_count == 1
        assert exported.filename == "Professional_Resume.pdf"


class TestUnicodeText:
    """Tests for text outside the basic Latin range."""

    def page_text(self, text: str) -> str:
        doc = open_pdf(export_pdf(text).content)
        try:
            return doc[0].get_text()
        finally:
            doc.close()

    def test_dashes_and_quotes(self):
        """Test typographic dashes and apostrophes reach the page intact."""
        text = self.page_text("Intro\nAcme Corp — 2019–2023\n- Led the team’s migration")
        assert "Acme Corp — 2019–2023" in text
        assert "Led the team’s migration" in text
        assert "·" not in text

    def test_extended_latin_and_cjk(self):
        """Test accented Latin and CJK characters."""
        text = self.page_text("Intro\n构建系统 Łódź “quoted”")
        assert "构建系统" in text
        assert "Łódź “quoted”" in text

    def test_unicode_name_in_header(self):
        """Test a non-Latin-1 candidate name in the header band."""
        text = self.page_text("*[Łukasz Nowak]*\n- Built systems")
        assert "Łukasz Nowak" in text


class TestFonts:
    """Tests for font run splitting and measuring."""

    def test_latin_is_single_run(self):
        """Test that Latin text with punctuation needs one font."""
        runs = font_runs("Acme Corp — 2019–2023 team’s")
        assert len(runs) == 1
        assert runs[0][0] is load_font(FONTS["regular"])

    def test_cjk_falls_back(self):
        """Test that CJK characters switch to the fallback font."""
        runs = font_runs("Built 构建系统 fast")
        assert [run for _, run in runs] == ["Built ", "构建系统", " fast"]
        assert runs[1][0] is load_font(FALLBACK_FONT)

    def test_bold_uses_bold_font(self):
        """Test the bold font key."""
        assert font_runs("Acme", "bold")[0][0] is load_font(FONTS["bold"])

    def test_width_sums_runs(self):
        """Test that mixed-script widths add up per run."""
        size = 10.0
        expected = load_font(FONTS["regular"]).text_length("ab ", fontsize=size) + load_font(
            FALLBACK_FONT
        ).text_length("构建", fontsize=size)
        assert text_length_pt("ab 构建", "regular", size) == pytest.approx(expected)
        assert text_length_pt("—", "regular", size) > 0
