"""Unicode-capable fonts for measuring and drawing document text.

Text is set in Noto Sans (from the pymupdf-fonts package). Characters Noto
Sans has no glyph for, CJK in particular, fall back to PyMuPDF's built-in
CJK font, so a single line may be drawn as several font runs.
"""

from functools import lru_cache

import fitz  # PyMuPDF

# PageElement font keys -> PyMuPDF font names
FONTS = {"regular": "notos", "bold": "notosbo"}

FALLBACK_FONT = "cjk"


@lru_cache(maxsize=None)
def load_font(name: str) -> fitz.Font:
    return fitz.Font(name)


def font_runs(text: str, font: str = "regular") -> list[tuple[fitz.Font, str]]:
    """Split text into consecutive runs that one font can draw.

    Args:
        text: Text of a single line.
        font: One of the FONTS keys.

    Returns:
        (font, run) pairs in reading order. Characters no font covers stay
        with the primary font.
    """
    primary = load_font(FONTS.get(font, FONTS["regular"]))
    runs: list[tuple[fitz.Font, str]] = []
    for char in text:
        chosen = primary
        if not primary.has_glyph(ord(char)):
            fallback = load_font(FALLBACK_FONT)
            if fallback.has_glyph(ord(char)):
                chosen = fallback
        if runs and runs[-1][0] is chosen:
            runs[-1] = (chosen, runs[-1][1] + char)
        else:
            runs.append((chosen, char))
    return runs


def text_length_pt(text: str, font: str, size: float) -> float:
    """Advance width of a line in points, summed over its font runs."""
    return sum(f.text_length(run, fontsize=size) for f, run in font_runs(text, font))
