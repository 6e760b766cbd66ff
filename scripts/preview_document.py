#!/usr/bin/env python3
"""Verification script for document structure inference.

Usage:
    python scripts/preview_document.py <text_path> [--kind resume|cover_letter] [--pdf OUT_DIR]

Prints every classified block for manual verification and optionally
writes the exported PDF.
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from resume_render_server.render import DocumentKind, build_document, export_pdf

TYPE_MARKERS = {
    "heading": "[H]",
    "name_header": "[N]",
    "contact_block": "[C]",
    "section_label": "[S]",
    "bullet_item": "[•]",
    "employer_or_date_line": "[E]",
    "summary_paragraph": "[Σ]",
    "body_paragraph": "[P]",
    "greeting": "[G]",
    "closing": "[X]",
    "signature": "[~]",
    "date_line": "[D]",
    "blank": "[ ]",
}


def main():
    parser = argparse.ArgumentParser(description="Verify document structure inference")
    parser.add_argument("text_path", help="Path to a plain-text résumé or cover letter")
    parser.add_argument(
        "--kind",
        choices=[k.value for k in DocumentKind],
        default=DocumentKind.RESUME.value,
        help="Document kind (default: resume)",
    )
    parser.add_argument("--pdf", metavar="OUT_DIR", help="Also export a PDF into OUT_DIR")
    args = parser.parse_args()

    text_path = Path(args.text_path)
    if not text_path.exists():
        print(f"Error: File not found: {text_path}")
        sys.exit(1)

    kind = DocumentKind(args.kind)
    text = text_path.read_text(encoding="utf-8")

    print(f"Classifying: {text_path} ({kind.value})")
    print("=" * 80)

    blocks = build_document(text, kind)
    for block in blocks:
        marker = TYPE_MARKERS.get(block.kind.value, "[?]")
        indent = "  " * (block.indent_level or 0)
        section = f" <{block.section}>" if block.section else ""
        display = block.text[:100] + "..." if len(block.text) > 100 else block.text
        print(f"  {block.position:>3} {marker} {indent}{display}{section}")

    print("=" * 80)
    print(f"Total blocks: {len(blocks)}")

    if args.pdf:
        out_dir = Path(args.pdf)
        out_dir.mkdir(parents=True, exist_ok=True)
        exported = export_pdf(text, kind)
        out_path = out_dir / exported.filename
        out_path.write_bytes(exported.content)
        print(f"Wrote {out_path} ({exported.page_count} pages)")


if __name__ == "__main__":
    main()
