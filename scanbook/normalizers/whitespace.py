"""
Whitespace normalization for OCR page text.

Tesseract output separates blocks with long runs of blank lines. Both the
segmentation and correction stages expect at most one blank line between
paragraphs, so every page passes through normalize_newlines() first.
"""

from __future__ import annotations

import re

# Three or more newlines in a row
NEWLINE_RUN = re.compile(r"\n{3,}")

PARAGRAPH_BREAK = "\n\n"


def normalize_newlines(text: str) -> str:
    """
    Collapse every run of 3+ newlines to exactly two.

    Single pass over the input, so long runs cost the same as short ones.
    Other whitespace (spaces, tabs, ``\\r``) is left untouched, which keeps
    the function idempotent.

    Args:
        text: Raw page or chapter text.

    Returns:
        Text with no more than one blank line between paragraphs.

    Example:
        >>> normalize_newlines("one\\n\\n\\n\\ntwo")
        'one\\n\\ntwo'
    """
    return NEWLINE_RUN.sub(PARAGRAPH_BREAK, text)
