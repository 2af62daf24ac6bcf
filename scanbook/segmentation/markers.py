"""
Chapter marker detection and heading normalization.

The marker rule is narrow: a page starts a chapter only when
its first non-blank line is exactly ``Chapter`` followed by a 1-3 digit
number. Running heads, section titles and OCR noise such as
``Chapter 12: Storm`` or ``chapter 1`` never open a new chapter.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

CHAPTER_PREFIX = "Chapter "
MAX_CHAPTER_DIGITS = 3
ASCII_DIGITS = frozenset("0123456789")

HEADING_MARK = "#"
MAX_HEADING_MARKS = 3


# =============================================================================
# MARKER DETECTION
# =============================================================================


def first_non_blank_line(text: str) -> str:
    """Return the first line with non-whitespace content, trimmed ("" if none)."""
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped:
            return stripped
    return ""


def is_chapter_start(text: str) -> bool:
    """
    Check whether a page opens a new chapter.

    Args:
        text: Normalized page text.

    Returns:
        True if the first non-blank line is ``Chapter <1-3 ASCII digits>``.

    Example:
        >>> is_chapter_start("Chapter 7\\nIt was raining.")
        True
        >>> is_chapter_start("Chapter 7: The Storm")
        False
    """
    line = first_non_blank_line(text)
    if not line.startswith(CHAPTER_PREFIX):
        return False

    number = line[len(CHAPTER_PREFIX) :].strip()
    # str.isdigit() accepts non-ASCII digits such as "١٢"
    return 0 < len(number) <= MAX_CHAPTER_DIGITS and all(ch in ASCII_DIGITS for ch in number)


# =============================================================================
# HEADING NORMALIZATION
# =============================================================================


def _strip_heading_marks(line: str) -> str:
    stripped = line.strip()
    marks = 0
    while marks < MAX_HEADING_MARKS and stripped.startswith(HEADING_MARK):
        stripped = stripped[1:]
        marks += 1
    return stripped.strip()


def normalize_heading(text: str) -> str:
    """
    Rewrite the first non-blank line as a level-1 Markdown heading.

    Up to three existing ``#`` marks are stripped before the ``# `` prefix
    is added. All other lines, including leading blank lines, are kept.

    Args:
        text: Accumulated chapter text.

    Returns:
        Text with its first non-blank line turned into ``# <line>``.
    """
    lines = text.split("\n")
    for index, line in enumerate(lines):
        if line.strip():
            lines[index] = f"# {_strip_heading_marks(line)}"
            return "\n".join(lines)

    logger.debug("No non-blank line to use as heading")
    return text
