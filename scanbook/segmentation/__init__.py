"""
Chapter segmentation for OCR'd books.

Example:
    >>> from scanbook.segmentation import segment
    >>> from scanbook.models import PageText
    >>> pages = [PageText("Chapter 1\\nBody A", 0), PageText("Chapter 2\\nBody B", 1)]
    >>> [doc.heading for doc in segment(pages)]
    ['Chapter 1', 'Chapter 2']
"""

from scanbook.segmentation.machine import ChapterSegmenter, SegmenterState, segment
from scanbook.segmentation.markers import (
    first_non_blank_line,
    is_chapter_start,
    normalize_heading,
)

__all__ = [
    "ChapterSegmenter",
    "SegmenterState",
    "segment",
    "first_non_blank_line",
    "is_chapter_start",
    "normalize_heading",
]
