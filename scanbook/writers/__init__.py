"""Chapter artifact storage."""

from scanbook.writers.artifacts import (
    CHAPTER_SEPARATOR,
    ChapterStore,
    chapter_filename,
    chapter_ordinal,
    corrected_path,
)

__all__ = [
    "CHAPTER_SEPARATOR",
    "ChapterStore",
    "chapter_filename",
    "chapter_ordinal",
    "corrected_path",
]
