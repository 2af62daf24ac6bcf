"""
Data models for scanbook.

These models carry page text into segmentation, chapters out of it,
and edit suggestions through the correction stage.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class PageSide(Enum):
    """Which half of a scanned spread a page came from."""

    WHOLE = "whole"  # No side suffix on the source file
    LEFT = "left"
    RIGHT = "right"

    @property
    def rank(self) -> int:
        """Sort rank for pages sharing a base name."""
        return _SIDE_RANK[self]


_SIDE_RANK = {PageSide.WHOLE: 0, PageSide.LEFT: 1, PageSide.RIGHT: 2}


@dataclass(frozen=True)
class PageText:
    """OCR output for one page-half, in reading order."""

    content: str
    sequence: int  # 0-based position in the page-side stream
    source: Path | None = None
    side: PageSide = PageSide.WHOLE


@dataclass
class ChapterBuffer:
    """
    Accumulator for the chapter currently being read.

    Owned by a single ChapterSegmenter. Closed exactly once, either when
    the next chapter marker arrives or when the page stream ends.
    """

    ordinal: int
    parts: list[str] = field(default_factory=list)
    page_count: int = 0
    first_sequence: int | None = None
    is_open: bool = True

    def append(self, page: PageText, text: str) -> None:
        """Add a normalized page, keeping a newline between pages."""
        if self.first_sequence is None:
            self.first_sequence = page.sequence
        self.parts.append(text)
        if not text.endswith("\n"):
            self.parts.append("\n")
        self.page_count += 1

    @property
    def text(self) -> str:
        return "".join(self.parts)

    @property
    def is_empty(self) -> bool:
        return not self.parts


@dataclass(frozen=True)
class ChapterDocument:
    """A closed chapter, heading already normalized."""

    ordinal: int  # 1-based, in emission order
    text: str
    page_count: int = 0
    first_sequence: int | None = None

    @property
    def byte_length(self) -> int:
        """Length of the UTF-8 encoded chapter text."""
        return len(self.text.encode("utf-8"))

    @property
    def heading(self) -> str:
        """The rewritten first line, without the '# ' marker."""
        for line in self.text.split("\n"):
            if line.strip():
                return line.strip().removeprefix("# ").strip()
        return ""


@dataclass(frozen=True)
class EditSuggestion:
    """
    A replacement proposed by the correction service.

    Offsets index the text as it was sent to the service. An empty
    ``replacements`` tuple means the service flagged the span without
    suggesting a fix.
    """

    offset: int
    length: int
    replacements: tuple[str, ...] = ()
    category: str | None = None  # Informational only
    message: str | None = None
    rule_id: str | None = None

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def replacement(self) -> str | None:
        """First replacement candidate, the only one ever applied."""
        return self.replacements[0] if self.replacements else None


class SkipReason(Enum):
    """Why an edit was not applied."""

    NO_REPLACEMENT = "no_replacement"
    OUT_OF_RANGE = "out_of_range"
    OVERLAP = "overlap"


@dataclass(frozen=True)
class SkippedEdit:
    """An edit left out of the corrected text."""

    edit: EditSuggestion
    reason: SkipReason


@dataclass
class CorrectionResult:
    """Output of apply_corrections()."""

    text: str
    applied_count: int = 0
    skipped: list[SkippedEdit] = field(default_factory=list)

    def __iter__(self) -> Iterator[str | int]:
        # Allows ``text, count = apply_corrections(...)``
        yield self.text
        yield self.applied_count

    def skipped_by_reason(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for item in self.skipped:
            counts[item.reason.value] = counts.get(item.reason.value, 0) + 1
        return counts


# =============================================================================
# REPORTS
# =============================================================================


@dataclass
class SegmentationReport:
    """Summary of one segmentation pass."""

    chapters: list[ChapterDocument] = field(default_factory=list)
    chapter_paths: list[Path] = field(default_factory=list)
    combined_path: Path | None = None
    pages_seen: int = 0
    pages_skipped: list[Path] = field(default_factory=list)  # Unreadable page files

    @property
    def chapter_count(self) -> int:
        return len(self.chapters)


class ChapterStatus(Enum):
    """Outcome of correcting one chapter."""

    CORRECTED = "corrected"
    SERVICE_ERROR = "service_error"
    IO_ERROR = "io_error"


@dataclass
class ChapterCorrectionReport:
    """Outcome of correcting one chapter file."""

    chapter_path: Path
    status: ChapterStatus
    corrected_path: Path | None = None
    suggestions: int = 0
    applied: int = 0
    skipped: dict[str, int] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ChapterStatus.CORRECTED


@dataclass
class CorrectionReport:
    """Per-chapter outcomes, in chapter order."""

    chapters: list[ChapterCorrectionReport] = field(default_factory=list)

    @property
    def corrected_count(self) -> int:
        return sum(1 for c in self.chapters if c.ok)

    @property
    def failed_count(self) -> int:
        return sum(1 for c in self.chapters if not c.ok)

    @property
    def applied_total(self) -> int:
        return sum(c.applied for c in self.chapters)


@dataclass
class PipelineReport:
    """Result of a full segmentation + correction run."""

    segmentation: SegmentationReport
    correction: CorrectionReport | None = None
    correction_skipped_reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary summary of the run
        """
        result: dict[str, Any] = {
            "chapters": self.segmentation.chapter_count,
            "pages": self.segmentation.pages_seen,
            "pages_skipped": [str(p) for p in self.segmentation.pages_skipped],
            "combined": str(self.segmentation.combined_path)
            if self.segmentation.combined_path
            else None,
        }
        if self.correction is not None:
            result["correction"] = {
                "corrected": self.correction.corrected_count,
                "failed": self.correction.failed_count,
                "applied": self.correction.applied_total,
            }
        if self.correction_skipped_reason:
            result["correction_skipped"] = self.correction_skipped_reason
        return result
