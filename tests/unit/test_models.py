"""
Unit tests for scanbook core data models.
"""

import json
from pathlib import Path

import pytest

from scanbook.models import (
    ChapterBuffer,
    ChapterCorrectionReport,
    ChapterDocument,
    ChapterStatus,
    CorrectionReport,
    CorrectionResult,
    EditSuggestion,
    PageSide,
    PageText,
    PipelineReport,
    SegmentationReport,
    SkippedEdit,
    SkipReason,
)


class TestPageText:
    def test_defaults(self):
        page = PageText("text", 3)

        assert page.source is None
        assert page.side is PageSide.WHOLE

    def test_frozen(self):
        page = PageText("text", 0)

        with pytest.raises(AttributeError):
            page.content = "other"

    def test_side_rank(self):
        assert PageSide.WHOLE.rank < PageSide.LEFT.rank < PageSide.RIGHT.rank


class TestChapterBuffer:
    """Tests for the open-chapter accumulator."""

    def test_append_adds_missing_newline(self):
        buffer = ChapterBuffer(ordinal=1)

        buffer.append(PageText("a", 4), "a")
        buffer.append(PageText("b\n", 5), "b\n")

        assert buffer.text == "a\nb\n"
        assert buffer.page_count == 2
        assert buffer.first_sequence == 4

    def test_empty(self):
        buffer = ChapterBuffer(ordinal=1)

        assert buffer.is_empty
        assert buffer.text == ""

    def test_blank_page_still_counts(self):
        buffer = ChapterBuffer(ordinal=1)

        buffer.append(PageText("", 0), "")

        assert not buffer.is_empty
        assert buffer.text == "\n"


class TestChapterDocument:
    def test_byte_length_is_utf8(self):
        doc = ChapterDocument(1, "# Chapter 1\ncafé\n")

        assert doc.byte_length == len("# Chapter 1\ncafé\n".encode("utf-8"))
        assert doc.byte_length == len(doc.text) + 1

    @pytest.mark.parametrize(
        "text,heading",
        [
            ("# Chapter 3\nBody\n", "Chapter 3"),
            ("\n\n# Prologue\n", "Prologue"),
            ("\n\n", ""),
        ],
    )
    def test_heading(self, text, heading):
        assert ChapterDocument(1, text).heading == heading


class TestEditSuggestion:
    def test_end_and_replacement(self):
        edit = EditSuggestion(offset=4, length=3, replacements=("the", "tea"))

        assert edit.end == 7
        assert edit.replacement == "the"

    def test_no_replacement(self):
        assert EditSuggestion(offset=0, length=1).replacement is None


class TestCorrectionResult:
    def test_unpacks_to_text_and_count(self):
        text, count = CorrectionResult("fixed", applied_count=2)

        assert text == "fixed"
        assert count == 2

    def test_skipped_by_reason(self):
        edit = EditSuggestion(0, 1)
        result = CorrectionResult(
            "x",
            skipped=[
                SkippedEdit(edit, SkipReason.OVERLAP),
                SkippedEdit(edit, SkipReason.OVERLAP),
                SkippedEdit(edit, SkipReason.NO_REPLACEMENT),
            ],
        )

        assert result.skipped_by_reason() == {"overlap": 2, "no_replacement": 1}


class TestReports:
    """Tests for run summaries."""

    def make_correction(self):
        return CorrectionReport(
            chapters=[
                ChapterCorrectionReport(Path("chapter_01.md"), ChapterStatus.CORRECTED, applied=3),
                ChapterCorrectionReport(
                    Path("chapter_02.md"), ChapterStatus.SERVICE_ERROR, error="timed out"
                ),
                ChapterCorrectionReport(Path("chapter_03.md"), ChapterStatus.CORRECTED, applied=1),
            ]
        )

    def test_correction_counts(self):
        report = self.make_correction()

        assert report.corrected_count == 2
        assert report.failed_count == 1
        assert report.applied_total == 4

    def test_pipeline_to_dict_is_json_serializable(self):
        segmentation = SegmentationReport(
            chapters=[ChapterDocument(1, "# A\n"), ChapterDocument(2, "# B\n")],
            combined_path=Path("out/book.md"),
            pages_seen=7,
        )
        report = PipelineReport(segmentation=segmentation, correction=self.make_correction())

        data = json.loads(json.dumps(report.to_dict()))

        assert data["chapters"] == 2
        assert data["pages"] == 7
        assert data["pages_skipped"] == []
        assert data["combined"] == str(Path("out/book.md"))
        assert data["correction"] == {"corrected": 2, "failed": 1, "applied": 4}
        assert "correction_skipped" not in data

    def test_pipeline_to_dict_skipped(self):
        report = PipelineReport(
            segmentation=SegmentationReport(),
            correction_skipped_reason="LanguageTool is not running",
        )

        data = report.to_dict()

        assert data["combined"] is None
        assert "correction" not in data
        assert data["correction_skipped"] == "LanguageTool is not running"
