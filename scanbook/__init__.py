"""
scanbook: Turn OCR'd book pages into grammar-corrected chapters.

Pages (one text blob per page-half, in reading order) are split into
chapters at strict ``Chapter N`` markers, saved as Markdown files, and then
corrected against suggestions from a LanguageTool server.

Example:
    >>> import scanbook
    >>> config = scanbook.PipelineConfig(input_dir="pages/", output_dir="chapters/")
    >>> report = scanbook.run_pipeline(config)
    >>> report.segmentation.chapter_count
    12

    >>> # Or use the pieces directly
    >>> chapters = list(scanbook.segment(pages))
    >>> text, applied = scanbook.apply_corrections(chapters[0].text, edits)
"""

__version__ = "0.1.0"

from scanbook.config import CorrectionConfig, PipelineConfig, load_config
from scanbook.correction import LanguageToolClient, OffsetUnit, apply_corrections
from scanbook.exceptions import (
    ArtifactError,
    ConfigurationError,
    InputError,
    ScanBookError,
    SegmentationError,
    ServiceError,
    ServiceUnavailableError,
)
from scanbook.models import (
    ChapterDocument,
    CorrectionResult,
    EditSuggestion,
    PageSide,
    PageText,
    PipelineReport,
    SkipReason,
)
from scanbook.normalizers import normalize_newlines
from scanbook.pipeline import correct_chapters, run_correction, run_pipeline, segment_pages
from scanbook.readers import TesseractPageReader, TextPageReader
from scanbook.segmentation import ChapterSegmenter, is_chapter_start, segment
from scanbook.writers import ChapterStore

__all__ = [
    # Main API
    "run_pipeline",
    "run_correction",
    "segment_pages",
    "correct_chapters",
    # Building blocks
    "normalize_newlines",
    "is_chapter_start",
    "segment",
    "ChapterSegmenter",
    "apply_corrections",
    "OffsetUnit",
    "LanguageToolClient",
    "TextPageReader",
    "TesseractPageReader",
    "ChapterStore",
    # Configuration
    "PipelineConfig",
    "CorrectionConfig",
    "load_config",
    # Data types
    "PageText",
    "PageSide",
    "ChapterDocument",
    "EditSuggestion",
    "CorrectionResult",
    "SkipReason",
    "PipelineReport",
    # Exceptions
    "ScanBookError",
    "InputError",
    "ArtifactError",
    "SegmentationError",
    "ServiceUnavailableError",
    "ServiceError",
    "ConfigurationError",
]
