"""
Pipeline driver.

Runs the two batch stages in order:
1. Segmentation: pages -> ChapterSegmenter -> chapter files + combined book
2. Correction: chapter files -> LanguageTool -> apply_corrections -> *_corrected.md

Segmentation finishes and persists before correction starts, and the
correction stage reads chapters back from disk. A dead correction service
therefore leaves a complete, usable set of chapter files.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from scanbook.correction.applier import OffsetUnit, apply_corrections
from scanbook.correction.languagetool import LanguageToolClient
from scanbook.exceptions import ArtifactError, ServiceError, ServiceUnavailableError
from scanbook.models import (
    ChapterCorrectionReport,
    ChapterStatus,
    CorrectionReport,
    PageText,
    PipelineReport,
    SegmentationReport,
)
from scanbook.readers.images import TesseractPageReader
from scanbook.readers.pages import PageReader, TextPageReader
from scanbook.segmentation.machine import segment
from scanbook.writers.artifacts import ChapterStore

if TYPE_CHECKING:
    from scanbook.config import CorrectionConfig, PipelineConfig

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Segmentation stage
# ═══════════════════════════════════════════════════════════════════════════════


def segment_pages(pages: Iterable[PageText], store: ChapterStore) -> SegmentationReport:
    """
    Split a page stream into chapters and persist them.

    A chapter that cannot be written is logged and left out of the
    report; the remaining chapters are still written. When pages come
    from a PageReader, the files it could not read are listed in
    ``report.pages_skipped``.

    Args:
        pages: Pages in reading order (consumed once).
        store: Destination for chapter artifacts.

    Returns:
        SegmentationReport listing the chapters written.

    Raises:
        ArtifactError: If the output directory cannot be prepared.
    """
    store.prepare()
    report = SegmentationReport(combined_path=store.combined_path)

    def count_pages(stream: Iterable[PageText]) -> Iterable[PageText]:
        for page in stream:
            report.pages_seen += 1
            yield page

    for document in segment(count_pages(pages)):
        try:
            path = store.write_chapter(document)
        except ArtifactError as e:
            logger.error("Failed to save chapter %d: %s", document.ordinal, e)
            continue
        report.chapters.append(document)
        report.chapter_paths.append(path)

    if isinstance(pages, PageReader):
        report.pages_skipped = [path for path, _ in pages.skipped]
        if report.pages_skipped:
            logger.warning(
                "Skipped %d unreadable page files: %s",
                len(report.pages_skipped),
                ", ".join(p.name for p in report.pages_skipped),
            )

    if report.pages_seen == 0:
        logger.warning("No pages found; no chapters written")
    logger.info(
        "Segmentation complete: %d pages -> %d chapters (%s)",
        report.pages_seen,
        report.chapter_count,
        store.combined_path,
    )
    return report


# ═══════════════════════════════════════════════════════════════════════════════
# Correction stage
# ═══════════════════════════════════════════════════════════════════════════════


def correct_chapter(
    chapter_path: Path,
    client: LanguageToolClient,
    store: ChapterStore,
    unit: OffsetUnit | None = None,
) -> ChapterCorrectionReport:
    """
    Correct one chapter file.

    Service and file errors are recorded in the returned report instead of
    being raised, so sibling chapters are unaffected.

    Args:
        chapter_path: Raw chapter file.
        client: Correction service (anything with check() and offset_unit).
        store: Store used to read the chapter and write its corrected variant.
        unit: Offset unit override; defaults to the client's.

    Returns:
        ChapterCorrectionReport for this chapter.
    """
    unit = unit or client.offset_unit

    try:
        text = store.read_chapter(chapter_path)
    except ArtifactError as e:
        return ChapterCorrectionReport(chapter_path, ChapterStatus.IO_ERROR, error=str(e))

    try:
        suggestions = client.check(text)
    except ServiceError as e:
        return ChapterCorrectionReport(chapter_path, ChapterStatus.SERVICE_ERROR, error=str(e))

    result = apply_corrections(text, suggestions, unit)

    try:
        output = store.write_corrected(chapter_path, result.text)
    except ArtifactError as e:
        return ChapterCorrectionReport(
            chapter_path,
            ChapterStatus.IO_ERROR,
            suggestions=len(suggestions),
            applied=result.applied_count,
            error=str(e),
        )

    return ChapterCorrectionReport(
        chapter_path,
        ChapterStatus.CORRECTED,
        corrected_path=output,
        suggestions=len(suggestions),
        applied=result.applied_count,
        skipped=result.skipped_by_reason(),
    )


def _log_chapter(report: ChapterCorrectionReport) -> None:
    name = report.chapter_path.name
    if report.ok:
        logger.info(
            "%s: %d suggestions, %d corrections applied -> %s",
            name,
            report.suggestions,
            report.applied,
            report.corrected_path.name,
        )
        if report.skipped:
            logger.debug("%s: skipped %s", name, report.skipped)
    else:
        logger.error("Error correcting %s: %s", name, report.error)


def correct_chapters(
    store: ChapterStore,
    client: LanguageToolClient,
    max_workers: int = 1,
    unit: OffsetUnit | None = None,
    chapter_paths: list[Path] | None = None,
) -> CorrectionReport:
    """
    Correct every chapter file in a store.

    The service is probed once before any chapter is submitted. Chapters
    are independent; with ``max_workers > 1`` they run in a thread pool,
    and results are still reported in chapter order.

    Args:
        store: Store holding the chapter files.
        client: Correction service.
        max_workers: Chapters corrected concurrently.
        unit: Offset unit override.
        chapter_paths: Explicit chapter files (defaults to store.list_chapters()).

    Returns:
        CorrectionReport with one entry per chapter, in chapter order.

    Raises:
        ServiceUnavailableError: If the liveness probe fails.
    """
    client.ensure_available()

    paths = chapter_paths if chapter_paths is not None else store.list_chapters()
    report = CorrectionReport()
    if not paths:
        logger.warning("No chapter files found in %s. Run segmentation first.", store.output_dir)
        return report

    logger.info("Correcting %d chapter files", len(paths))

    if max_workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # map() yields in submission order
            results = executor.map(lambda p: correct_chapter(p, client, store, unit), paths)
            for chapter_report in results:
                _log_chapter(chapter_report)
                report.chapters.append(chapter_report)
    else:
        for path in paths:
            logger.info("Processing %s...", path.name)
            chapter_report = correct_chapter(path, client, store, unit)
            _log_chapter(chapter_report)
            report.chapters.append(chapter_report)

    logger.info(
        "Correction complete: %d corrected, %d failed, %d edits applied",
        report.corrected_count,
        report.failed_count,
        report.applied_total,
    )
    return report


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════


def create_reader(config: PipelineConfig) -> PageReader:
    """Build the page reader matching config.input_format."""
    if config.input_dir is None:
        raise ValueError("input_dir is required to read pages")
    if config.input_format == "image":
        return TesseractPageReader(
            config.input_dir, pattern=config.page_pattern, lang=config.ocr_language
        )
    return TextPageReader(config.input_dir, pattern=config.page_pattern, encoding=config.encoding)


def create_client(config: CorrectionConfig) -> LanguageToolClient:
    return LanguageToolClient(
        base_url=config.base_url,
        language=config.language,
        timeout=config.timeout,
    )


def create_store(config: PipelineConfig) -> ChapterStore:
    return ChapterStore(
        config.output_dir,
        combined_filename=config.combined_filename,
        encoding=config.encoding,
    )


def run_correction(
    config: PipelineConfig,
    client: LanguageToolClient | None = None,
) -> CorrectionReport:
    """
    Run only the correction stage over an existing output directory.

    Raises:
        ServiceUnavailableError: If the correction service is down.
    """
    client = client or create_client(config.correction)
    return correct_chapters(
        create_store(config),
        client,
        max_workers=config.correction.max_workers,
        unit=OffsetUnit(config.correction.offset_unit),
    )


def run_pipeline(
    config: PipelineConfig,
    pages: Iterable[PageText] | None = None,
    client: LanguageToolClient | None = None,
) -> PipelineReport:
    """
    Segment pages into chapters, then correct each chapter.

    Args:
        config: Run configuration.
        pages: Page stream; read from config.input_dir when omitted.
        client: Correction service; built from config.correction when omitted.

    Returns:
        PipelineReport. If the correction service is unavailable the
        correction stage is skipped and the reason recorded.

    Raises:
        InputError: If the input directory cannot be enumerated.
        ArtifactError: If the output directory cannot be prepared.

    Example:
        >>> config = PipelineConfig(input_dir="pages/", output_dir="chapters/")
        >>> report = run_pipeline(config)
        >>> report.segmentation.chapter_count
        12
    """
    store = create_store(config)
    if pages is None:
        pages = create_reader(config)

    segmentation = segment_pages(pages, store)
    report = PipelineReport(segmentation=segmentation)

    if not config.correction.enabled:
        report.correction_skipped_reason = "correction disabled"
        return report

    client = client or create_client(config.correction)
    try:
        report.correction = correct_chapters(
            store,
            client,
            max_workers=config.correction.max_workers,
            unit=OffsetUnit(config.correction.offset_unit),
            chapter_paths=segmentation.chapter_paths,
        )
    except ServiceUnavailableError as e:
        logger.error("%s\n%s", e, client.start_instructions())
        logger.warning("Skipping correction; chapter files in %s are still valid", store.output_dir)
        report.correction_skipped_reason = str(e)

    return report
