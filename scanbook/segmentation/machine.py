"""
Streaming chapter segmentation.

Pages arrive one at a time in reading order. The segmenter holds exactly
one open ChapterBuffer and decides from the current page alone whether it
starts a new chapter. No lookahead, no reordering.

State transitions:

    NO_CHAPTER_OPEN --page--> CHAPTER_OPEN
    CHAPTER_OPEN --first marker--> CHAPTER_OPEN (earlier pages stay in chapter 1)
    CHAPTER_OPEN --later marker--> emit current, CHAPTER_OPEN (new buffer)
    CHAPTER_OPEN --plain page--> CHAPTER_OPEN (append)
    any --finish()--> emit current, FINISHED
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from enum import Enum

from scanbook.exceptions import SegmentationError
from scanbook.models import ChapterBuffer, ChapterDocument, PageText
from scanbook.normalizers import normalize_newlines
from scanbook.segmentation.markers import (
    first_non_blank_line,
    is_chapter_start,
    normalize_heading,
)

logger = logging.getLogger(__name__)


class SegmenterState(Enum):
    """Lifecycle of a ChapterSegmenter."""

    NO_CHAPTER_OPEN = "no_chapter_open"
    CHAPTER_OPEN = "chapter_open"
    FINISHED = "finished"


class ChapterSegmenter:
    """
    Turns an ordered stream of page texts into chapter documents.

    Pages before the first chapter marker are folded into chapter 1, so the
    first marker never closes a chapter; every later marker does.
    Empty buffers are dropped without consuming an ordinal.

    Attributes:
        on_emit: Optional sink called with every emitted ChapterDocument.
        state: Current SegmenterState.
        pages_seen: Number of pages fed so far.

    Example:
        >>> segmenter = ChapterSegmenter()
        >>> segmenter.feed(PageText("Chapter 1\\nIt begins.", 0))
        >>> segmenter.feed(PageText("Chapter 2\\nIt goes on.", 1)).ordinal
        1
        >>> segmenter.finish().heading
        'Chapter 2'
    """

    def __init__(self, on_emit: Callable[[ChapterDocument], None] | None = None) -> None:
        self.on_emit = on_emit
        self.state = SegmenterState.NO_CHAPTER_OPEN
        self.pages_seen = 0
        self._buffer: ChapterBuffer | None = None
        self._emitted = 0
        self._markers_seen = 0

    @property
    def chapters_emitted(self) -> int:
        return self._emitted

    @property
    def buffer(self) -> ChapterBuffer | None:
        """The open chapter buffer, if any."""
        return self._buffer

    def feed(self, page: PageText) -> ChapterDocument | None:
        """
        Consume one page.

        Args:
            page: Next page in reading order.

        Returns:
            The chapter closed by this page, or None.

        Raises:
            SegmentationError: If called after finish().
        """
        if self.state is SegmenterState.FINISHED:
            raise SegmentationError("Cannot feed pages to a finished segmenter")

        self.pages_seen += 1
        text = normalize_newlines(page.content)
        emitted = None

        if is_chapter_start(text):
            first_marker = self._markers_seen == 0
            self._markers_seen += 1
            logger.info(
                "Chapter start detected at page %d (%s): %s",
                page.sequence,
                page.source.name if page.source else page.side.value,
                first_non_blank_line(text),
            )
            if not first_marker:
                emitted = self._close()
                self._open()

        if self._buffer is None:
            self._open()

        self._buffer.append(page, text)
        return emitted

    def finish(self) -> ChapterDocument | None:
        """
        Flush the open buffer at end of stream.

        Returns:
            The final chapter, or None if nothing was buffered.
        """
        if self.state is SegmenterState.FINISHED:
            return None

        emitted = self._close()
        self.state = SegmenterState.FINISHED
        logger.debug(
            "Segmentation finished: %d pages, %d markers, %d chapters",
            self.pages_seen,
            self._markers_seen,
            self._emitted,
        )
        return emitted

    def _open(self) -> None:
        self._buffer = ChapterBuffer(ordinal=self._emitted + 1)
        self.state = SegmenterState.CHAPTER_OPEN

    def _close(self) -> ChapterDocument | None:
        buffer = self._buffer
        self._buffer = None
        if buffer is None:
            return None

        buffer.is_open = False
        if buffer.is_empty:
            return None

        self._emitted += 1
        document = ChapterDocument(
            ordinal=self._emitted,
            text=normalize_heading(buffer.text),
            page_count=buffer.page_count,
            first_sequence=buffer.first_sequence,
        )
        logger.debug(
            "Closed chapter %d: %d pages, %d bytes",
            document.ordinal,
            document.page_count,
            document.byte_length,
        )
        if self.on_emit is not None:
            self.on_emit(document)
        return document


def segment(
    pages: Iterable[PageText],
    on_emit: Callable[[ChapterDocument], None] | None = None,
) -> Iterator[ChapterDocument]:
    """
    Segment a page stream, yielding chapters as they close.

    The input is consumed once, lazily. The last chapter is yielded after
    the stream is exhausted.

    Args:
        pages: Pages in reading order.
        on_emit: Optional sink called before each chapter is yielded.

    Yields:
        ChapterDocument objects with ordinals 1, 2, 3, ...
    """
    segmenter = ChapterSegmenter(on_emit=on_emit)
    for page in pages:
        document = segmenter.feed(page)
        if document is not None:
            yield document

    final = segmenter.finish()
    if final is not None:
        yield final
