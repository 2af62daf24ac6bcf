"""
Ordered page producers.

A page directory holds one file per page-half. Files sort by name, and
for a given spread the left half comes before the right half:

    spread_001_left.txt, spread_001_right.txt, spread_002_left.txt, ...

Readers are lazy and single-pass: pages are read as the consumer asks for
them, so segmentation never holds more than the current page in memory.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

from scanbook.exceptions import InputError
from scanbook.models import PageSide, PageText

logger = logging.getLogger(__name__)


# "<base>_left" / "<base>-right" (case-insensitive side suffix)
SIDE_SUFFIX = re.compile(r"^(?P<base>.+?)[_-](?P<side>left|right)$", re.IGNORECASE)


def split_side(path: Path) -> tuple[str, PageSide]:
    """
    Split a page file name into its spread name and side.

    Example:
        >>> split_side(Path("kindle_004_right.txt"))
        ('kindle_004', <PageSide.RIGHT: 'right'>)
    """
    match = SIDE_SUFFIX.match(path.stem)
    if match is None:
        return path.stem, PageSide.WHOLE
    return match.group("base"), PageSide(match.group("side").lower())


def page_sort_key(path: Path) -> tuple[str, int, str]:
    """Sort by spread name, then side (whole, left, right), then full name."""
    base, side = split_side(path)
    return base, side.rank, path.name


class PageReader(ABC):
    """
    Base class for directory-backed page producers.

    Subclasses implement _read() for a single file. Enumeration and
    ordering are shared.

    Attributes:
        input_dir: Directory holding one file per page-half.
        pattern: Glob selecting page files.
        skipped: Files that could not be read, with the error message.
    """

    pattern = "*"

    def __init__(self, input_dir: str | Path, pattern: str | None = None) -> None:
        self.input_dir = Path(input_dir)
        if pattern is not None:
            self.pattern = pattern
        self.skipped: list[tuple[Path, str]] = []

    def list_files(self) -> list[Path]:
        """
        List page files in reading order.

        Raises:
            InputError: If the directory is missing or cannot be listed.
        """
        if not self.input_dir.is_dir():
            raise InputError(f"Input directory not found: {self.input_dir}")
        try:
            files = [p for p in self.input_dir.glob(self.pattern) if p.is_file()]
        except OSError as e:
            raise InputError(f"Cannot list {self.input_dir}: {e}") from e
        return sorted(files, key=page_sort_key)

    def __iter__(self) -> Iterator[PageText]:
        return self.pages()

    def pages(self) -> Iterator[PageText]:
        """
        Yield pages in reading order.

        Files that fail to read are logged and skipped; their sequence
        numbers are not reused.
        """
        files = self.list_files()
        logger.info("Found %d page files in %s", len(files), self.input_dir)

        for sequence, path in enumerate(files):
            try:
                content = self._read(path)
            except OSError as e:
                logger.warning("Cannot read page %s: %s", path.name, e)
                self.skipped.append((path, str(e)))
                continue

            _, side = split_side(path)
            yield PageText(content=content, sequence=sequence, source=path, side=side)

    @abstractmethod
    def _read(self, path: Path) -> str:
        """Return the raw text of one page file."""


class TextPageReader(PageReader):
    """
    Reads pages that were already OCR'd to text files.

    Example:
        >>> reader = TextPageReader("ocr_pages/")
        >>> for page in reader:
        ...     print(page.sequence, page.source.name)
    """

    pattern = "*.txt"

    def __init__(
        self,
        input_dir: str | Path,
        pattern: str | None = None,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(input_dir, pattern)
        self.encoding = encoding

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as e:
            # Surface as a per-page read failure
            raise OSError(f"not valid {self.encoding}: {e}") from e
