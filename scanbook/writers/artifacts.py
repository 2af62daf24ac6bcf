"""
Chapter artifact storage.

Layout of an output directory:

    chapter_01.md            raw chapter, heading normalized
    chapter_01_corrected.md  same chapter after grammar correction
    ...
    book.md                  all raw chapters, separated by '---' rules

The correction stage works from these files, not from in-memory chapters,
so it can be rerun on its own.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from scanbook.exceptions import ArtifactError
from scanbook.models import ChapterDocument

logger = logging.getLogger(__name__)


CHAPTER_GLOB = "chapter_*.md"
CHAPTER_NAME = re.compile(r"^chapter_(?P<ordinal>\d+)\.md$")
CORRECTED_SUFFIX = "_corrected"
DEFAULT_COMBINED_FILENAME = "book.md"

# A '---' line with a blank line on each side
CHAPTER_SEPARATOR = "\n\n---\n\n"


def chapter_filename(ordinal: int) -> str:
    """Zero-padded chapter file name, e.g. ``chapter_07.md``."""
    return f"chapter_{ordinal:02d}.md"


def corrected_path(chapter_path: Path) -> Path:
    """``chapter_07.md`` -> ``chapter_07_corrected.md``"""
    return chapter_path.with_name(f"{chapter_path.stem}{CORRECTED_SUFFIX}{chapter_path.suffix}")


def chapter_ordinal(path: Path) -> int | None:
    """Ordinal encoded in a raw chapter file name, or None for other files."""
    match = CHAPTER_NAME.match(path.name)
    return int(match.group("ordinal")) if match else None


class ChapterStore:
    """
    Writes and discovers chapter artifacts in one output directory.

    Attributes:
        output_dir: Directory receiving all artifacts.
        combined_path: Path of the combined book file.
        chapters_written: Number of chapters appended to the combined file.

    Example:
        >>> store = ChapterStore("out/")
        >>> store.prepare()
        >>> store.write_chapter(doc)
        PosixPath('out/chapter_01.md')
    """

    def __init__(
        self,
        output_dir: str | Path,
        combined_filename: str = DEFAULT_COMBINED_FILENAME,
        encoding: str = "utf-8",
    ) -> None:
        self.output_dir = Path(output_dir)
        self.combined_path = self.output_dir / combined_filename
        self.encoding = encoding
        self.chapters_written = 0

    def prepare(self) -> None:
        """
        Create the output directory and start an empty combined file.

        Raises:
            ArtifactError: If the directory or combined file cannot be created.
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.combined_path.write_text("", encoding=self.encoding)
        except OSError as e:
            raise ArtifactError(f"Cannot prepare output directory {self.output_dir}: {e}") from e

        stale = self.list_chapters()
        if stale:
            logger.warning(
                "%s already holds %d chapter files; they will be overwritten where numbers match",
                self.output_dir,
                len(stale),
            )
        self.chapters_written = 0

    def chapter_path(self, ordinal: int) -> Path:
        return self.output_dir / chapter_filename(ordinal)

    def write_chapter(self, document: ChapterDocument) -> Path:
        """
        Save a chapter file and append it to the combined file.

        Args:
            document: Chapter to persist.

        Returns:
            Path of the chapter file.

        Raises:
            ArtifactError: If either file cannot be written.
        """
        path = self.chapter_path(document.ordinal)
        try:
            path.write_text(document.text, encoding=self.encoding)
            with open(self.combined_path, "a", encoding=self.encoding) as f:
                if self.chapters_written:
                    f.write(CHAPTER_SEPARATOR)
                f.write(document.text)
        except (OSError, UnicodeError) as e:
            raise ArtifactError(f"Cannot write chapter {document.ordinal}: {e}") from e

        self.chapters_written += 1
        logger.info(
            "Saved chapter %d (%d bytes) to %s",
            document.ordinal,
            document.byte_length,
            path,
        )
        return path

    def list_chapters(self) -> list[Path]:
        """Raw chapter files, ordered by chapter number (corrected files excluded)."""
        if not self.output_dir.is_dir():
            return []
        chapters = [p for p in self.output_dir.glob(CHAPTER_GLOB) if chapter_ordinal(p) is not None]
        return sorted(chapters, key=chapter_ordinal)

    def read_chapter(self, path: Path) -> str:
        try:
            return path.read_text(encoding=self.encoding)
        except (OSError, UnicodeError) as e:
            raise ArtifactError(f"Cannot read {path.name}: {e}") from e

    def write_corrected(self, chapter_path: Path, text: str) -> Path:
        """
        Save the corrected variant next to a chapter file.

        Raises:
            ArtifactError: If the file cannot be written.
        """
        path = corrected_path(chapter_path)
        try:
            path.write_text(text, encoding=self.encoding)
        except (OSError, UnicodeError) as e:
            raise ArtifactError(f"Cannot write {path.name}: {e}") from e
        return path
