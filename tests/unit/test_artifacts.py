"""Tests for chapter artifact storage."""

from pathlib import Path

import pytest

from scanbook.exceptions import ArtifactError
from scanbook.models import ChapterDocument
from scanbook.writers import (
    CHAPTER_SEPARATOR,
    ChapterStore,
    chapter_filename,
    chapter_ordinal,
    corrected_path,
)


class TestNaming:
    """Tests for artifact file names."""

    @pytest.mark.parametrize(
        "ordinal,name",
        [
            (1, "chapter_01.md"),
            (9, "chapter_09.md"),
            (12, "chapter_12.md"),
            (104, "chapter_104.md"),
        ],
    )
    def test_chapter_filename(self, ordinal, name):
        assert chapter_filename(ordinal) == name

    def test_corrected_path(self):
        assert corrected_path(Path("out/chapter_03.md")) == Path("out/chapter_03_corrected.md")

    @pytest.mark.parametrize(
        "name,ordinal",
        [
            ("chapter_03.md", 3),
            ("chapter_104.md", 104),
            ("chapter_03_corrected.md", None),
            ("book.md", None),
            ("chapter_x.md", None),
        ],
    )
    def test_chapter_ordinal(self, name, ordinal):
        assert chapter_ordinal(Path(name)) == ordinal


class TestChapterStore:
    """Tests for ChapterStore."""

    def test_prepare_creates_directory(self, tmp_path):
        store = ChapterStore(tmp_path / "nested" / "out")

        store.prepare()

        assert store.output_dir.is_dir()
        assert store.combined_path.read_text(encoding="utf-8") == ""

    def test_prepare_truncates_combined(self, tmp_path):
        store = ChapterStore(tmp_path)
        store.combined_path.write_text("old run", encoding="utf-8")

        store.prepare()

        assert store.combined_path.read_text(encoding="utf-8") == ""

    def test_prepare_fails_on_file(self, tmp_path):
        blocker = tmp_path / "out"
        blocker.write_text("a file, not a directory", encoding="utf-8")

        with pytest.raises(ArtifactError, match="Cannot prepare"):
            ChapterStore(blocker).prepare()

    def test_write_chapters_and_combined(self, tmp_path):
        store = ChapterStore(tmp_path)
        store.prepare()

        first = store.write_chapter(ChapterDocument(1, "# Chapter 1\nOne.\n"))
        second = store.write_chapter(ChapterDocument(2, "# Chapter 2\nTwo.\n"))

        assert first == tmp_path / "chapter_01.md"
        assert second == tmp_path / "chapter_02.md"
        assert first.read_text(encoding="utf-8") == "# Chapter 1\nOne.\n"
        assert store.combined_path.read_text(encoding="utf-8") == (
            "# Chapter 1\nOne.\n" + CHAPTER_SEPARATOR + "# Chapter 2\nTwo.\n"
        )
        assert store.chapters_written == 2

    def test_single_chapter_has_no_separator(self, tmp_path):
        store = ChapterStore(tmp_path)
        store.prepare()

        store.write_chapter(ChapterDocument(1, "# Chapter 1\nOnly.\n"))

        assert store.combined_path.read_text(encoding="utf-8") == "# Chapter 1\nOnly.\n"

    def test_chapter_bytes_preserved(self, tmp_path):
        text = "# Chapter 1\nCafé “quoted” — naïve.\n"
        store = ChapterStore(tmp_path)
        store.prepare()

        path = store.write_chapter(ChapterDocument(1, text))

        assert path.read_bytes() == text.encode("utf-8")

    def test_list_chapters_numeric_order(self, tmp_path):
        for name in ("chapter_10.md", "chapter_02.md", "chapter_02_corrected.md", "book.md"):
            (tmp_path / name).write_text("x", encoding="utf-8")
        (tmp_path / "chapter_100.md").write_text("x", encoding="utf-8")

        names = [p.name for p in ChapterStore(tmp_path).list_chapters()]

        assert names == ["chapter_02.md", "chapter_10.md", "chapter_100.md"]

    def test_list_chapters_missing_directory(self, tmp_path):
        assert ChapterStore(tmp_path / "missing").list_chapters() == []

    def test_write_corrected(self, tmp_path):
        store = ChapterStore(tmp_path)
        chapter = tmp_path / "chapter_01.md"
        chapter.write_text("Their was.\n", encoding="utf-8")

        output = store.write_corrected(chapter, "There was.\n")

        assert output == tmp_path / "chapter_01_corrected.md"
        assert output.read_text(encoding="utf-8") == "There was.\n"
        # Raw chapter untouched
        assert chapter.read_text(encoding="utf-8") == "Their was.\n"

    def test_write_corrected_unencodable(self, tmp_path):
        store = ChapterStore(tmp_path, encoding="ascii")
        chapter = tmp_path / "chapter_01.md"

        with pytest.raises(ArtifactError, match="chapter_01_corrected.md"):
            store.write_corrected(chapter, "Caf\u00e9\n")

    def test_write_chapter_unencodable(self, tmp_path):
        store = ChapterStore(tmp_path, encoding="ascii")
        store.prepare()

        with pytest.raises(ArtifactError, match="Cannot write chapter 1"):
            store.write_chapter(ChapterDocument(1, "# Chapter 1\nCaf\u00e9\n"))

    def test_write_corrected_lone_surrogate(self, tmp_path):
        store = ChapterStore(tmp_path)

        with pytest.raises(ArtifactError):
            store.write_corrected(tmp_path / "chapter_01.md", "broken \ud83d\n")

    def test_read_missing_chapter(self, tmp_path):
        with pytest.raises(ArtifactError, match="chapter_07.md"):
            ChapterStore(tmp_path).read_chapter(tmp_path / "chapter_07.md")
