"""
Pytest configuration and fixtures for scanbook tests.
"""

from pathlib import Path

import pytest

from scanbook.correction.applier import OffsetUnit
from scanbook.exceptions import ServiceUnavailableError
from scanbook.models import EditSuggestion, PageText


class FakeCorrectionService:
    """
    In-memory stand-in for LanguageToolClient.

    ``responses`` maps a substring of the chapter text to the suggestions
    (or exception) returned for any chapter containing it.
    """

    offset_unit = OffsetUnit.CODEPOINT

    def __init__(self, responses=None, available=True):
        self.responses = responses or {}
        self.available = available
        self.checked: list[str] = []

    def ensure_available(self) -> None:
        if not self.available:
            raise ServiceUnavailableError("LanguageTool is not running at http://localhost:8081")

    def start_instructions(self) -> str:
        return "Run: languagetool --http --port 8081"

    def check(self, text: str) -> list[EditSuggestion]:
        self.checked.append(text)
        for needle, response in self.responses.items():
            if needle in text:
                if isinstance(response, Exception):
                    raise response
                return list(response)
        return []


@pytest.fixture
def fake_service():
    """Return a factory for FakeCorrectionService instances."""
    return FakeCorrectionService


@pytest.fixture
def make_pages():
    """Build PageText objects from plain strings."""

    def _make(*texts: str) -> list[PageText]:
        return [PageText(content=text, sequence=i) for i, text in enumerate(texts)]

    return _make


@pytest.fixture
def page_dir(tmp_path) -> Path:
    """A directory of left/right page files spanning two chapters."""
    pages = {
        "spread_001_left.txt": "Title Page\n\n\n\nBy Someone\n",
        "spread_001_right.txt": "Chapter 1\n\nIt was a dark and stormy night.",
        "spread_002_left.txt": "Their was rain.\n",
        "spread_002_right.txt": "Chapter 2\nMorning came.\n",
    }
    directory = tmp_path / "pages"
    directory.mkdir()
    for name, content in pages.items():
        (directory / name).write_text(content, encoding="utf-8")
    return directory
