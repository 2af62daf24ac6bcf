"""Ordered page producers for the segmentation stage."""

from scanbook.readers.images import TesseractPageReader
from scanbook.readers.pages import (
    PageReader,
    TextPageReader,
    page_sort_key,
    split_side,
)

__all__ = [
    # Classes
    "PageReader",
    "TextPageReader",
    "TesseractPageReader",
    # Utility functions
    "page_sort_key",
    "split_side",
]
