"""
Page producer backed by Tesseract.

The OCR engine is treated as a black box: each page-half image is handed
to Tesseract as-is and the raw text is returned. Cropping and splitting
spreads into halves happen before the images reach this directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytesseract
from PIL import Image, UnidentifiedImageError

from scanbook.exceptions import InputError
from scanbook.readers.pages import PageReader

logger = logging.getLogger(__name__)


DEFAULT_OCR_LANGUAGE = "eng"


class TesseractPageReader(PageReader):
    """
    OCRs page-half images in reading order.

    Attributes:
        lang: Tesseract language code(s), e.g. ``"eng"`` or ``"eng+deu"``.

    Example:
        >>> reader = TesseractPageReader("cropped/", lang="eng")
        >>> first = next(iter(reader))
    """

    pattern = "*.png"

    def __init__(
        self,
        input_dir: str | Path,
        pattern: str | None = None,
        lang: str = DEFAULT_OCR_LANGUAGE,
    ) -> None:
        super().__init__(input_dir, pattern)
        self.lang = lang

    def _read(self, path: Path) -> str:
        try:
            with Image.open(path) as image:
                text = pytesseract.image_to_string(image, lang=self.lang)
        except pytesseract.TesseractNotFoundError as e:
            # Every page would fail the same way
            raise InputError(f"Tesseract binary not found: {e}") from e
        except (UnidentifiedImageError, pytesseract.TesseractError) as e:
            raise OSError(f"OCR failed: {e}") from e

        logger.debug("OCR %s: %d chars", path.name, len(text))
        return text
