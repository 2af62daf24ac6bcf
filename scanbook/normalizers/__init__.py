"""Text normalizers shared by the segmentation and correction stages."""

from scanbook.normalizers.whitespace import NEWLINE_RUN, normalize_newlines

__all__ = [
    "NEWLINE_RUN",
    "normalize_newlines",
]
