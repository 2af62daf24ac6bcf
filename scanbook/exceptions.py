"""
Exception classes for scanbook.

All scanbook exceptions inherit from ScanBookError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     report = scanbook.run_pipeline(config)
    ... except scanbook.InputError as e:
    ...     print(f"Cannot read pages: {e}")
    ... except scanbook.ScanBookError as e:
    ...     print(f"scanbook error: {e}")
"""


class ScanBookError(Exception):
    """
    Base exception for all scanbook errors.

    Catch this to handle any scanbook-specific error.
    """

    pass


class InputError(ScanBookError):
    """
    Raised when the page input cannot be enumerated.

    A single unreadable page file is logged and skipped; this is only
    raised when the input directory itself is missing or unreadable.
    """

    pass


class ArtifactError(ScanBookError):
    """
    Raised when a chapter artifact cannot be read or written.

    Example:
        >>> store.write_chapter(doc)
        ArtifactError: Cannot write chapter_03.md: [Errno 28] No space left on device
    """

    pass


class SegmentationError(ScanBookError):
    """Raised when a finished ChapterSegmenter is fed more pages."""

    pass


class ServiceUnavailableError(ScanBookError):
    """
    Raised when the correction service fails its liveness probe.

    Fatal for the correction stage only. Chapters written by the
    segmentation stage stay valid.
    """

    pass


class ServiceError(ScanBookError):
    """
    Raised when the correction service fails for a single chapter.

    Covers non-success responses, timeouts and malformed payloads.
    The pipeline records the failure and moves on to the next chapter.
    """

    pass


class ConfigurationError(ScanBookError):
    """
    Raised for an invalid configuration file.

    Example:
        >>> load_config("scanbook.yaml")
        ConfigurationError: Unknown configuration keys: ['ouput_dir']
    """

    pass
