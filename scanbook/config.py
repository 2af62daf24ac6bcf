"""
Configuration for scanbook runs.

Configs can be built in code or loaded from a YAML file:

    input_dir: pages/
    output_dir: chapters/
    input_format: text
    correction:
      base_url: http://localhost:8081
      language: en-US
      max_workers: 2
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

import yaml

from scanbook.exceptions import ConfigurationError


@dataclass
class CorrectionConfig:
    """
    Configuration for the grammar-correction stage.

    Example:
        >>> config = PipelineConfig(
        ...     input_dir="pages/",
        ...     correction=CorrectionConfig(language="en-GB", max_workers=4),
        ... )
    """

    # Master switch
    enabled: bool = True

    # LanguageTool server
    base_url: str = "http://localhost:8081"
    language: str = "en-US"
    timeout: float = 60.0  # Seconds per chapter request

    # Chapters corrected concurrently (1 = sequential)
    max_workers: int = 1

    # LanguageTool reports Java (UTF-16) offsets
    offset_unit: Literal["utf16", "codepoint"] = "utf16"

    def __post_init__(self):
        """Validate configuration."""
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

        valid_units = ("utf16", "codepoint")
        if self.offset_unit not in valid_units:
            raise ValueError(
                f"offset_unit must be one of {valid_units}, got {self.offset_unit!r}"
            )
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {self.base_url!r}")


@dataclass
class PipelineConfig:
    """
    Configuration for a segmentation + correction run.

    All options except input_dir have sensible defaults.
    """

    # Input options
    input_dir: Path | None = None
    input_format: Literal["text", "image"] = "text"
    page_pattern: str | None = None  # Defaults to *.txt / *.png per format
    encoding: str = "utf-8"
    ocr_language: str = "eng"  # Tesseract language, image input only

    # Output options
    output_dir: Path = Path("chapters")
    combined_filename: str = "book.md"

    # Correction stage
    correction: CorrectionConfig = field(default_factory=CorrectionConfig)

    def __post_init__(self):
        """Validate configuration."""
        if self.input_dir is not None:
            self.input_dir = Path(self.input_dir)
        self.output_dir = Path(self.output_dir)

        valid_formats = ("text", "image")
        if self.input_format not in valid_formats:
            raise ValueError(
                f"input_format must be one of {valid_formats}, got {self.input_format!r}"
            )

        name = self.combined_filename
        if not name or Path(name).name != name:
            raise ValueError(
                f"combined_filename must be a bare file name, got {self.combined_filename!r}"
            )
        if self.combined_filename.startswith("chapter_"):
            raise ValueError("combined_filename must not use the chapter_ prefix")


def _build(cls: type, data: dict[str, Any], section: str) -> Any:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown {section} keys: {unknown}")
    try:
        return cls(**data)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {section}: {e}") from e


def load_config(path: str | Path) -> PipelineConfig:
    """
    Load a PipelineConfig from a YAML file.

    Relative ``input_dir`` and ``output_dir`` are resolved against the
    directory holding the config file.

    Args:
        path: YAML config file.

    Returns:
        Validated PipelineConfig.

    Raises:
        ConfigurationError: If the file is unreadable, malformed or invalid.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config {path} must be a mapping, got {type(raw).__name__}")

    data = dict(raw)
    correction_data = data.pop("correction", None) or {}
    if not isinstance(correction_data, dict):
        raise ConfigurationError("'correction' must be a mapping")

    for key in ("input_dir", "output_dir"):
        if data.get(key) is not None:
            value = Path(data[key]).expanduser()
            data[key] = value if value.is_absolute() else path.parent / value

    data["correction"] = _build(CorrectionConfig, correction_data, "correction settings")
    return _build(PipelineConfig, data, "configuration")
