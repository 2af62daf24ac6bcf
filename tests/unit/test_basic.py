"""
Basic tests for scanbook package structure.

These tests verify the public API is importable and
basic configuration works correctly.
"""

import pytest


class TestImports:
    """Test that the public API is importable."""

    def test_import_package(self):
        """Can import the main package."""
        import scanbook

        assert scanbook.__version__ == "0.1.0"

    def test_import_pipeline_functions(self):
        """Can import the pipeline entry points."""
        from scanbook import correct_chapters, run_correction, run_pipeline, segment_pages

        assert callable(run_pipeline)
        assert callable(run_correction)
        assert callable(segment_pages)
        assert callable(correct_chapters)

    def test_import_config(self):
        """Can import configuration classes."""
        from scanbook import CorrectionConfig, PipelineConfig

        config = PipelineConfig()
        assert config.combined_filename == "book.md"
        assert isinstance(config.correction, CorrectionConfig)
        assert config.correction.enabled is True

    def test_import_core_types(self):
        """Can import core data types."""
        from scanbook import OffsetUnit, PageSide, SkipReason

        assert PageSide.LEFT.value == "left"
        assert SkipReason.OVERLAP.value == "overlap"
        assert OffsetUnit.UTF16.value == "utf16"

    def test_import_exceptions(self):
        """Can import exception classes."""
        from scanbook import (
            ArtifactError,
            ConfigurationError,
            InputError,
            ScanBookError,
            SegmentationError,
            ServiceError,
            ServiceUnavailableError,
        )

        for error in (
            ArtifactError,
            ConfigurationError,
            InputError,
            SegmentationError,
            ServiceError,
            ServiceUnavailableError,
        ):
            assert issubclass(error, ScanBookError)

    def test_all_exports_resolve(self):
        """Every name in __all__ exists."""
        import scanbook

        for name in scanbook.__all__:
            assert hasattr(scanbook, name), name


class TestConfig:
    """Test configuration validation."""

    def test_default_config(self):
        """Default config is valid."""
        from scanbook import PipelineConfig

        config = PipelineConfig()
        assert config.input_dir is None
        assert config.input_format == "text"
        assert config.correction.base_url == "http://localhost:8081"
        assert config.correction.language == "en-US"
        assert config.correction.max_workers == 1
        assert config.correction.offset_unit == "utf16"

    def test_paths_coerced(self):
        """String paths become Path objects."""
        from pathlib import Path

        from scanbook import PipelineConfig

        config = PipelineConfig(input_dir="pages", output_dir="out")
        assert config.input_dir == Path("pages")
        assert config.output_dir == Path("out")

    def test_invalid_input_format(self):
        """Invalid input format raises error."""
        from scanbook import PipelineConfig

        with pytest.raises(ValueError, match="input_format"):
            PipelineConfig(input_format="pdf")

    @pytest.mark.parametrize("name", ["", "sub/book.md", "chapter_all.md"])
    def test_invalid_combined_filename(self, name):
        """Combined file must be a bare name outside the chapter namespace."""
        from scanbook import PipelineConfig

        with pytest.raises(ValueError, match="combined_filename"):
            PipelineConfig(combined_filename=name)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"timeout": 0},
            {"max_workers": 0},
            {"offset_unit": "bytes"},
            {"base_url": "localhost:8081"},
        ],
    )
    def test_invalid_correction_config(self, kwargs):
        """Invalid correction settings raise error."""
        from scanbook import CorrectionConfig

        with pytest.raises(ValueError):
            CorrectionConfig(**kwargs)
