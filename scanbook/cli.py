"""
scanbook command line.

Usage:
    scanbook segment pages/ -o chapters/
    scanbook segment cropped/ -o chapters/ --images
    scanbook correct chapters/ --url http://localhost:8081 --workers 2
    scanbook run pages/ -o chapters/
    scanbook run --config scanbook.yaml

Exit codes:
    0  success
    1  fatal error (bad input directory, unwritable output, bad config)
    2  correction service unavailable
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from scanbook import __version__
from scanbook.config import PipelineConfig, load_config
from scanbook.exceptions import ScanBookError, ServiceUnavailableError
from scanbook.models import SegmentationReport
from scanbook.pipeline import (
    create_client,
    create_reader,
    create_store,
    run_correction,
    run_pipeline,
    segment_pages,
)

logger = logging.getLogger("scanbook")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_SERVICE_UNAVAILABLE = 2


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _add_correction_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("correction")
    group.add_argument("--url", help="LanguageTool server (default: http://localhost:8081)")
    group.add_argument("--language", help="Language code (default: en-US)")
    group.add_argument("--timeout", type=float, help="Seconds per chapter request (default: 60)")
    group.add_argument("--workers", type=int, help="Chapters corrected concurrently (default: 1)")


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--output", type=Path, help="Output directory (default: chapters)")
    parser.add_argument(
        "--images",
        action="store_true",
        help="Input holds page-half images to OCR with Tesseract",
    )
    parser.add_argument("--pattern", help="Glob selecting page files (default: *.txt or *.png)")
    parser.add_argument("--ocr-language", help="Tesseract language (default: eng)")
    parser.add_argument("--combined", help="Combined book file name (default: book.md)")


def _print_skipped(report: SegmentationReport) -> None:
    if report.pages_skipped:
        names = ", ".join(p.name for p in report.pages_skipped)
        print(f"Skipped {len(report.pages_skipped)} unreadable pages: {names}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scanbook",
        description="Split OCR'd book pages into chapters and grammar-correct them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    common.add_argument("--config", type=Path, help="YAML configuration file")

    sub = parser.add_subparsers(dest="command", required=True)

    seg = sub.add_parser("segment", parents=[common], help="Split pages into chapter files")
    seg.add_argument("input", type=Path, nargs="?", help="Directory of page files")
    _add_input_args(seg)

    cor = sub.add_parser("correct", parents=[common], help="Grammar-correct existing chapter files")
    cor.add_argument("output", type=Path, nargs="?", help="Directory of chapter files")
    _add_correction_args(cor)

    run = sub.add_parser("run", parents=[common], help="Segment, then correct")
    run.add_argument("input", type=Path, nargs="?", help="Directory of page files")
    _add_input_args(run)
    _add_correction_args(run)
    run.add_argument("--no-correct", action="store_true", help="Skip the correction stage")
    run.add_argument("--json", action="store_true", help="Print a JSON summary")

    return parser


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Merge command-line options over the config file (or defaults)."""
    config = load_config(args.config) if args.config else PipelineConfig()

    overrides = {}
    if getattr(args, "input", None) is not None:
        overrides["input_dir"] = args.input
    output = getattr(args, "output", None)
    if output is not None:
        overrides["output_dir"] = output
    if getattr(args, "images", False):
        overrides["input_format"] = "image"
    for arg, key in (
        ("pattern", "page_pattern"),
        ("ocr_language", "ocr_language"),
        ("combined", "combined_filename"),
    ):
        if getattr(args, arg, None) is not None:
            overrides[key] = getattr(args, arg)

    correction = {}
    for arg, key in (
        ("url", "base_url"),
        ("language", "language"),
        ("timeout", "timeout"),
        ("workers", "max_workers"),
    ):
        if getattr(args, arg, None) is not None:
            correction[key] = getattr(args, arg)
    if getattr(args, "no_correct", False):
        correction["enabled"] = False
    if correction:
        overrides["correction"] = replace(config.correction, **correction)

    return replace(config, **overrides) if overrides else config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = build_config(args)
    except (ScanBookError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.command in ("segment", "run") and config.input_dir is None:
        parser.error("an input directory is required (argument or input_dir in --config)")

    try:
        if args.command == "segment":
            report = segment_pages(create_reader(config), create_store(config))
            print(f"Saved {report.chapter_count} chapters to {config.output_dir}")
            _print_skipped(report)
            return EXIT_OK

        if args.command == "correct":
            try:
                report = run_correction(config)
            except ServiceUnavailableError as e:
                client = create_client(config.correction)
                print(f"Error: {e}\n\n{client.start_instructions()}", file=sys.stderr)
                return EXIT_SERVICE_UNAVAILABLE
            print(
                f"Corrected {report.corrected_count} chapters "
                f"({report.failed_count} failed, {report.applied_total} edits applied)"
            )
            return EXIT_OK if report.failed_count == 0 else EXIT_ERROR

        report = run_pipeline(config)
        if args.json:
            print(json.dumps(report.to_dict(), indent=2))
        else:
            print(f"Saved {report.segmentation.chapter_count} chapters to {config.output_dir}")
            _print_skipped(report.segmentation)
            if report.correction is not None:
                print(
                    f"Corrected {report.correction.corrected_count} chapters "
                    f"({report.correction.failed_count} failed)"
                )
        if config.correction.enabled and report.correction is None:
            return EXIT_SERVICE_UNAVAILABLE
        return EXIT_OK

    except ScanBookError as e:
        logger.error("%s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
