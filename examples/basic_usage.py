#!/usr/bin/env python3
"""
Basic scanbook Usage Example

This example demonstrates the core workflow:
1. Split a directory of OCR'd pages into chapter files
2. Grammar-correct the chapters with a local LanguageTool server
3. Use the building blocks directly on in-memory text
"""

from pathlib import Path

from scanbook import (
    CorrectionConfig,
    EditSuggestion,
    PageText,
    PipelineConfig,
    ServiceUnavailableError,
    apply_corrections,
    run_correction,
    run_pipeline,
    segment,
)


def main():
    # ─────────────────────────────────────────────────────────────────────────
    # 1. Full Pipeline
    # ─────────────────────────────────────────────────────────────────────────

    config = PipelineConfig(
        input_dir=Path("path/to/pages"),  # spread_001_left.txt, spread_001_right.txt, ...
        output_dir=Path("chapters"),
        correction=CorrectionConfig(
            base_url="http://localhost:8081",
            language="en-US",
            max_workers=2,  # Correct two chapters at a time
        ),
    )

    report = run_pipeline(config)

    print(f"Read {report.segmentation.pages_seen} pages")
    print(f"Saved {report.segmentation.chapter_count} chapters")
    for chapter in report.segmentation.chapters:
        print(f"  {chapter.ordinal:3d}  {chapter.heading}  ({chapter.page_count} pages)")

    if report.correction is None:
        # Chapter files are complete; correction can be rerun later
        print(f"Correction skipped: {report.correction_skipped_reason}")
    else:
        for result in report.correction.chapters:
            status = "ok" if result.ok else result.error
            print(f"  {result.chapter_path.name}: {result.applied} edits ({status})")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Rerun Correction Only
    # ─────────────────────────────────────────────────────────────────────────

    try:
        correction = run_correction(config)
        print(f"Corrected {correction.corrected_count} chapters")
    except ServiceUnavailableError as e:
        print(f"LanguageTool is down: {e}")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Building Blocks
    # ─────────────────────────────────────────────────────────────────────────

    pages = [
        PageText("Chapter 1\nThe storm began.", 0),
        PageText("Their was rain.", 1),
        PageText("Chapter 2\nMorning came.", 2),
    ]
    chapters = list(segment(pages))
    print(chapters[0].text)

    offset = chapters[0].text.index("Their")
    edits = [EditSuggestion(offset=offset, length=5, replacements=("There",))]
    text, applied = apply_corrections(chapters[0].text, edits)
    print(f"{applied} edit applied:\n{text}")


if __name__ == "__main__":
    main()
