"""
Apply offset-addressed edit suggestions to a chapter.

All offsets returned by the correction service refer to the text as it was
submitted. Edits are therefore applied right-to-left: replacing a span
only shifts text to its right, so every edit still waiting to be applied
(which lies further left) keeps a valid offset.

Overlapping suggestions are resolved before anything is applied. Walking
the edits by ascending offset, the first one wins and any later edit that
starts inside the kept span, or at the same offset, is skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from scanbook.models import CorrectionResult, EditSuggestion, SkippedEdit, SkipReason

logger = logging.getLogger(__name__)


class OffsetUnit(Enum):
    """Unit the service uses for offsets and lengths."""

    CODEPOINT = "codepoint"  # Python str indices
    UTF16 = "utf16"  # Java String indices (LanguageTool)


def _utf16(text: str) -> bytes:
    return text.encode("utf-16-le", "surrogatepass")


# Second half of a UTF-16 surrogate pair
LOW_SURROGATES = range(0xDC00, 0xE000)


def _splits_surrogate_pair(buffer: bytes, edit: EditSuggestion) -> bool:
    """True if the edit starts or ends between the two halves of a pair."""
    for index in (edit.offset, edit.end):
        if index < 0:
            continue
        unit = buffer[index * 2 : index * 2 + 2]
        if len(unit) == 2 and int.from_bytes(unit, "little") in LOW_SURROGATES:
            return True
    return False


# (encode, width of one offset unit in the encoded buffer)
_UNITS: dict[OffsetUnit, tuple[Callable[[str], str | bytes], int]] = {
    OffsetUnit.CODEPOINT: (lambda text: text, 1),
    OffsetUnit.UTF16: (_utf16, 2),
}


def resolve_overlaps(
    edits: Iterable[EditSuggestion],
    text_length: int,
) -> tuple[list[EditSuggestion], list[SkippedEdit]]:
    """
    Select the edits that can be applied together.

    Args:
        edits: Suggestions in the order the service returned them.
        text_length: Length of the original text, in offset units.

    Returns:
        Tuple of (kept edits in ascending offset order, skipped edits).
    """
    candidates = []
    skipped = []

    for edit in edits:
        if edit.replacement is None:
            skipped.append(SkippedEdit(edit, SkipReason.NO_REPLACEMENT))
        elif edit.offset < 0 or edit.length < 0 or edit.end > text_length:
            skipped.append(SkippedEdit(edit, SkipReason.OUT_OF_RANGE))
        else:
            candidates.append(edit)

    kept: list[EditSuggestion] = []
    # sorted() is stable: for equal offsets the earlier suggestion wins
    for edit in sorted(candidates, key=lambda e: e.offset):
        if kept and (edit.offset < kept[-1].end or edit.offset == kept[-1].offset):
            skipped.append(SkippedEdit(edit, SkipReason.OVERLAP))
            continue
        kept.append(edit)

    return kept, skipped


def apply_corrections(
    text: str,
    edits: Iterable[EditSuggestion],
    unit: OffsetUnit = OffsetUnit.CODEPOINT,
) -> CorrectionResult:
    """
    Apply edit suggestions to text.

    Never raises for bad edits: suggestions without a replacement, with a
    span outside the text, or overlapping an earlier suggestion are skipped
    and listed in ``result.skipped``. With UTF-16 offsets, a span that
    starts or ends inside a surrogate pair counts as out of range.

    Args:
        text: Text the suggestions were computed against.
        edits: Suggestions from the correction service (any order).
        unit: Unit of ``offset`` and ``length``.

    Returns:
        CorrectionResult with the corrected text and the number of edits applied.

    Example:
        >>> edit = EditSuggestion(offset=6, length=5, replacements=("earth",))
        >>> text, applied = apply_corrections("Hello world", [edit])
        >>> text, applied
        ('Hello earth', 1)
    """
    encode, width = _UNITS[unit]
    buffer = encode(text)

    split: list[SkippedEdit] = []
    if unit is OffsetUnit.UTF16:
        candidates = []
        for edit in edits:
            if _splits_surrogate_pair(buffer, edit):
                split.append(SkippedEdit(edit, SkipReason.OUT_OF_RANGE))
            else:
                candidates.append(edit)
        edits = candidates

    kept, skipped = resolve_overlaps(edits, len(buffer) // width)
    skipped = split + skipped

    applied = 0
    for edit in sorted(kept, key=lambda e: e.offset, reverse=True):
        start = edit.offset * width
        end = edit.end * width
        if end > len(buffer):
            skipped.append(SkippedEdit(edit, SkipReason.OUT_OF_RANGE))
            continue
        buffer = buffer[:start] + encode(edit.replacement) + buffer[end:]
        applied += 1

    for item in skipped:
        logger.debug(
            "Skipped edit at %d+%d (%s): %s",
            item.edit.offset,
            item.edit.length,
            item.reason.value,
            item.edit.message or item.edit.category or "",
        )

    if unit is OffsetUnit.UTF16:
        corrected = buffer.decode("utf-16-le", "surrogatepass")
    else:
        corrected = buffer
    return CorrectionResult(text=corrected, applied_count=applied, skipped=skipped)
