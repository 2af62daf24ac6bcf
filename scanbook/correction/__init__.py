"""
Grammar correction of chapter artifacts.

This package applies suggestions from a correction service to chapter text:
- apply_corrections(): offset-safe, right-to-left application of edits
- LanguageToolClient: liveness probe and ``/v2/check`` requests

Example:
    >>> from scanbook.correction import apply_corrections
    >>> from scanbook.models import EditSuggestion
    >>> edits = [EditSuggestion(0, 3, ("baz",)), EditSuggestion(4, 3, ("qux",))]
    >>> apply_corrections("foo bar", edits).text
    'baz qux'
"""

from scanbook.correction.applier import OffsetUnit, apply_corrections, resolve_overlaps
from scanbook.correction.languagetool import LanguageToolClient, parse_matches

__all__ = [
    "OffsetUnit",
    "apply_corrections",
    "resolve_overlaps",
    "LanguageToolClient",
    "parse_matches",
]
