"""
Client for a LanguageTool HTTP server.

Only two endpoints are used:
- ``GET /v2/languages`` as a liveness probe before any chapter is sent
- ``POST /v2/check`` to fetch suggestions for one chapter

Matches are decoded into EditSuggestion objects. LanguageTool reports
offsets as Java string indices, i.e. UTF-16 code units.
"""

from __future__ import annotations

import logging
import threading
from typing import Any
from urllib.parse import urlparse

import requests

from scanbook.correction.applier import OffsetUnit
from scanbook.exceptions import ServiceError, ServiceUnavailableError
from scanbook.models import EditSuggestion

logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "http://localhost:8081"
DEFAULT_LANGUAGE = "en-US"
DEFAULT_TIMEOUT = 60.0
PROBE_TIMEOUT = 5.0

START_INSTRUCTIONS = (
    "To start LanguageTool:\n"
    "  1. Install: brew install languagetool (or download from languagetool.org)\n"
    "  2. Run: languagetool --http --port {port}"
)


def parse_matches(payload: Any) -> list[EditSuggestion]:
    """
    Decode a ``/v2/check`` response body.

    Args:
        payload: Parsed JSON response.

    Returns:
        One EditSuggestion per match, in response order.

    Raises:
        ServiceError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("matches"), list):
        raise ServiceError("Malformed LanguageTool response: missing 'matches' list")

    suggestions = []
    for index, match in enumerate(payload["matches"]):
        try:
            offset = match["offset"]
            length = match["length"]
            if not isinstance(offset, int) or not isinstance(length, int):
                raise TypeError("offset and length must be integers")

            replacements = tuple(
                r["value"]
                for r in match.get("replacements") or []
                if isinstance(r.get("value"), str)
            )
            rule = match.get("rule") or {}
            category = (rule.get("category") or {}).get("id")
        except (KeyError, TypeError, AttributeError) as e:
            raise ServiceError(f"Malformed LanguageTool match #{index}: {e}") from e

        suggestions.append(
            EditSuggestion(
                offset=offset,
                length=length,
                replacements=replacements,
                category=category,
                message=match.get("message"),
                rule_id=rule.get("id"),
            )
        )

    return suggestions


class LanguageToolClient:
    """
    Synchronous LanguageTool client.

    Sessions are kept per thread so the client can be shared by the
    correction thread pool.

    Attributes:
        base_url: Server root, e.g. ``http://localhost:8081``.
        language: Language code sent with every check.
        timeout: Seconds to wait for a check response.
        offset_unit: Unit of the offsets in returned suggestions.

    Example:
        >>> client = LanguageToolClient()
        >>> client.ensure_available()
        >>> suggestions = client.check("Their is a problem.")
    """

    offset_unit = OffsetUnit.UTF16

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        language: str = DEFAULT_LANGUAGE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.timeout = timeout
        self._thread_local = threading.local()

    @property
    def check_url(self) -> str:
        return f"{self.base_url}/v2/check"

    @property
    def languages_url(self) -> str:
        return f"{self.base_url}/v2/languages"

    def _session(self) -> requests.Session:
        if not hasattr(self._thread_local, "session"):
            self._thread_local.session = requests.Session()
        return self._thread_local.session

    def start_instructions(self) -> str:
        """How to bring up a local server matching base_url."""
        port = urlparse(self.base_url).port or 8081
        return START_INSTRUCTIONS.format(port=port)

    def ensure_available(self) -> None:
        """
        Probe the server before submitting any chapter.

        Raises:
            ServiceUnavailableError: If the server is unreachable or unhealthy.
        """
        try:
            response = self._session().get(self.languages_url, timeout=PROBE_TIMEOUT)
        except requests.RequestException as e:
            raise ServiceUnavailableError(
                f"LanguageTool is not running at {self.base_url}: {e}"
            ) from e

        if response.status_code != 200:
            raise ServiceUnavailableError(
                f"LanguageTool at {self.base_url} returned status {response.status_code}"
            )
        logger.debug("LanguageTool is available at %s", self.base_url)

    def check(self, text: str) -> list[EditSuggestion]:
        """
        Fetch suggestions for one chapter.

        Args:
            text: Full chapter text.

        Returns:
            Suggestions with offsets into ``text`` (UTF-16 units).

        Raises:
            ServiceError: On transport failure, timeout, non-200 status or bad payload.
        """
        data = {
            "text": text,
            "language": self.language,
            "enabledOnly": "false",
        }

        try:
            response = self._session().post(self.check_url, data=data, timeout=self.timeout)
        except requests.Timeout as e:
            raise ServiceError(f"LanguageTool timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ServiceError(f"Failed to send request: {e}") from e

        if response.status_code != 200:
            raise ServiceError(
                f"LanguageTool returned status {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ServiceError(f"Failed to parse response: {e}") from e

        suggestions = parse_matches(payload)
        logger.debug("LanguageTool returned %d matches", len(suggestions))
        return suggestions
