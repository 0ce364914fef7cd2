"""
Name-based lookup of backend items.

Only the first page of a listing is inspected. A failed query is reported
as ``QUERY_FAILED`` and ``locate`` treats it exactly like a miss, because
every caller has a create or upload fallback.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

import structlog

from playlistctl.clients.base import BaseHTTPClient
from playlistctl.errors import TransportError
from playlistctl.models import LookupResult, extract_id, extract_items, name_equals

logger = structlog.get_logger()

FILE_DESCRIPTOR_PATH = "api/file-management/file-descriptor"
PLAYLIST_PATH = "api/playlist-management/playlist"

Predicate = Callable[[Mapping[str, Any]], bool]


class ResourceLocator:
    """Finds the id of the first listed item matching a predicate."""

    def __init__(self, client: BaseHTTPClient) -> None:
        self._client = client

    def find(
        self,
        path: str,
        predicate: Predicate,
        params: dict[str, Any] | None = None,
    ) -> LookupResult:
        try:
            body = self._client.get(path, params=params)
        except TransportError as exc:
            return LookupResult.query_failed(str(exc))

        if not isinstance(body, Mapping):
            return LookupResult.query_failed(f"{path} returned a non-object body")

        for item in extract_items(body):
            if not isinstance(item, Mapping) or not predicate(item):
                continue
            identifier = extract_id(item)
            if identifier is not None:
                return LookupResult.found(identifier)
        return LookupResult.not_found()

    def locate(
        self,
        path: str,
        predicate: Predicate,
        params: dict[str, Any] | None = None,
    ) -> str | None:
        """Like ``find`` but fail-open: a failed query reads as not found."""
        result = self.find(path, predicate, params)
        if result.is_found:
            return result.identifier
        if result.error:
            logger.warning("lookup_failed_treated_as_miss", path=path, error=result.error)
        return None

    def find_asset(self, filename: str) -> str | None:
        return self.locate(FILE_DESCRIPTOR_PATH, name_equals(filename))

    def find_playlist(self, name: str) -> str | None:
        params = {"Filter": name, "SkipCount": 0, "MaxResultCount": 10}
        return self.locate(PLAYLIST_PATH, name_equals(name), params)
