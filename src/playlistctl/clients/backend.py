from __future__ import annotations

from typing import Any

from playlistctl.clients.base import BaseHTTPClient
from playlistctl.models import SessionToken


class BackendClient(BaseHTTPClient):
    """Content-management (or POP reporting) API client bound to a session token."""

    def __init__(self, base_url: str, token: SessionToken | None = None, **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)
        self._token = token

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        if self._token:
            headers.update(self._token.headers())
        return headers
