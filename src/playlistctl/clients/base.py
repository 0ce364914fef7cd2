from __future__ import annotations

from typing import Any

import httpx
import structlog

from playlistctl.errors import TransportError

logger = structlog.get_logger()

DEFAULT_USER_AGENT = "playlistctl/0.1.0"


class BaseHTTPClient:
    """Single-attempt JSON HTTP client.

    Every request is issued exactly once. Non-success statuses, network
    errors and undecodable bodies all surface as ``TransportError``; callers
    decide whether that is fatal, best-effort or a lookup miss.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        verify: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._verify = verify
        self._user_agent = user_agent
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize the underlying httpx client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        """Override to provide custom headers."""
        return {"Accept": "application/json", "User-Agent": self._user_agent}

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = self._headers()
        headers.update(kwargs.pop("headers", None) or {})
        try:
            response = self.client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("http_network_error", method=method, path=path, error=str(exc))
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            logger.warning(
                "http_error_status",
                method=method,
                path=path,
                status=response.status_code,
            )
            raise TransportError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Execute a request and decode its body.

        Returns ``{}`` for an empty body and the raw text for a successful
        response that is not JSON. The status code alone decides success.
        """
        response = self._send(method, path, **kwargs)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            logger.debug("http_text_body", method=method, path=path, status=response.status_code)
            return response.text

    def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        """Execute GET request."""
        return self._request("GET", path, params=params)

    def post(
        self,
        path: str,
        *,
        json: Any = None,
        files: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute POST request with a JSON or multipart body."""
        return self._request("POST", path, json=json, files=files, params=params)

    def put(self, path: str, *, json: Any = None) -> Any:
        """Execute PUT request."""
        return self._request("PUT", path, json=json)

    def delete(self, path: str, *, json: Any = None) -> Any:
        """Execute DELETE request, optionally with a JSON body."""
        return self._request("DELETE", path, json=json)
