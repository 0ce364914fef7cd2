"""Root test configuration."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from itertools import count
from typing import Any, Callable
from urllib.parse import parse_qs

import httpx
import pytest
import respx
import structlog
from playlistctl.config import Settings

AUTH_BASE = "https://auth.test"
API_BASE = "https://api.test"
POP_BASE = "https://pop.test"

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        tenant="acme",
        username="ops@acme.test",
        password="s3cret",
        client_id="Adzup_App",
        auth_base=AUTH_BASE,
        api_base=API_BASE,
        pop_base=POP_BASE,
        poll_delay_seconds=5.0,
    )


@pytest.fixture
def media_file(tmp_path):
    path = tmp_path / "sample.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg-payload")
    return path


class FakeBackend:
    """
    In-memory content-management backend served through respx.

    Mirrors the endpoints a publish run touches. Deleting a playlist that
    still has file or screen attachments is rejected with 409, like the
    real service.
    """

    def __init__(self, screens: list[str] | None = None) -> None:
        self._ids = count(1)
        self.assets: dict[str, str] = {}
        self.playlists: dict[str, dict[str, Any]] = {}
        self.links: dict[str, dict[str, tuple[str, str]]] = {"file": {}, "screen": {}}
        self.screens = ["screen-1"] if screens is None else screens
        self.calendars: dict[str, Any] = {}
        self.url_items: list[dict[str, Any]] = []
        self.published: list[str] = []
        self.log: list[tuple[str, str]] = []
        self.requests: list[httpx.Request] = []
        self._overrides: list[tuple[str, re.Pattern, int, str]] = []
        self._routes: list[tuple[str, re.Pattern, Callable[..., httpx.Response]]] = [
            ("POST", r"/connect/token", self._token),
            ("GET", r"/api/file-management/file-descriptor", self._list_assets),
            ("POST", r"/api/file-management/file-descriptor/creative-pre-upload-info", self._pre_upload),
            ("POST", r"/api/file-management/file-descriptor/upload", self._upload),
            ("GET", r"/api/playlist-management/playlist", self._list_playlists),
            ("POST", r"/api/playlist-management/playlist", self._create_playlist),
            ("DELETE", r"/api/playlist-management/playlist/(?P<pid>[^/]+)", self._delete_playlist),
            ("GET", r"/api/playlist-management/playlist-(?P<kind>file|screen)", self._list_links),
            (
                "PUT",
                r"/api/playlist-management/playlist-(?P<kind>file|screen)/create-or-update-batch/(?P<pid>[^/]+)",
                self._replace_links,
            ),
            ("DELETE", r"/api/playlist-management/playlist-(?P<kind>file|screen)/delete-batch", self._delete_links),
            ("PUT", r"/api/playlist-management/playlist/(?P<pid>[^/]+)/update-calendar", self._calendar),
            ("POST", r"/api/playlist-management/playlist-url", self._add_url),
            ("POST", r"/api/playlist-management/playlist/(?P<pid>[^/]+)/publish", self._publish),
            ("GET", r"/api/inventory-management/screen", self._list_screens),
            ("GET", r"/api/PopManagement/pop/get-overview-by-screen-id", self._pop_overview),
        ]
        self._routes = [(m, re.compile(f"^{p}$"), h) for m, p, h in self._routes]

    # --- seeding and failure injection ---

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def add_asset(self, name: str) -> str:
        asset_id = self._next_id("asset")
        self.assets[asset_id] = name
        return asset_id

    def add_playlist(self, name: str, files: int = 0, screens: int = 0) -> str:
        playlist_id = self._next_id("playlist")
        self.playlists[playlist_id] = {"id": playlist_id, "name": name}
        for kind, n in (("file", files), ("screen", screens)):
            for _ in range(n):
                self.links[kind][self._next_id(f"{kind}link")] = (playlist_id, self._next_id(kind))
        return playlist_id

    def respond(self, method: str, path: str, status: int, body: str) -> None:
        """Answer matching requests with a fixed text body instead of the handler."""
        self._overrides.append((method, re.compile(f"^{path}$"), status, body))

    def fail(self, method: str, path: str, status: int = 500, body: str = "boom") -> None:
        self.respond(method, path, status, body)

    def playlists_named(self, name: str) -> list[str]:
        return [pid for pid, p in self.playlists.items() if p["name"].lower() == name.lower()]

    def links_for(self, kind: str, playlist_id: str) -> list[str]:
        return [lid for lid, (pid, _) in self.links[kind].items() if pid == playlist_id]

    def calls(self, method: str, prefix: str = "") -> list[str]:
        return [path for m, path in self.log if m == method and path.startswith(prefix)]

    # --- dispatch ---

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.log.append((method, path))
        self.requests.append(request)
        for override_method, pattern, status, body in self._overrides:
            if override_method == method and pattern.match(path):
                return httpx.Response(status, text=body)
        for route_method, pattern, handler in self._routes:
            match = pattern.match(path)
            if route_method == method and match:
                return handler(request, **match.groupdict())
        return httpx.Response(404, json={"error": {"message": f"No route {method} {path}"}})

    @staticmethod
    def _query(request: httpx.Request) -> dict[str, str]:
        return {k: v[0] for k, v in parse_qs(request.url.query.decode()).items()}

    # --- handlers ---

    def _token(self, request):
        return httpx.Response(200, json={"access_token": "token-abc", "token_type": "Bearer"})

    def _list_assets(self, request):
        items = [{"id": aid, "name": name} for aid, name in self.assets.items()]
        return httpx.Response(200, json={"items": items, "totalCount": len(items)})

    def _pre_upload(self, request):
        return httpx.Response(200, json=[])

    def _upload(self, request):
        name = self._query(request)["Name"]
        asset_id = self.add_asset(name)
        return httpx.Response(200, json={"id": asset_id, "name": name})

    def _list_playlists(self, request):
        needle = self._query(request).get("Filter", "").lower()
        items = [p for p in self.playlists.values() if needle in p["name"].lower()]
        return httpx.Response(200, json={"items": items, "totalCount": len(items)})

    def _create_playlist(self, request):
        payload = json.loads(request.content)
        playlist_id = self._next_id("playlist")
        self.playlists[playlist_id] = {"id": playlist_id, **payload}
        return httpx.Response(200, json=self.playlists[playlist_id])

    def _delete_playlist(self, request, pid):
        if pid not in self.playlists:
            return httpx.Response(404, text="not found")
        if self.links_for("file", pid) or self.links_for("screen", pid):
            return httpx.Response(409, text="playlist has attachments")
        del self.playlists[pid]
        return httpx.Response(204)

    def _list_links(self, request, kind):
        pid = self._query(request).get("playlistId")
        items = [{"id": lid, "playlistId": pid} for lid in self.links_for(kind, pid)]
        return httpx.Response(200, json={"items": items, "totalCount": len(items)})

    def _replace_links(self, request, kind, pid):
        payload = json.loads(request.content)
        for lid in self.links_for(kind, pid):
            del self.links[kind][lid]
        for target in payload[f"{kind}Ids"]:
            self.links[kind][self._next_id(f"{kind}link")] = (pid, target)
        return httpx.Response(200, json={})

    def _delete_links(self, request, kind):
        payload = json.loads(request.content)
        for lid in payload["ids"]:
            self.links[kind].pop(lid, None)
        return httpx.Response(204)

    def _calendar(self, request, pid):
        self.calendars[pid] = json.loads(request.content)
        return httpx.Response(200, json={})

    def _add_url(self, request):
        payload = json.loads(request.content)
        self.url_items.append({"playlistId": self._query(request)["playlistId"], **payload})
        return httpx.Response(200, json={"id": self._next_id("url")})

    def _publish(self, request, pid):
        self.published.append(pid)
        return httpx.Response(204)

    def _list_screens(self, request):
        limit = int(self._query(request).get("maxResultCount", len(self.screens)))
        items = [{"id": sid, "name": f"Screen {sid}"} for sid in self.screens[:limit]]
        return httpx.Response(200, json={"items": items, "totalCount": len(self.screens)})

    def _pop_overview(self, request):
        query = self._query(request)
        return httpx.Response(200, json={"screenId": query["ScreenId"], "totalPlays": 0})


@pytest.fixture
def backend():
    fake = FakeBackend()
    with respx.mock(assert_all_called=False) as router:
        for base in (AUTH_BASE, API_BASE, POP_BASE):
            router.route(url__startswith=base).mock(side_effect=fake.handle)
        yield fake
