"""
Value types threaded through a provisioning run.

Backend identifiers are opaque strings; nothing here mints them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Mapping

DEFAULT_SCOPES = "offline_access openid profile email roles Adzup PopManagement"
GENERIC_CONTENT_KIND = "application/octet-stream"

# Extension -> content kind sent with the upload part
CONTENT_KINDS: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".mp4": "video/mp4",
}


class ExitStatus(IntEnum):
    """Process exit status of a provisioning run."""

    SUCCESS = 0
    FATAL_INPUT_MISSING = 2
    FATAL_AUTH = 3
    FATAL_ASSET_ACQUISITION = 4
    FATAL_RESOURCE_CREATION = 5
    FATAL_SCREEN_DISCOVERY = 6


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    QUERY_FAILED = "query_failed"


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a locator query."""

    status: LookupStatus
    identifier: str | None = None
    error: str | None = None

    @classmethod
    def found(cls, identifier: str) -> "LookupResult":
        return cls(LookupStatus.FOUND, identifier=identifier)

    @classmethod
    def not_found(cls) -> "LookupResult":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def query_failed(cls, error: str) -> "LookupResult":
        return cls(LookupStatus.QUERY_FAILED, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND


@dataclass(frozen=True)
class Credential:
    """Password-grant credential for one tenant."""

    tenant: str
    username: str
    password: str = field(repr=False)
    client_id: str
    scopes: str = DEFAULT_SCOPES


@dataclass(frozen=True)
class SessionToken:
    access_token: str = field(repr=False)
    tenant: str

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "__tenant": self.tenant,
        }


@dataclass(frozen=True)
class Asset:
    """A media file tracked by the backend."""

    id: str
    name: str
    path: Path | None = None


@dataclass(frozen=True)
class PlaylistSpec:
    """Desired attributes of the playlist being provisioned."""

    name: str = "Demo Playlist"
    share_of_voice: float | None = 1.0
    description: str | None = "Created via public demo"

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "shareOfVoice": self.share_of_voice,
            "description": self.description,
        }


@dataclass(frozen=True)
class ScheduleWindow:
    start: datetime
    end: datetime
    is_all_day: bool = False
    recurrence_rule: str | None = None

    @classmethod
    def starting_now(cls, days: int = 7, *, now: datetime | None = None) -> "ScheduleWindow":
        start = now or datetime.now(tz=timezone.utc)
        return cls(start=start, end=start + timedelta(days=days))

    def to_payload(self) -> dict[str, Any]:
        return {
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "isAllDay": self.is_all_day,
            "recurrenceRule": self.recurrence_rule,
        }


@dataclass(frozen=True)
class UrlItem:
    name: str = "Demo URL"
    value: str = "https://example.com"
    duration: int = 30

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value, "duration": self.duration}


def content_kind_for(filename: str) -> str:
    """Infer the upload content kind from a file name's extension."""
    return CONTENT_KINDS.get(Path(filename).suffix.lower(), GENERIC_CONTENT_KIND)


def extract_id(item: Any) -> str | None:
    """Return the item's ``id`` if present and well-formed, else None."""
    if not isinstance(item, Mapping):
        return None
    value = item.get("id")
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_items(body: Any) -> list[Any]:
    """Return the ``items`` list of a listing body, or an empty list."""
    if not isinstance(body, Mapping):
        return []
    items = body.get("items")
    return items if isinstance(items, list) else []


def extract_ids(body: Any) -> list[str]:
    ids = []
    for item in extract_items(body):
        identifier = extract_id(item)
        if identifier is not None:
            ids.append(identifier)
    return ids


def name_equals(name: str):
    """Predicate matching items whose ``name`` equals ``name`` ignoring case."""
    wanted = name.casefold()

    def _matches(item: Mapping[str, Any]) -> bool:
        candidate = item.get("name")
        return isinstance(candidate, str) and candidate.casefold() == wanted

    return _matches
