"""
Clean-slate reconciliation of an existing playlist.

The backend may refuse to delete a playlist that still has file or screen
associations, so both association kinds are detached before the playlist
itself is deleted. Every request is best-effort.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from playlistctl.clients.base import BaseHTTPClient
from playlistctl.errors import TransportError
from playlistctl.models import extract_ids

logger = structlog.get_logger()

ATTACHMENT_KINDS = ("file", "screen")


@dataclass
class ReconcileResult:
    """Result of detaching and deleting a prior playlist."""

    playlist_id: str
    detached: dict[str, list[str]] = field(default_factory=dict)
    deleted: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.deleted and not self.errors


def attachment_list_path(kind: str) -> str:
    return f"api/playlist-management/playlist-{kind}"


def attachment_delete_batch_path(kind: str) -> str:
    return f"api/playlist-management/playlist-{kind}/delete-batch"


def playlist_path(playlist_id: str) -> str:
    return f"api/playlist-management/playlist/{playlist_id}"


class PlaylistReconciler:
    """Detaches all attachments of a playlist, then deletes it."""

    def __init__(self, client: BaseHTTPClient) -> None:
        self._client = client

    def reconcile(self, playlist_id: str) -> ReconcileResult:
        result = ReconcileResult(playlist_id=playlist_id)

        for kind in ATTACHMENT_KINDS:
            self._detach(kind, result)

        try:
            self._client.delete(playlist_path(playlist_id))
            result.deleted = True
            logger.info("playlist_deleted", playlist_id=playlist_id)
        except TransportError as exc:
            result.errors.append(f"delete playlist: {exc} {exc.body}".strip())
            logger.warning(
                "playlist_delete_failed",
                playlist_id=playlist_id,
                status=exc.status_code,
                body=exc.body,
            )

        return result

    def _detach(self, kind: str, result: ReconcileResult) -> None:
        playlist_id = result.playlist_id
        try:
            body = self._client.get(attachment_list_path(kind), params={"playlistId": playlist_id})
        except TransportError as exc:
            result.errors.append(f"list {kind} attachments: {exc}")
            logger.warning("attachment_list_failed", kind=kind, playlist_id=playlist_id, error=str(exc))
            return

        ids = extract_ids(body)
        if not ids:
            return

        try:
            self._client.delete(attachment_delete_batch_path(kind), json={"ids": ids})
        except TransportError as exc:
            result.errors.append(f"detach {kind} attachments: {exc} {exc.body}".strip())
            logger.warning(
                "attachment_detach_failed",
                kind=kind,
                playlist_id=playlist_id,
                count=len(ids),
                status=exc.status_code,
            )
            return

        result.detached[kind] = ids
        logger.info("attachments_detached", kind=kind, playlist_id=playlist_id, count=len(ids))
