from __future__ import annotations

from pathlib import Path

import structlog

from playlistctl.clients.base import BaseHTTPClient
from playlistctl.errors import TransportError
from playlistctl.models import Asset, content_kind_for, extract_id
from playlistctl.provisioning.locator import ResourceLocator

logger = structlog.get_logger()

PRE_UPLOAD_PATH = "api/file-management/file-descriptor/creative-pre-upload-info"
UPLOAD_PATH = "api/file-management/file-descriptor/upload"


class AssetAcquirer:
    """
    Resolves the media asset for a local file.

    Reuses an existing file descriptor with the same name (case-insensitive)
    and otherwise uploads the file in two phases: a pre-upload announcement
    followed by the multipart transfer.
    """

    def __init__(self, client: BaseHTTPClient, locator: ResourceLocator | None = None) -> None:
        self._client = client
        self._locator = locator or ResourceLocator(client)
        self.last_error: str | None = None

    def acquire(self, path: str | Path) -> Asset | None:
        """
        Return the asset for ``path``, or None if it could not be acquired.

        Args:
            path: Local media file

        Returns:
            Asset with the backend id, or None when either upload phase fails
        """
        path = Path(path)
        name = path.name
        self.last_error = None

        existing_id = self._locator.find_asset(name)
        if existing_id:
            logger.info("asset_reused", asset_id=existing_id, name=name)
            return Asset(id=existing_id, name=name, path=path)

        asset_id = self.upload(path)
        if asset_id is None:
            return None
        return Asset(id=asset_id, name=name, path=path)

    def upload(self, path: Path) -> str | None:
        name = path.name

        try:
            self._client.post(PRE_UPLOAD_PATH, json=[{"fileName": name}])
        except TransportError as exc:
            self.last_error = f"Pre-upload info failed: {exc.body or exc}"
            logger.warning("asset_pre_upload_failed", name=name, status=exc.status_code, body=exc.body)
            return None

        kind = content_kind_for(name)
        try:
            with path.open("rb") as fh:
                body = self._client.post(
                    UPLOAD_PATH,
                    params={"Name": name},
                    files={"File": (name, fh, kind)},
                )
        except TransportError as exc:
            self.last_error = f"Upload failed: {exc.body or exc}"
            logger.warning("asset_upload_failed", name=name, status=exc.status_code, body=exc.body)
            return None
        except OSError as exc:
            self.last_error = f"Could not read {path}: {exc}"
            logger.warning("asset_read_failed", path=str(path), error=str(exc))
            return None

        asset_id = extract_id(body)
        if asset_id is None:
            self.last_error = "Upload response did not contain an id"
            logger.warning("asset_upload_missing_id", name=name)
            return None

        logger.info("asset_uploaded", asset_id=asset_id, name=name, content_kind=kind)
        return asset_id
