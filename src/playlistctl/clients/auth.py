from __future__ import annotations

from typing import Any

import structlog

from playlistctl.clients.base import BaseHTTPClient
from playlistctl.errors import AuthError, TransportError
from playlistctl.models import Credential, SessionToken

logger = structlog.get_logger()

TOKEN_PATH = "connect/token"


class TokenClient(BaseHTTPClient):
    """OAuth2 password-grant client for the identity server."""

    def authenticate(self, credential: Credential) -> SessionToken:
        """Exchange the credential for a session token, once per run."""
        form = {
            "grant_type": "password",
            "username": credential.username,
            "password": credential.password,
            "client_id": credential.client_id,
            "scope": credential.scopes,
        }
        try:
            body = self._request(
                "POST",
                TOKEN_PATH,
                data=form,
                headers={"__tenant": credential.tenant},
            )
        except TransportError as exc:
            raise AuthError(
                f"Token request failed: {exc.status_code or 'network error'}",
                status_code=exc.status_code,
                body=exc.body,
            ) from exc

        access_token = _access_token(body)
        if access_token is None:
            raise AuthError("Token response did not contain an access_token", body=str(body))

        logger.info("token_acquired", tenant=credential.tenant, client_id=credential.client_id)
        return SessionToken(access_token=access_token, tenant=credential.tenant)


def _access_token(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    token = body.get("access_token")
    return token if isinstance(token, str) and token else None
