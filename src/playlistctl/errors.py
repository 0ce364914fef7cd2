"""
Error taxonomy for a provisioning run.

Lookup misses are not errors (see ``LookupResult``) and best-effort step
failures are recorded as ``StepOutcome`` values, so only transport failures
and fatal preconditions are raised.
"""

from __future__ import annotations

from playlistctl.models import ExitStatus


class PlaylistctlError(Exception):
    """Base class for playlistctl errors."""


class TransportError(PlaylistctlError):
    """Raised when a backend request fails or returns an unusable body."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AuthError(TransportError):
    """Raised when no session token could be obtained."""


class FatalPreconditionError(PlaylistctlError):
    """Raised when a step fails whose output every later step depends on."""

    def __init__(self, status: ExitStatus, message: str) -> None:
        super().__init__(message)
        self.status = status
