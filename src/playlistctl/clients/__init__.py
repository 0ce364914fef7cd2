from playlistctl.clients.auth import TokenClient
from playlistctl.clients.backend import BackendClient
from playlistctl.clients.base import BaseHTTPClient

__all__ = ["BackendClient", "BaseHTTPClient", "TokenClient"]
