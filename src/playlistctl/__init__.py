"""playlistctl: idempotent playlist provisioning for the signage content backend."""

__version__ = "0.1.0"
