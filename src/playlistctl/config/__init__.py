"""
playlistctl configuration.

Settings are loaded from ``DEMO_``-prefixed environment variables or a
``.env`` file in the working directory.
"""

from playlistctl.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
