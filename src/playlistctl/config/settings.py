"""
Application settings using Pydantic.

Provides environment-based configuration loading with DEMO_ prefix.
Do not commit real credentials; the password default is a local dev value.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from playlistctl.models import DEFAULT_SCOPES, Credential


class Settings(BaseSettings):
    """Application settings."""

    # Identity
    tenant: str = "test"
    username: str = "admin@abp.io"
    password: str = "123456"
    client_id: str = "Adzup_App"
    scopes: str = DEFAULT_SCOPES

    # Service base URLs
    auth_base: str = "https://localhost:44332"
    api_base: str = "https://localhost:44389"
    pop_base: str = "https://localhost:7038"

    # Run
    playlist_name: str = "Demo Playlist"
    poll_delay_seconds: float = 5.0

    # HTTP client settings
    http_timeout: float = 30.0
    verify_tls: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "DEMO_"

    def credential(self) -> Credential:
        return Credential(
            tenant=self.tenant,
            username=self.username,
            password=self.password,
            client_id=self.client_id,
            scopes=self.scopes,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
