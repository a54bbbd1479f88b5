"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for uiguard services.

    Values are read from environment variables (prefixed ``UIGUARD_``) and
    from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="UIGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # platform-injected port takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (injected port takes precedence)."""
        return self.port if self.port is not None else self.api_server_port

    # Stream sessions
    session_ttl_seconds: int = 600  # 10 min inactivity
    session_cleanup_interval: int = 60  # seconds between cleanup sweeps

    # Retry loop
    retry_max_attempts: int = 3
    retry_timeout_ms: int = 30_000

    # Catalog / design tokens (packaged defaults when unset)
    catalog_path: Path | None = None
    tokens_path: Path | None = None
