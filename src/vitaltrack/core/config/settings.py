"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """VitalTrack server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default: the entry store holds personal health data and
    # there is no auth layer in front of the MCP server.
    server_host: str = "127.0.0.1"
    server_port: int = 8001
    log_level: str = "info"
    # Binding to a non-loopback host is refused unless this is set true.
    allow_insecure_bind: bool = False

    # Storage (entry history)
    db_path: str = "~/.vitaltrack/health.db"

    # Encryption (empty disables persistence)
    encryption_key: str = ""

    # Single local user; entries are stamped with this id
    default_user_id: str = "local"


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
