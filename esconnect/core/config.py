"""
esconnect - Configuration

Connection configuration plus environment-sourced settings.

Patterns Applied:
- Pydantic Settings with SettingsConfigDict for environment sourcing
- Frozen dataclass for the resolved, immutable connection configuration
- Environment variable prefix ELASTICSEARCH_

Anti-Patterns Avoided:
- #16: Per-request configuration (a client resolves its config once)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Final

from pydantic_settings import BaseSettings, SettingsConfigDict

from esconnect.core.exceptions import ConfigurationError

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 9200
DEFAULT_TIMEOUT_MILLIS: Final[int] = 300_000
DEFAULT_CONNECTION_NAME: Final[str] = "default"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# ConnectionConfig
# =============================================================================


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection settings for one named engine connection.

    Immutable once created; a client derives its base URL from it exactly
    once at construction.

    Attributes:
        host: Hostname, e.g. 127.0.0.1 or elasticsearch (docker)
        port: TCP port of the HTTP interface
        use_tls: Connect with https instead of http
        timeout_millis: Per-request timeout in milliseconds
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    use_tls: bool = False
    timeout_millis: int = DEFAULT_TIMEOUT_MILLIS

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not self.host:
            raise ConfigurationError(f"host must be a non-empty string, got {self.host!r}")
        # bool is an int subclass; True is not a port
        if not _is_int(self.port):
            raise ConfigurationError(f"port must be an integer, got {self.port!r}")
        if not _is_int(self.timeout_millis):
            raise ConfigurationError(
                f"timeout_millis must be an integer, got {self.timeout_millis!r}"
            )
        if not isinstance(self.use_tls, bool):
            raise ConfigurationError(f"use_tls must be a boolean, got {self.use_tls!r}")
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port!r}")
        if self.timeout_millis <= 0:
            raise ConfigurationError(
                f"timeout_millis must be positive, got {self.timeout_millis!r}"
            )

    @property
    def scheme(self) -> str:
        return "https" if self.use_tls else "http"

    @property
    def base_url(self) -> str:
        """Base URL of the engine, e.g. http://127.0.0.1:9200."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_millis / 1000

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> ConnectionConfig:
        """Build a config from a plain mapping merged over the defaults.

        Args:
            options: Any subset of host, port, use_tls, timeout_millis

        Returns:
            Resolved ConnectionConfig

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"Unknown config key(s): {', '.join(unknown)}")
        return cls(**dict(options))


# =============================================================================
# Settings
# =============================================================================


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    ELASTICSEARCH_ prefix. Example: ELASTICSEARCH_HOST=elasticsearch,
    ELASTICSEARCH_TIMEOUT_MILLIS=400
    """

    # Connection
    connection_name: str = DEFAULT_CONNECTION_NAME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    use_tls: bool = False
    timeout_millis: int = DEFAULT_TIMEOUT_MILLIS

    # Logging configuration
    log_level: str = "INFO"
    log_json: bool = True

    # Tracing configuration
    tracing_enabled: bool = False
    tracing_console_export: bool = False

    model_config = SettingsConfigDict(
        env_prefix="ELASTICSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def connection_config(self) -> ConnectionConfig:
        """Resolve the connection part of the settings.

        Raises:
            ConfigurationError: If the values do not form a valid config
        """
        return ConnectionConfig(
            host=self.host,
            port=self.port,
            use_tls=self.use_tls,
            timeout_millis=self.timeout_millis,
        )


def get_settings() -> Settings:
    """Get settings instance.

    Returns:
        Settings instance with values from environment
    """
    return Settings()
