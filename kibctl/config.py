"""
Configuration management for kibctl.

This module uses pydantic-settings to manage the connection details of the
Kibana server and the diagnostic logging options. Values are loaded from
environment variables or a .env file, and command line options override
them through ``load_settings``.

The resulting ``Settings`` value is passed explicitly to the components that
need it; nothing reads configuration from module level state.
"""
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kibctl.errors import ConfigurationError


class LogLevel(str, Enum):
    """Log levels supported by the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Main settings class for kibctl."""
    # Kibana api endpoint and basic auth credentials
    host: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("KIBANA_HOST", "HOST"),
    )
    username: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("KIBANA_USERNAME", "USERNAME"),
    )
    password: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("KIBANA_PASSWORD", "PASSWORD"),
    )

    # Diagnostics
    verbose: bool = False
    log_level: LogLevel = LogLevel.DEBUG  # threshold applied when verbose
    structured_logging: bool = False

    model_config = SettingsConfigDict(
        env_prefix="KIBCTL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: Optional[str]) -> Optional[str]:
        """Normalise the host and check it is an http(s) URL."""
        if v is None:
            return v
        v = v.strip().rstrip("/")
        if not v:
            return None
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid kibana host: {v}")
        return v

    @field_validator("username")
    @classmethod
    def _blank_username_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    def require_host(self) -> str:
        """Return the host, failing when it was not configured."""
        if not self.host:
            raise ConfigurationError("kibana host not defined")
        return self.host

    def require_credentials(self) -> None:
        """Check that host, username and password are all configured."""
        self.require_host()
        if not self.username:
            raise ConfigurationError("kibana username not defined")
        if self.password is None or not self.password.get_secret_value():
            raise ConfigurationError("kibana password not defined")

    @property
    def auth(self) -> Optional[tuple]:
        """Basic auth pair for the HTTP client, or None without a username."""
        if not self.username:
            return None
        password = self.password.get_secret_value() if self.password else ""
        return (self.username, password)


def load_settings(**overrides: Any) -> Settings:
    """Load settings from environment variables and .env file.

    Keyword arguments override the loaded values; ``None`` values are
    ignored so unset command line options fall back to the environment.
    """
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
