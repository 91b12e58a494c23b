"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from http_facade.rest.config import RestClientConfig
from http_facade.rest.constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_KEEPALIVE_EXPIRY_SECONDS,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_READ_TIMEOUT_SECONDS,
)


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HTTP_FACADE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    read_timeout_seconds: float = Field(default=DEFAULT_READ_TIMEOUT_SECONDS, gt=0)
    connect_timeout_seconds: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT_SECONDS, gt=0
    )
    max_connections: int | None = Field(
        default=None, ge=1, description="Pool size; 10 x CPU count when unset"
    )
    keepalive_expiry_seconds: float = Field(
        default=DEFAULT_KEEPALIVE_EXPIRY_SECONDS, ge=0
    )
    max_response_size_bytes: int = Field(
        default=DEFAULT_MAX_RESPONSE_SIZE_BYTES, ge=1024
    )
    follow_redirects: bool = True
    compress: bool = True
    log_level: str = Field(default="INFO")
    log_json: bool = True

    def client_config(self) -> RestClientConfig:
        """Build the transport configuration from these settings."""
        values: dict[str, object] = {
            "read_timeout_seconds": self.read_timeout_seconds,
            "connect_timeout_seconds": self.connect_timeout_seconds,
            "keepalive_expiry_seconds": self.keepalive_expiry_seconds,
            "max_response_size_bytes": self.max_response_size_bytes,
            "follow_redirects": self.follow_redirects,
            "compress": self.compress,
        }
        if self.max_connections is not None:
            values["max_connections"] = self.max_connections
        return RestClientConfig.model_validate(values)
