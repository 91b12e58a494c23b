"""Configuration models for the rest layer."""

import os
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from http_facade.rest.constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_KEEPALIVE_EXPIRY_SECONDS,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_READ_TIMEOUT_SECONDS,
    REQUEST_TIME_HEADER,
)


def _default_max_connections() -> int:
    return 10 * (os.cpu_count() or 1)


class RestClientConfig(BaseModel):
    """Configuration for the shared outbound transport.

    Stateless and shared by every call made through one client.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    read_timeout_seconds: Annotated[float, Field(gt=0, le=600.0)] = (
        DEFAULT_READ_TIMEOUT_SECONDS
    )
    connect_timeout_seconds: Annotated[float, Field(gt=0, le=600.0)] = (
        DEFAULT_CONNECT_TIMEOUT_SECONDS
    )
    max_connections: Annotated[int, Field(ge=1, le=10_000)] = Field(
        default_factory=_default_max_connections
    )
    keepalive_expiry_seconds: Annotated[float, Field(ge=0, le=3600.0)] = (
        DEFAULT_KEEPALIVE_EXPIRY_SECONDS
    )
    max_response_size_bytes: Annotated[int, Field(ge=1024, le=100 * 1024 * 1024)] = (
        DEFAULT_MAX_RESPONSE_SIZE_BYTES
    )
    compress: bool = Field(default=True, description="Request gzip responses")
    follow_redirects: bool = True
    request_time_header: Annotated[str, Field(min_length=1)] = REQUEST_TIME_HEADER
