"""Unit tests for transport configuration and settings."""

import os

import httpx
import pydantic
import pytest

from http_facade.rest.config import RestClientConfig
from http_facade.rest.factory import build_async_client
from http_facade.settings import AppSettings


class TestRestClientConfig:
    """Tests for RestClientConfig defaults and validation."""

    def test_defaults(self) -> None:
        """Defaults match the shared transport profile."""
        config = RestClientConfig()

        assert config.read_timeout_seconds == 30.0
        assert config.keepalive_expiry_seconds == 60.0
        assert config.max_response_size_bytes == 5 * 1024 * 1024
        assert config.max_connections == 10 * (os.cpu_count() or 1)
        assert config.compress is True
        assert config.follow_redirects is True
        assert config.request_time_header == "x-inside-request-time"

    def test_rejects_invalid_timeout(self) -> None:
        """Timeouts must be positive."""
        with pytest.raises(pydantic.ValidationError):
            RestClientConfig(read_timeout_seconds=0)

    def test_rejects_unknown_fields(self) -> None:
        """Unknown options are refused."""
        with pytest.raises(pydantic.ValidationError):
            RestClientConfig(retries=3)  # type: ignore[call-arg]


class TestAppSettings:
    """Tests for environment-driven settings."""

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """HTTP_FACADE_ variables override defaults."""
        monkeypatch.setenv("HTTP_FACADE_READ_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("HTTP_FACADE_MAX_CONNECTIONS", "7")
        monkeypatch.setenv("HTTP_FACADE_LOG_LEVEL", "DEBUG")

        settings = AppSettings(_env_file=None)  # type: ignore[call-arg]
        config = settings.client_config()

        assert settings.log_level == "DEBUG"
        assert config.read_timeout_seconds == 5.0
        assert config.max_connections == 7

    def test_pool_size_defaults_to_cpu_based(self) -> None:
        """Without an override the pool size follows the CPU count."""
        settings = AppSettings(_env_file=None)  # type: ignore[call-arg]
        assert settings.client_config().max_connections == 10 * (os.cpu_count() or 1)


class TestBuildAsyncClient:
    """Tests for the shared transport builder."""

    async def test_applies_timeouts_and_redirects(self) -> None:
        """Timeouts and redirect policy come from the config."""
        config = RestClientConfig(read_timeout_seconds=12, connect_timeout_seconds=3)
        client = build_async_client(config)
        try:
            assert client.timeout.read == 12
            assert client.timeout.connect == 3
            assert client.follow_redirects is True
        finally:
            await client.aclose()

    async def test_stamps_request_time(self) -> None:
        """Requests carry the send time and responses echo it."""
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["stamp"] = request.headers["x-inside-request-time"]
            return httpx.Response(200, text="ok")

        client = build_async_client(transport=httpx.MockTransport(handler))
        try:
            response = await client.get("http://svc.local/ping")
        finally:
            await client.aclose()

        assert seen["stamp"].isdigit()
        assert response.headers["x-inside-request-time"] == seen["stamp"]

    async def test_compression_can_be_disabled(self) -> None:
        """Disabling compression asks for identity encoding."""
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["encoding"] = request.headers["accept-encoding"]
            return httpx.Response(200)

        client = build_async_client(
            RestClientConfig(compress=False), transport=httpx.MockTransport(handler)
        )
        try:
            await client.get("http://svc.local/")
        finally:
            await client.aclose()

        assert seen["encoding"] == "identity"
