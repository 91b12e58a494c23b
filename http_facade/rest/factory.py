"""Builders for the shared transport and the rest client."""

import time

import httpx
import structlog

from http_facade.rest.client import RestClient
from http_facade.rest.config import RestClientConfig
from http_facade.rest.normalizer import ResponseNormalizer
from http_facade.settings import AppSettings


logger = structlog.get_logger()


def build_async_client(
    config: RestClientConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared ``httpx.AsyncClient``.

    The request hook stamps each request with its send time (epoch
    milliseconds) and the response hook copies that stamp onto the
    response, so downstream consumers can measure round trips.

    Args:
        config: Transport configuration; defaults are used if omitted.
        transport: Optional transport override (e.g. ``httpx.MockTransport``).

    Returns:
        Configured async client.
    """
    config = config or RestClientConfig()
    header = config.request_time_header

    async def stamp_request(request: httpx.Request) -> None:
        request.headers[header] = str(time.time_ns() // 1_000_000)

    async def copy_stamp(response: httpx.Response) -> None:
        sent_at = response.request.headers.get(header)
        if sent_at is not None:
            response.headers[header] = sent_at

    headers: dict[str, str] = {}
    if not config.compress:
        headers["Accept-Encoding"] = "identity"

    logger.debug(
        "async_client_init",
        component="rest",
        max_connections=config.max_connections,
        read_timeout_seconds=config.read_timeout_seconds,
    )
    return httpx.AsyncClient(
        headers=headers,
        timeout=httpx.Timeout(
            config.read_timeout_seconds,
            connect=config.connect_timeout_seconds,
        ),
        limits=httpx.Limits(
            max_connections=config.max_connections,
            max_keepalive_connections=config.max_connections,
            keepalive_expiry=config.keepalive_expiry_seconds,
        ),
        follow_redirects=config.follow_redirects,
        event_hooks={"request": [stamp_request], "response": [copy_stamp]},
        transport=transport,
    )


def create_rest_client(
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestClient:
    """Create a ready-to-use RestClient.

    Args:
        settings: Application settings; loaded from the environment if omitted.
        transport: Optional transport override (e.g. ``httpx.MockTransport``).

    Returns:
        RestClient owning a new async transport.
    """
    settings = settings or AppSettings()
    config = settings.client_config()
    normalizer = ResponseNormalizer(
        max_response_size_bytes=config.max_response_size_bytes,
    )
    logger.debug("rest_client_init", component="rest")
    return RestClient(build_async_client(config, transport), normalizer=normalizer)
