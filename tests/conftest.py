"""Shared fixtures for http_facade tests."""

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator

import httpx
import pytest

from http_facade.rest import RestClient, RestMetrics, build_async_client
from http_facade.rest.config import RestClientConfig


Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterator[None]:
    """Give every test fresh process-wide metrics."""
    RestMetrics.reset()
    yield
    RestMetrics.reset()


@pytest.fixture
async def make_client() -> AsyncIterator[Callable[..., RestClient]]:
    """Build RestClients backed by httpx.MockTransport handlers."""
    clients: list[RestClient] = []

    def factory(
        handler: Handler,
        config: RestClientConfig | None = None,
    ) -> RestClient:
        transport = httpx.MockTransport(handler)
        client = RestClient(build_async_client(config, transport=transport))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
