"""Non-blocking outbound HTTP client with unified error handling."""

import contextlib
import time
import uuid
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx
import structlog

from http_facade.errors import BusinessError
from http_facade.rest.metrics import RestMetrics
from http_facade.rest.models import CallDescriptor, HeaderInput
from http_facade.rest.normalizer import ResponseNormalizer
from http_facade.rest.redact import redact_headers, redact_url
from http_facade.rest.state_machine import RequestState, RequestStateMachine


logger = structlog.get_logger()


class RestClient:
    """Facade for JSON, form and query-string calls to downstream services.

    Every call is built into a CallDescriptor, dispatched on the shared
    transport and funneled through the ResponseNormalizer. Callers receive
    the response text or a single BusinessError; they never see raw
    transport responses or exceptions.

    Operations are coroutines: nothing is sent until they are awaited, and
    failures surface only through the awaited result.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        normalizer: ResponseNormalizer | None = None,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the rest client.

        Args:
            client: Shared async transport, safe for concurrent use.
            normalizer: Response normalizer; a default one is created if omitted.
            log: Logger to report through; defaults to the module logger.
        """
        self._client = client
        self._log = log if log is not None else logger.bind(component="rest")
        self._normalizer = normalizer or ResponseNormalizer(log=self._log)

    @property
    def transport(self) -> httpx.AsyncClient:
        """Get the underlying async transport."""
        return self._client

    async def post(
        self,
        url: str,
        body: Any,
        headers: HeaderInput | None = None,
    ) -> str:
        """POST a JSON body.

        Args:
            url: Target URL.
            body: Text sent verbatim, or an object serialized to JSON.
            headers: Optional caller headers.

        Returns:
            Response body text.

        Raises:
            BusinessError: On any status or transport failure.
        """
        return await self.execute(CallDescriptor.for_json(url, body, headers))

    async def post_form(
        self,
        url: str,
        fields: Mapping[str, Any],
        headers: HeaderInput | None = None,
    ) -> str:
        """POST form-urlencoded fields.

        Args:
            url: Target URL.
            fields: Form fields.
            headers: Optional caller headers.

        Returns:
            Response body text.

        Raises:
            BusinessError: On any status or transport failure.
        """
        return await self.execute(CallDescriptor.for_form(url, fields, headers))

    async def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        headers: HeaderInput | None = None,
    ) -> str:
        """GET with query parameters appended to the URL.

        Args:
            url: Target URL; its existing query string is preserved.
            params: Query fields.
            headers: Optional caller headers.

        Returns:
            Response body text.

        Raises:
            BusinessError: On any status or transport failure.
        """
        return await self.execute(CallDescriptor.for_query(url, params, headers))

    async def execute(
        self,
        call: CallDescriptor,
        lifecycle: RequestStateMachine | None = None,
    ) -> str:
        """Dispatch one described call and normalize its outcome.

        Args:
            call: Call to dispatch.
            lifecycle: Optional state machine tracking this call; a new one is
                created if omitted.

        Returns:
            Response body text.

        Raises:
            BusinessError: On any status or transport failure.
        """
        lifecycle = lifecycle or RequestStateMachine(uuid.uuid4().hex)
        log = self._log.bind(
            request_id=lifecycle.request_id,
            method=call.method.value,
            url=redact_url(call.url),
        )

        with contextlib.suppress(Exception):
            if call.headers:
                log.debug(
                    "http_call_start",
                    body=call.trace_body(),
                    headers=redact_headers(call.headers),
                )
            else:
                log.debug("http_call_start", body=call.trace_body())

        async def dispatch() -> httpx.Response:
            request = self._client.build_request(
                call.method.value,
                call.render_url(),
                headers=call.render_headers(),
                content=_encode(call.render_body()),
            )
            lifecycle.transition(RequestState.DISPATCHED)
            return await self._client.send(request, stream=True)

        start_time_ns = time.perf_counter_ns()
        try:
            text = await self._normalizer.normalize(dispatch, log=log)
        except BusinessError:
            lifecycle.transition(RequestState.NORMALIZED_ERROR)
            raise
        finally:
            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            self._normalizer.metrics.record_duration(duration_ms)

        lifecycle.transition(RequestState.NORMALIZED_SUCCESS)
        return text

    @property
    def metrics(self) -> RestMetrics:
        """Get the metrics sink shared with the normalizer."""
        return self._normalizer.metrics

    async def aclose(self) -> None:
        """Close the underlying transport."""
        await self._client.aclose()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _encode(body: str | None) -> bytes | None:
    if body is None:
        return None
    return body.encode("utf-8")
