"""Response normalization: status mapping, body decoding, fault isolation."""

import contextlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from io import BytesIO

import httpx
import structlog

from http_facade.errors import BusinessError, CommonErrorCode
from http_facade.rest.constants import (
    ACCEPT_CHARSET_UTF8,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    MESSAGE_CLIENT_ERROR,
    MESSAGE_ROUTE_NOT_FOUND,
    MESSAGE_SERVER_ERROR,
    MESSAGE_UNKNOWN_ERROR,
)
from http_facade.rest.metrics import RestMetrics
from http_facade.rest.models import FailureKind, ResponseSizeExceededError


logger = structlog.get_logger()


@dataclass(frozen=True)
class StatusRule:
    """One entry of the ordered status ladder.

    Attributes:
        kind: Failure classification recorded when the rule matches.
        matches: Predicate over the response status code.
        template: Message template, ``{status}`` is replaced by the code.
    """

    kind: FailureKind
    matches: Callable[[int], bool]
    template: str

    def to_error(self, status_code: int) -> BusinessError:
        """Build the unified error for a matched status."""
        message = self.template.format(status=status_code)
        return BusinessError(CommonErrorCode.HTTP_REQUEST_ERROR.with_message(message))


# Evaluated in order, first match wins. 404 is checked before the generic
# 4xx rule, and the final rule catches every remaining non-2xx status.
STATUS_RULES: tuple[StatusRule, ...] = (
    StatusRule(
        kind=FailureKind.ROUTE_NOT_FOUND,
        matches=lambda status: status == httpx.codes.NOT_FOUND,
        template=MESSAGE_ROUTE_NOT_FOUND,
    ),
    StatusRule(
        kind=FailureKind.CLIENT_ERROR,
        matches=httpx.codes.is_client_error,
        template=MESSAGE_CLIENT_ERROR,
    ),
    StatusRule(
        kind=FailureKind.SERVER_ERROR,
        matches=httpx.codes.is_server_error,
        template=MESSAGE_SERVER_ERROR,
    ),
    StatusRule(
        kind=FailureKind.UNKNOWN_STATUS,
        matches=lambda status: not httpx.codes.is_success(status),
        template=MESSAGE_UNKNOWN_ERROR,
    ),
)


def match_status(status_code: int) -> StatusRule | None:
    """Find the first status rule matching a status code.

    Args:
        status_code: HTTP status code.

    Returns:
        Matching rule, or None for a 2xx status.
    """
    for rule in STATUS_RULES:
        if rule.matches(status_code):
            return rule
    return None


class ResponseNormalizer:
    """Maps a pending response to text or exactly one BusinessError.

    Status checks run before the body is read. Any other failure in the
    chain is logged with full detail and replaced by the generic system
    error, so transport exceptions never reach the caller.
    """

    def __init__(
        self,
        max_response_size_bytes: int = DEFAULT_MAX_RESPONSE_SIZE_BYTES,
        log: structlog.stdlib.BoundLogger | None = None,
        metrics: RestMetrics | None = None,
    ) -> None:
        """Initialize the normalizer.

        Args:
            max_response_size_bytes: Upper bound for a decoded body.
            log: Logger to report through; defaults to the module logger.
            metrics: Metrics sink; defaults to the process-wide instance.
        """
        self._max_response_size_bytes = max_response_size_bytes
        self._log = log if log is not None else logger.bind(component="rest")
        self._metrics = metrics

    @property
    def metrics(self) -> RestMetrics:
        """Get the metrics sink."""
        return self._metrics if self._metrics is not None else RestMetrics.get_instance()

    async def normalize(
        self,
        send: Callable[[], Awaitable[httpx.Response]],
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> str:
        """Dispatch a call and normalize its outcome.

        Args:
            send: Zero-argument callable returning a streamed response.
            log: Call-scoped logger; defaults to the normalizer's logger.

        Returns:
            Decoded response body.

        Raises:
            BusinessError: For every error status and every transport fault.
        """
        log = log if log is not None else self._log

        try:
            response = await send()
            try:
                rule = match_status(response.status_code)
                if rule is not None:
                    self.metrics.record_response(response.status_code)
                    self.metrics.record_failure(rule.kind)
                    raise rule.to_error(response.status_code)

                body = await self._read_body(response)
                self.metrics.record_response(response.status_code, len(body))
                text = body.decode(response.encoding or ACCEPT_CHARSET_UTF8)
            finally:
                try:
                    await response.aclose()
                except Exception as exc:  # noqa: BLE001
                    log.debug("http_response_close_failed", error=str(exc))

        except BusinessError:
            raise

        except Exception as exc:  # noqa: BLE001
            log.error("http_client_call_failed", exc_info=exc)
            self.metrics.record_failure(FailureKind.SYSTEM)
            raise BusinessError(CommonErrorCode.SYS_ERROR) from None

        with contextlib.suppress(Exception):
            log.debug("http_call_response", body=text)
        return text

    async def _read_body(self, response: httpx.Response) -> bytes:
        """Read a streamed body, enforcing the size limit.

        Args:
            response: Streamed HTTP response.

        Returns:
            Response body bytes.

        Raises:
            ResponseSizeExceededError: If the body is larger than the limit.
        """
        max_size = self._max_response_size_bytes
        content_length = response.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_size:
            msg = f"Response size {content_length} exceeds limit {max_size}"
            raise ResponseSizeExceededError(msg)

        buffer = BytesIO()
        total_read = 0
        async for chunk in response.aiter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            total_read += len(chunk)
            if total_read > max_size:
                msg = (
                    f"Response size exceeded limit of {max_size} bytes "
                    f"(read {total_read} bytes)"
                )
                raise ResponseSizeExceededError(msg)
            buffer.write(chunk)

        return buffer.getvalue()
