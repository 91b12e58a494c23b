"""Unit tests for response normalization."""

import httpx
import pytest
from structlog.testing import capture_logs

from http_facade.errors import BusinessError, CommonErrorCode
from http_facade.rest.metrics import RestMetrics
from http_facade.rest.models import FailureKind
from http_facade.rest.normalizer import STATUS_RULES, ResponseNormalizer, match_status


def _sender(response: httpx.Response):
    async def send() -> httpx.Response:
        return response

    return send


def _failing_sender(exc: Exception):
    async def send() -> httpx.Response:
        raise exc

    return send


class FailingCloseResponse(httpx.Response):
    """Response whose close raises."""

    async def aclose(self) -> None:
        raise RuntimeError("close failed")


class TestStatusRules:
    """Tests for the ordered status ladder."""

    def test_rule_order(self) -> None:
        """404 precedes 4xx, which precedes 5xx, which precedes the catch-all."""
        assert [rule.kind for rule in STATUS_RULES] == [
            FailureKind.ROUTE_NOT_FOUND,
            FailureKind.CLIENT_ERROR,
            FailureKind.SERVER_ERROR,
            FailureKind.UNKNOWN_STATUS,
        ]

    def test_404_is_route_not_found(self) -> None:
        """404 matches the route rule, not the generic client rule."""
        rule = match_status(404)
        assert rule is not None
        assert rule.kind == FailureKind.ROUTE_NOT_FOUND

    @pytest.mark.parametrize("status", [400, 401, 403, 405, 409, 422, 429, 499])
    def test_client_errors(self, status: int) -> None:
        """Every 4xx except 404 is a client error."""
        rule = match_status(status)
        assert rule is not None
        assert rule.kind == FailureKind.CLIENT_ERROR

    @pytest.mark.parametrize("status", [500, 502, 503, 504, 599])
    def test_server_errors(self, status: int) -> None:
        """Every 5xx is a server error."""
        rule = match_status(status)
        assert rule is not None
        assert rule.kind == FailureKind.SERVER_ERROR

    @pytest.mark.parametrize("status", [100, 301, 304, 600, 999])
    def test_other_non_success_is_unknown(self, status: int) -> None:
        """Statuses outside 2xx, 4xx and 5xx fall to the catch-all."""
        rule = match_status(status)
        assert rule is not None
        assert rule.kind == FailureKind.UNKNOWN_STATUS

    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success_has_no_rule(self, status: int) -> None:
        """2xx statuses match no rule."""
        assert match_status(status) is None

    def test_error_messages_embed_status(self) -> None:
        """Generated errors carry the HTTP request error code and status."""
        error = STATUS_RULES[1].to_error(401)

        assert error.code == CommonErrorCode.HTTP_REQUEST_ERROR.code
        assert error.message == (
            "authentication failed, contact administrator, error code: 401"
        )

    def test_shared_error_code_is_not_mutated(self) -> None:
        """Deriving a message leaves the shared constant untouched."""
        STATUS_RULES[2].to_error(503)
        assert CommonErrorCode.HTTP_REQUEST_ERROR.message == "http request error"


class TestNormalize:
    """Tests for ResponseNormalizer.normalize."""

    async def test_success_returns_exact_body(self) -> None:
        """A 2xx response yields the decoded body unchanged."""
        normalizer = ResponseNormalizer()
        text = await normalizer.normalize(_sender(httpx.Response(200, text=" ok\n")))
        assert text == " ok\n"

    async def test_empty_body(self) -> None:
        """An empty 2xx body yields an empty string."""
        normalizer = ResponseNormalizer()
        assert await normalizer.normalize(_sender(httpx.Response(204))) == ""

    async def test_decodes_declared_charset(self) -> None:
        """The response charset drives text decoding."""
        response = httpx.Response(
            200,
            content="café".encode("latin-1"),
            headers={"content-type": "text/plain; charset=latin-1"},
        )
        assert await ResponseNormalizer().normalize(_sender(response)) == "café"

    async def test_404_message(self) -> None:
        """404 produces the route error message."""
        with pytest.raises(BusinessError) as exc_info:
            await ResponseNormalizer().normalize(_sender(httpx.Response(404)))

        assert exc_info.value.message == (
            "request path does not exist, check the request address"
        )

    async def test_server_error_message(self) -> None:
        """5xx produces the server error message with the status."""
        with pytest.raises(BusinessError) as exc_info:
            await ResponseNormalizer().normalize(_sender(httpx.Response(502)))

        assert exc_info.value.message == (
            "internal server error, retry later or contact support, error code: 502"
        )

    async def test_unknown_status_message(self) -> None:
        """Other non-2xx statuses produce the unknown error message."""
        with pytest.raises(BusinessError) as exc_info:
            await ResponseNormalizer().normalize(_sender(httpx.Response(304)))

        assert exc_info.value.message == (
            "unknown error, retry later or contact administrator, error code: 304"
        )

    async def test_status_error_closes_response(self) -> None:
        """The response is closed even when the body is never read."""
        response = httpx.Response(500, text="boom")
        with pytest.raises(BusinessError):
            await ResponseNormalizer().normalize(_sender(response))
        assert response.is_closed

    async def test_close_failure_keeps_status_error(self) -> None:
        """A failing close does not replace the status error."""
        with pytest.raises(BusinessError) as exc_info:
            await ResponseNormalizer().normalize(_sender(FailingCloseResponse(404)))

        assert exc_info.value.message == (
            "request path does not exist, check the request address"
        )

    async def test_close_failure_keeps_body(self) -> None:
        """A failing close after a successful read still returns the body."""
        response = FailingCloseResponse(200, text="ok")
        assert await ResponseNormalizer().normalize(_sender(response)) == "ok"

    async def test_status_error_is_not_logged_as_failure(self) -> None:
        """Status errors do not produce error-severity records."""
        with capture_logs() as logs:
            normalizer = ResponseNormalizer()
            with pytest.raises(BusinessError):
                await normalizer.normalize(_sender(httpx.Response(403)))

        assert not [entry for entry in logs if entry["log_level"] == "error"]

    async def test_transport_error_becomes_system_error(self) -> None:
        """Transport exceptions become the fixed system error."""
        exc = httpx.ConnectError("connection refused by 10.0.0.7")

        with capture_logs() as logs:
            normalizer = ResponseNormalizer()
            with pytest.raises(BusinessError) as exc_info:
                await normalizer.normalize(_failing_sender(exc))

        error = exc_info.value
        assert error.error_code == CommonErrorCode.SYS_ERROR
        assert "10.0.0.7" not in error.message
        assert error.__cause__ is None

        failures = [e for e in logs if e["event"] == "http_client_call_failed"]
        assert len(failures) == 1
        assert failures[0]["log_level"] == "error"
        assert failures[0]["exc_info"] is exc

    async def test_any_exception_becomes_system_error(self) -> None:
        """Non-httpx exceptions are replaced as well."""
        with pytest.raises(BusinessError) as exc_info:
            await ResponseNormalizer().normalize(_failing_sender(RuntimeError("x")))
        assert exc_info.value.error_code == CommonErrorCode.SYS_ERROR

    async def test_undecodable_body_becomes_system_error(self) -> None:
        """Decode failures are transport-level faults."""
        response = httpx.Response(
            200,
            content=b"\xff\xfe\xfa",
            headers={"content-type": "application/json; charset=utf-8"},
        )
        with pytest.raises(BusinessError) as exc_info:
            await ResponseNormalizer().normalize(_sender(response))
        assert exc_info.value.error_code == CommonErrorCode.SYS_ERROR

    async def test_oversized_body_becomes_system_error(self) -> None:
        """Bodies above the limit are rejected."""
        normalizer = ResponseNormalizer(max_response_size_bytes=4)
        with pytest.raises(BusinessError) as exc_info:
            await normalizer.normalize(_sender(httpx.Response(200, text="too long")))
        assert exc_info.value.error_code == CommonErrorCode.SYS_ERROR

    async def test_body_at_limit_is_accepted(self) -> None:
        """A body exactly at the limit is read."""
        normalizer = ResponseNormalizer(max_response_size_bytes=4)
        assert await normalizer.normalize(_sender(httpx.Response(200, text="four"))) == (
            "four"
        )

    async def test_success_is_traced_at_debug(self) -> None:
        """The decoded body is logged at debug before being returned."""
        with capture_logs() as logs:
            normalizer = ResponseNormalizer()
            await normalizer.normalize(_sender(httpx.Response(200, text="ok")))

        traces = [e for e in logs if e["event"] == "http_call_response"]
        assert traces == [
            {
                "event": "http_call_response",
                "log_level": "debug",
                "body": "ok",
                "component": "rest",
            }
        ]


class TestNormalizeMetrics:
    """Tests for metrics recorded during normalization."""

    async def test_records_success(self) -> None:
        """Successful calls record status and bytes."""
        await ResponseNormalizer().normalize(_sender(httpx.Response(200, text="abc")))

        metrics = RestMetrics.get_instance()
        assert metrics.http_responses_total == {200: 1}
        assert metrics.http_bytes_total == 3
        assert metrics.http_failures_total == {}

    async def test_records_failure_kinds(self) -> None:
        """Each failure is counted under its kind."""
        normalizer = ResponseNormalizer()
        for status in (404, 400, 500, 304):
            with pytest.raises(BusinessError):
                await normalizer.normalize(_sender(httpx.Response(status)))
        with pytest.raises(BusinessError):
            await normalizer.normalize(_failing_sender(httpx.ReadError("reset")))

        assert RestMetrics.get_instance().http_failures_total == {
            "ROUTE_NOT_FOUND": 1,
            "CLIENT_ERROR": 1,
            "SERVER_ERROR": 1,
            "UNKNOWN_STATUS": 1,
            "SYSTEM": 1,
        }

    async def test_uses_injected_metrics(self) -> None:
        """An injected sink is used instead of the singleton."""
        sink = RestMetrics()
        normalizer = ResponseNormalizer(metrics=sink)
        await normalizer.normalize(_sender(httpx.Response(200, text="x")))

        assert sink.http_responses_total == {200: 1}
        assert RestMetrics.get_instance().http_responses_total == {}
