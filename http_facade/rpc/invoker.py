"""Remote-call invoker: envelope unwrapping and exception mapping.

Awaits an arbitrary remote call, unwraps Result / PagedResult envelopes and
maps every failure onto a BusinessError.
"""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx
import pydantic
import pydantic_core
import structlog

from http_facade.errors import BusinessError, CommonErrorCode, ErrorCode
from http_facade.result.models import PagedResult, Result


logger = structlog.get_logger()

# Failed envelopes with a code in this range are reported at error severity
ALERT_CODE_MIN = 2000
ALERT_CODE_MAX = 3000

_REMOTE_MESSAGE_START = "[_"
_REMOTE_MESSAGE_END = "_]"


@dataclass(frozen=True)
class ExceptionRule:
    """Maps a family of exceptions onto a fixed error code."""

    types: tuple[type[BaseException], ...]
    error_code: ErrorCode


# Evaluated in order, first match wins.
EXCEPTION_RULES: tuple[ExceptionRule, ...] = (
    ExceptionRule(
        types=(TimeoutError, httpx.TimeoutException),
        error_code=CommonErrorCode.BUSY_SERVICE,
    ),
    ExceptionRule(
        types=(ConnectionError, httpx.NetworkError),
        error_code=CommonErrorCode.NETWORK_CONNECT_FAILED,
    ),
    ExceptionRule(
        types=(
            pydantic.ValidationError,
            pydantic_core.PydanticSerializationError,
            json.JSONDecodeError,
            UnicodeError,
        ),
        error_code=CommonErrorCode.SERIALIZATION_EXCEPTION,
    ),
    ExceptionRule(
        types=(PermissionError,),
        error_code=CommonErrorCode.FORBIDDEN_EXCEPTION,
    ),
    ExceptionRule(
        types=(httpx.HTTPError,),
        error_code=CommonErrorCode.RPC_CALL_EXCEPTION,
    ),
)


def parse_remote_message(message: str | None) -> ErrorCode | None:
    """Extract a ``[_code:message_]`` marker from an exception message.

    Message segments after the code are concatenated. A marker without a
    ``:`` becomes a REMOTE_SERVICE error carrying the marker text.

    Args:
        message: Exception message from a remote service.

    Returns:
        Parsed error code, or None if no marker is present.
    """
    if not message:
        return None
    begin = message.find(_REMOTE_MESSAGE_START)
    if begin < 0:
        return None
    begin += len(_REMOTE_MESSAGE_START)
    end = message.find(_REMOTE_MESSAGE_END, begin)
    if end < 0:
        return None

    inner = message[begin:end]
    code, *parts = inner.split(":")
    if not parts or not code:
        return CommonErrorCode.REMOTE_SERVICE.with_message(inner)
    return ErrorCode(code=code, kind="ERROR", message="".join(parts))


def map_exception(exc: BaseException) -> BusinessError:
    """Map an exception raised by a remote call to a BusinessError.

    Args:
        exc: Exception raised while invoking or awaiting the call.

    Returns:
        Corresponding BusinessError; BusinessError instances are returned as is.
    """
    if isinstance(exc, BusinessError):
        return exc

    for rule in EXCEPTION_RULES:
        if isinstance(exc, rule.types):
            return BusinessError(rule.error_code)

    message = str(exc)
    remote = parse_remote_message(message)
    if remote is not None:
        return BusinessError(remote)
    return BusinessError(
        CommonErrorCode.SYS_ERROR.with_message(message or type(exc).__name__)
    )


def _log_failed_result(code: str | None, description: str | None) -> None:
    if not code:
        return
    if code.isdigit() and ALERT_CODE_MIN <= int(code) <= ALERT_CODE_MAX:
        logger.error("remote_result_failed", code=code, description=description)
    else:
        logger.info("remote_result_failed", code=code, description=description)


def _reject(result: Result[Any]) -> BusinessError:
    _log_failed_result(result.code, result.description)
    if not result.code:
        return BusinessError(
            CommonErrorCode.REMOTE_SERVICE.with_message(result.description or "")
        )
    return BusinessError.of(result.code, result.description)


async def invoke_remote(call: Callable[[], Awaitable[Any]]) -> Any:
    """Invoke a remote call and unwrap its envelope.

    - ``None`` is returned as is (void remote operations).
    - A successful PagedResult is returned whole; a successful Result
      yields its ``data``.
    - Any other value is returned unchanged.

    Args:
        call: Zero-argument callable returning the remote call's awaitable.

    Returns:
        Unwrapped value.

    Raises:
        BusinessError: If the envelope reports failure or the call raises.
    """
    try:
        value = await call()
    except BusinessError as exc:
        logger.error("remote_call_failed", code=exc.code, exc_info=exc)
        raise
    except Exception as exc:  # noqa: BLE001
        logger.error("remote_call_failed", exc_info=exc)
        raise map_exception(exc) from exc

    if value is None:
        logger.debug("remote_call_result_empty")
        return None

    logger.debug("remote_call_result", result_type=type(value).__name__)

    if isinstance(value, PagedResult):
        if not value.success:
            raise _reject(value)
        return value

    if isinstance(value, Result):
        if not value.success:
            raise _reject(value)
        return value.data

    return value
