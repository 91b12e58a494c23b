"""Unified non-blocking HTTP request facade."""

from http_facade.errors import BusinessError, CommonErrorCode, ErrorCode
from http_facade.rest import (
    CallDescriptor,
    RestClient,
    RestClientConfig,
    build_async_client,
    create_rest_client,
)
from http_facade.result import (
    PagedResult,
    Result,
    check_success,
    ensure_success,
    parse_result,
)
from http_facade.rpc import invoke_remote


__version__ = "1.0.0"

__all__ = [
    "BusinessError",
    "CallDescriptor",
    "CommonErrorCode",
    "ErrorCode",
    "PagedResult",
    "RestClient",
    "RestClientConfig",
    "Result",
    "build_async_client",
    "check_success",
    "create_rest_client",
    "ensure_success",
    "invoke_remote",
    "parse_result",
]
