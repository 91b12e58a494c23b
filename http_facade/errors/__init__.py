"""Unified error taxonomy."""

from http_facade.errors.codes import CommonErrorCode, ErrorCode
from http_facade.errors.exceptions import BusinessError


__all__ = [
    "BusinessError",
    "CommonErrorCode",
    "ErrorCode",
]
