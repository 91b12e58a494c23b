"""Business result envelopes and the success gate."""

from http_facade.result.gate import check_success, ensure_success
from http_facade.result.models import Envelope, PagedResult, Result, parse_result


__all__ = [
    "Envelope",
    "PagedResult",
    "Result",
    "check_success",
    "ensure_success",
    "parse_result",
]
