"""Outbound HTTP layer with unified error normalization.

This module provides non-blocking outbound calls with:
- JSON, form-urlencoded and query-string call shapes
- Ordered status-to-error mapping before the body is read
- Transport fault isolation behind a generic system error
- Header and URL credential redaction for diagnostics
- Metrics collection for observability
"""

from http_facade.rest.client import RestClient
from http_facade.rest.config import RestClientConfig
from http_facade.rest.encoding import encode_form, merge_query, to_json_text
from http_facade.rest.factory import build_async_client, create_rest_client
from http_facade.rest.metrics import RestMetrics
from http_facade.rest.models import (
    CallDescriptor,
    FailureKind,
    FormBody,
    HttpMethod,
    ObjectBody,
    ResponseSizeExceededError,
    TextBody,
    resolve_headers,
)
from http_facade.rest.normalizer import STATUS_RULES, ResponseNormalizer, StatusRule
from http_facade.rest.redact import redact_headers, redact_url
from http_facade.rest.state_machine import (
    RequestState,
    RequestStateError,
    RequestStateMachine,
)


__all__ = [
    # Client
    "RestClient",
    "build_async_client",
    "create_rest_client",
    # Normalization
    "ResponseNormalizer",
    "StatusRule",
    "STATUS_RULES",
    # Config
    "RestClientConfig",
    # Models
    "CallDescriptor",
    "FailureKind",
    "FormBody",
    "HttpMethod",
    "ObjectBody",
    "ResponseSizeExceededError",
    "TextBody",
    "resolve_headers",
    # Encoding
    "encode_form",
    "merge_query",
    "to_json_text",
    # Lifecycle
    "RequestState",
    "RequestStateError",
    "RequestStateMachine",
    # Metrics
    "RestMetrics",
    # Redaction
    "redact_headers",
    "redact_url",
]
