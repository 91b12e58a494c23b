"""Body and query-string encoding for outbound calls."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, quote_plus, urlencode, urlsplit, urlunsplit

import pydantic_core

from http_facade.rest.constants import ACCEPT_CHARSET_UTF8, FORM_VALUE_SEPARATOR


def to_json_text(value: Any) -> str:
    """Serialize a value to JSON text.

    Text is returned verbatim so that pre-serialized payloads are never
    encoded twice. Pydantic models, dataclasses, datetimes and plain
    containers are supported.

    Args:
        value: Body object.

    Returns:
        JSON text.

    Raises:
        pydantic_core.PydanticSerializationError: If the value cannot be serialized.
    """
    if isinstance(value, str):
        return value
    return pydantic_core.to_json(value).decode(ACCEPT_CHARSET_UTF8)


def _form_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list | tuple | set | frozenset):
        return FORM_VALUE_SEPARATOR.join(_form_value(item) for item in value)
    return str(value)


def _pairs(fields: Mapping[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _form_value(value)) for key, value in fields.items()]


def encode_form(fields: Mapping[str, Any]) -> str:
    """Encode a mapping as an application/x-www-form-urlencoded body.

    Args:
        fields: Form fields in insertion order.

    Returns:
        UTF-8 percent-encoded form string.
    """
    return urlencode(_pairs(fields), encoding=ACCEPT_CHARSET_UTF8, quote_via=quote_plus)


def merge_query(url: str, fields: Mapping[str, Any] | None) -> str:
    """Append fields to the query string of a URL.

    The existing query string is kept byte for byte; new pairs are encoded
    and appended after it in mapping insertion order. Repeated names are
    kept, not overwritten.

    Args:
        url: Target URL, possibly with a query string.
        fields: Query fields.

    Returns:
        URL with the merged, percent-encoded query string.
    """
    if not fields:
        return url

    parts = urlsplit(url)
    appended = urlencode(
        _pairs(fields), encoding=ACCEPT_CHARSET_UTF8, quote_via=quote
    )
    query = f"{parts.query}&{appended}" if parts.query else appended
    return urlunsplit(parts._replace(query=query))
