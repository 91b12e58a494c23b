"""Data models for the rest layer."""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from http_facade.rest.constants import (
    ACCEPT_CHARSET_UTF8,
    MEDIA_TYPE_FORM,
    MEDIA_TYPE_JSON,
)
from http_facade.rest.encoding import encode_form, merge_query, to_json_text


HeaderInput = Mapping[str, str] | Sequence[tuple[str, str]]


class HttpMethod(str, Enum):
    """Supported outbound methods."""

    GET = "GET"
    POST = "POST"


class FailureKind(str, Enum):
    """Classification of outbound call failures.

    - ROUTE_NOT_FOUND: 404, the caller used a wrong path
    - CLIENT_ERROR: other 4xx, authentication or client misuse
    - SERVER_ERROR: 5xx, downstream failure
    - UNKNOWN_STATUS: any other non-2xx status
    - SYSTEM: transport fault (connect, timeout, decode, size limit)
    - BUSINESS: decoded envelope reported a logical failure
    """

    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    CLIENT_ERROR = "CLIENT_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN_STATUS = "UNKNOWN_STATUS"
    SYSTEM = "SYSTEM"
    BUSINESS = "BUSINESS"


class TextBody(BaseModel):
    """Pre-serialized body, sent verbatim."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["text"] = "text"
    text: str

    def render(self) -> str:
        return self.text


class ObjectBody(BaseModel):
    """Arbitrary object serialized to JSON at dispatch time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["object"] = "object"
    value: Any

    def render(self) -> str:
        return to_json_text(self.value)


class FormBody(BaseModel):
    """String-keyed form fields, percent-encoded at dispatch time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["form"] = "form"
    entries: dict[str, Any] = Field(default_factory=dict)

    def render(self) -> str:
        return encode_form(self.entries)


RequestBody = Annotated[TextBody | ObjectBody | FormBody, Field(discriminator="kind")]


def resolve_headers(headers: HeaderInput | None) -> dict[str, str]:
    """Resolve caller headers with single-value semantics.

    A later value for a repeated name (case-insensitive) overwrites the
    earlier one; the first spelling of the name is kept.

    Args:
        headers: Mapping or sequence of (name, value) pairs.

    Returns:
        Ordered header dictionary.
    """
    if not headers:
        return {}

    pairs = headers.items() if isinstance(headers, Mapping) else headers
    resolved: dict[str, tuple[str, str]] = {}
    for name, value in pairs:
        key = name.lower()
        original = resolved[key][0] if key in resolved else name
        resolved[key] = (original, str(value))
    return dict(resolved.values())


class CallDescriptor(BaseModel):
    """Resolved description of one outbound call.

    Built per call, immutable, discarded after dispatch.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: HttpMethod
    url: Annotated[str, Field(min_length=1, description="Target URL")]
    body: RequestBody | None = None
    query: dict[str, Any] = Field(default_factory=dict, description="GET parameters")
    headers: dict[str, str] = Field(default_factory=dict, description="Caller headers")
    content_type: str | None = None
    accept: str = MEDIA_TYPE_JSON
    accept_charset: str = ACCEPT_CHARSET_UTF8

    @classmethod
    def for_json(
        cls,
        url: str,
        body: Any,
        headers: HeaderInput | None = None,
    ) -> "CallDescriptor":
        """Describe a JSON POST.

        Args:
            url: Target URL.
            body: Text sent verbatim, or an object serialized to JSON.
            headers: Optional caller headers.

        Returns:
            CallDescriptor for the call.
        """
        payload: TextBody | ObjectBody = (
            TextBody(text=body) if isinstance(body, str) else ObjectBody(value=body)
        )
        return cls(
            method=HttpMethod.POST,
            url=url,
            body=payload,
            headers=resolve_headers(headers),
            content_type=MEDIA_TYPE_JSON,
        )

    @classmethod
    def for_form(
        cls,
        url: str,
        fields: Mapping[str, Any],
        headers: HeaderInput | None = None,
    ) -> "CallDescriptor":
        """Describe a form POST.

        Args:
            url: Target URL.
            fields: Form fields.
            headers: Optional caller headers.

        Returns:
            CallDescriptor for the call.
        """
        return cls(
            method=HttpMethod.POST,
            url=url,
            body=FormBody(entries=dict(fields)),
            headers=resolve_headers(headers),
            content_type=MEDIA_TYPE_FORM,
        )

    @classmethod
    def for_query(
        cls,
        url: str,
        params: Mapping[str, Any] | None = None,
        headers: HeaderInput | None = None,
    ) -> "CallDescriptor":
        """Describe a GET with query parameters.

        Args:
            url: Target URL.
            params: Query fields appended to the URL.
            headers: Optional caller headers.

        Returns:
            CallDescriptor for the call.
        """
        return cls(
            method=HttpMethod.GET,
            url=url,
            query=dict(params or {}),
            headers=resolve_headers(headers),
        )

    def render_url(self) -> str:
        """Get the URL with query parameters merged in."""
        return merge_query(self.url, self.query)

    def render_body(self) -> str | None:
        """Get the encoded body text, or None for bodiless calls."""
        if self.body is None:
            return None
        return self.body.render()

    def render_headers(self) -> dict[str, str]:
        """Get caller headers followed by the implicit negotiation headers."""
        headers = dict(self.headers)
        implicit = {"Accept": self.accept, "Accept-Charset": self.accept_charset}
        if self.content_type is not None:
            implicit["Content-Type"] = self.content_type
        for name, value in implicit.items():
            for existing in [key for key in headers if key.lower() == name.lower()]:
                del headers[existing]
            headers[name] = value
        return headers

    def trace_body(self) -> Any:
        """Get the body as supplied by the caller, for diagnostics."""
        if self.body is None:
            return self.query or None
        if isinstance(self.body, TextBody):
            return self.body.text
        if isinstance(self.body, ObjectBody):
            return self.body.value
        return self.body.entries


class ResponseSizeExceededError(Exception):
    """Raised when a response body exceeds the configured limit."""
