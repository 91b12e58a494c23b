"""Business result envelopes returned by downstream services."""

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator


T = TypeVar("T")
E = TypeVar("E", bound=BaseModel)


@runtime_checkable
class Envelope(Protocol):
    """Anything carrying a success flag, a code and a description."""

    success: bool
    code: Any
    description: Any


class Result(BaseModel, Generic[T]):
    """Success/failure wrapper with a business code.

    Distinct from the HTTP status: a 200 response may still carry a
    failed Result.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    success: bool = Field(description="Whether the business call succeeded")
    code: str | None = Field(default=None, description="Business code")
    description: str | None = Field(default=None, description="Business message")
    data: T | None = Field(default=None, description="Payload")

    @field_validator("code", mode="before")
    @classmethod
    def coerce_code(cls, v: Any) -> Any:
        """Accept numeric codes and store them as text."""
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return v


class PagedResult(Result[list[T]], Generic[T]):
    """Result carrying one page of items."""

    total_count: int = Field(default=0, ge=0, alias="totalCount")
    page_no: int = Field(default=1, ge=1, alias="pageNo")
    page_size: int = Field(default=0, ge=0, alias="pageSize")


def parse_result(text: str | bytes, model: type[E]) -> E:
    """Decode response text into an envelope model.

    Args:
        text: JSON text returned by a RestClient call.
        model: Envelope model to decode into, e.g. ``Result[Order]``.

    Returns:
        Decoded envelope.

    Raises:
        pydantic.ValidationError: If the text is not a valid envelope.
    """
    return model.model_validate_json(text)
