"""Error code metadata shared by every failure path."""

from typing import Annotated, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(BaseModel):
    """Immutable code + message pair carried by a BusinessError.

    Shared constants are never mutated; use ``with_message`` to derive a
    copy carrying a context-specific message.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: Annotated[str, Field(min_length=1, description="Machine-readable code")]
    kind: str = Field(default="ERROR", description="Error family")
    message: str = Field(default="", description="Human-readable message")

    def with_message(self, message: str) -> "ErrorCode":
        """Return a copy of this code with a different message.

        Args:
            message: Replacement message.

        Returns:
            New ErrorCode instance.
        """
        return self.model_copy(update={"message": message})


class CommonErrorCode:
    """Well-known error codes."""

    SYS_ERROR: ClassVar[ErrorCode] = ErrorCode(
        code="10000", message="system error, retry later"
    )
    HTTP_REQUEST_ERROR: ClassVar[ErrorCode] = ErrorCode(
        code="10001", message="http request error"
    )
    BUSY_SERVICE: ClassVar[ErrorCode] = ErrorCode(
        code="10002", message="service busy, retry later"
    )
    NETWORK_CONNECT_FAILED: ClassVar[ErrorCode] = ErrorCode(
        code="10003", message="network connection failed"
    )
    SERIALIZATION_EXCEPTION: ClassVar[ErrorCode] = ErrorCode(
        code="10004", message="data serialization failed"
    )
    FORBIDDEN_EXCEPTION: ClassVar[ErrorCode] = ErrorCode(
        code="10005", message="access forbidden"
    )
    RPC_CALL_EXCEPTION: ClassVar[ErrorCode] = ErrorCode(
        code="10006", message="remote call failed"
    )
    REMOTE_SERVICE: ClassVar[ErrorCode] = ErrorCode(
        code="10007", message="remote service error"
    )
