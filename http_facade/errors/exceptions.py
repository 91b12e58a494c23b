"""Unified application error."""

from http_facade.errors.codes import ErrorCode


class BusinessError(Exception):
    """Single error type every outbound failure converges to.

    Carries an ErrorCode; the message is the only detail exposed to callers.
    """

    def __init__(self, error_code: ErrorCode) -> None:
        """Initialize the business error.

        Args:
            error_code: Code and message describing the failure.
        """
        super().__init__(error_code.message)
        self.error_code = error_code

    @property
    def code(self) -> str:
        """Get the error code."""
        return self.error_code.code

    @property
    def message(self) -> str:
        """Get the human-readable message."""
        return self.error_code.message

    @classmethod
    def of(cls, code: str | int, message: str | None) -> "BusinessError":
        """Build an error from a raw code and message.

        Args:
            code: Error code, numeric codes are converted to text.
            message: Error message, None becomes an empty string.

        Returns:
            BusinessError instance.
        """
        return cls(ErrorCode(code=str(code), message=message or ""))

    def to_dict(self) -> dict[str, str]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "code": self.error_code.code,
            "kind": self.error_code.kind,
            "message": self.error_code.message,
        }

    def __repr__(self) -> str:
        return f"BusinessError(code={self.code!r}, message={self.message!r})"
