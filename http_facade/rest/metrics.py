"""Metrics collection for outbound calls."""

from dataclasses import dataclass, field
from typing import ClassVar

from http_facade.rest.models import FailureKind


@dataclass
class RestMetrics:
    """Process-wide counters for outbound calls.

    Singleton tracking responses per status, failures per kind,
    received bytes and accumulated call duration.
    """

    http_responses_total: dict[int, int] = field(default_factory=dict)
    http_failures_total: dict[str, int] = field(default_factory=dict)
    http_bytes_total: int = 0
    http_duration_ms_total: float = 0.0
    http_call_count: int = 0

    _instance: ClassVar["RestMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RestMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_response(self, status_code: int, bytes_received: int = 0) -> None:
        """Record a response status.

        Args:
            status_code: HTTP status code.
            bytes_received: Number of body bytes read.
        """
        self.http_responses_total[status_code] = (
            self.http_responses_total.get(status_code, 0) + 1
        )
        self.http_bytes_total += bytes_received

    def record_failure(self, kind: FailureKind) -> None:
        """Record a failed call.

        Args:
            kind: Classification of the failure.
        """
        key = kind.value
        self.http_failures_total[key] = self.http_failures_total.get(key, 0) + 1

    def record_duration(self, duration_ms: float) -> None:
        """Record the duration of one call.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.http_duration_ms_total += duration_ms
        self.http_call_count += 1

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary."""
        return {
            "http_responses_total": dict(self.http_responses_total),
            "http_failures_total": dict(self.http_failures_total),
            "http_bytes_total": self.http_bytes_total,
            "http_duration_ms_total": self.http_duration_ms_total,
            "http_call_count": self.http_call_count,
        }

    @property
    def avg_duration_ms(self) -> float:
        """Calculate average call duration."""
        if self.http_call_count == 0:
            return 0.0
        return self.http_duration_ms_total / self.http_call_count
