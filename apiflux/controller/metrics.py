"""Metrics collection for the request controller."""

from dataclasses import dataclass, field
from typing import ClassVar

from apiflux.errors import ErrorKind


@dataclass
class RequestMetrics:
    """Metrics for controller requests.

    Singleton class that tracks attempts, responses by status, retries,
    failures by taxonomy kind, and sample-data responses.
    """

    requests_total: int = 0
    attempts_total: int = 0
    responses_by_status: dict[int, int] = field(default_factory=dict)
    retries_total: int = 0
    failures_total: dict[str, int] = field(default_factory=dict)
    successes_total: int = 0
    mock_responses_total: int = 0
    bytes_received_total: int = 0

    _instance: ClassVar["RequestMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RequestMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_request(self) -> None:
        """Record a top-level request call."""
        self.requests_total += 1

    def record_attempt(self) -> None:
        """Record an attempt handed to the transport."""
        self.attempts_total += 1

    def record_response(self, status_code: int, bytes_received: int) -> None:
        """Record a received response.

        Args:
            status_code: HTTP status code.
            bytes_received: Number of body bytes received.
        """
        self.responses_by_status[status_code] = (
            self.responses_by_status.get(status_code, 0) + 1
        )
        self.bytes_received_total += bytes_received

    def record_retry(self) -> None:
        """Record a retry."""
        self.retries_total += 1

    def record_success(self) -> None:
        """Record a request that returned a decoded value."""
        self.successes_total += 1

    def record_failure(self, kind: ErrorKind) -> None:
        """Record a request that ended in an error.

        Args:
            kind: Taxonomy kind of the final error.
        """
        key = kind.value
        self.failures_total[key] = self.failures_total.get(key, 0) + 1

    def record_mock_response(self) -> None:
        """Record a response served from sample data."""
        self.mock_responses_total += 1

    def to_dict(self) -> dict[str, int | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "requests_total": self.requests_total,
            "attempts_total": self.attempts_total,
            "responses_by_status": dict(self.responses_by_status),
            "retries_total": self.retries_total,
            "failures_total": dict(self.failures_total),
            "successes_total": self.successes_total,
            "mock_responses_total": self.mock_responses_total,
            "bytes_received_total": self.bytes_received_total,
        }
