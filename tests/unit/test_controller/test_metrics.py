"""Unit tests for request metrics."""

from apiflux.controller.metrics import RequestMetrics
from apiflux.errors import ErrorKind


class TestRequestMetrics:
    """Tests for the RequestMetrics singleton."""

    def test_singleton(self) -> None:
        """Test that get_instance returns one shared instance."""
        assert RequestMetrics.get_instance() is RequestMetrics.get_instance()

    def test_reset(self) -> None:
        """Test that reset replaces the instance."""
        first = RequestMetrics.get_instance()
        first.record_attempt()

        RequestMetrics.reset()

        assert RequestMetrics.get_instance() is not first
        assert RequestMetrics.get_instance().attempts_total == 0

    def test_counters(self) -> None:
        """Test that every counter lands in to_dict()."""
        metrics = RequestMetrics.get_instance()

        metrics.record_request()
        metrics.record_attempt()
        metrics.record_attempt()
        metrics.record_response(500, 10)
        metrics.record_response(200, 32)
        metrics.record_retry()
        metrics.record_success()
        metrics.record_failure(ErrorKind.DECODING)
        metrics.record_failure(ErrorKind.DECODING)
        metrics.record_mock_response()

        assert metrics.to_dict() == {
            "requests_total": 1,
            "attempts_total": 2,
            "responses_by_status": {500: 1, 200: 1},
            "retries_total": 1,
            "failures_total": {"decodingError": 2},
            "successes_total": 1,
            "mock_responses_total": 1,
            "bytes_received_total": 42,
        }
