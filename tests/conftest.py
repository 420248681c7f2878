"""Shared pytest fixtures."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest

from apiflux.controller import RequestMetrics


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterator[None]:
    """Give every test a fresh metrics singleton."""
    RequestMetrics.reset()
    yield
    RequestMetrics.reset()


@pytest.fixture
def sleep_mock() -> Iterator[AsyncMock]:
    """Replace backoff and preview sleeps with an instant recorder."""
    with patch(
        "apiflux.controller.controller.asyncio.sleep", new_callable=AsyncMock
    ) as mock:
        yield mock
