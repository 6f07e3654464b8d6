"""Tests for health status aggregation."""

import pytest

from src.charterhub.core.health import overall_status

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("database", "redis", "expected"),
    [
        ("healthy", "healthy", "healthy"),
        ("healthy", "not_configured", "healthy"),
        ("healthy", "unhealthy", "degraded"),
        ("unhealthy", "healthy", "unhealthy"),
        ("unhealthy", "unhealthy", "unhealthy"),
    ],
)
def test_overall_status(database, redis, expected):
    assert overall_status(database, redis) == expected
