"""
Unit tests for RateLimiter

Window logic with a mocked store and a fixed clock.
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from zerogrid.app.services.rate_limiter import RateLimitConfig, RateLimitResult, RateLimiter
from zerogrid.domain.entities import RateLimit

NOW = datetime(2026, 1, 1, 12, 0, 0)


def fixed_clock():
    return NOW


def incremented(counter):
    counter.count += 1
    return counter


@pytest.mark.asyncio
async def test_first_request_opens_window(mock_uow):
    limiter = RateLimiter(mock_uow, clock=fixed_clock)

    result = await limiter.check_limit("login:1.2.3.4")

    assert result.allowed is True
    assert result.limit == 100
    assert result.remaining == 99
    assert result.reset_at == NOW + timedelta(minutes=15)
    mock_uow.rate_limits.start_window.assert_called_once_with("login:1.2.3.4", NOW + timedelta(minutes=15))
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_expired_window_restarts(mock_uow):
    mock_uow.rate_limits.get_by_key.return_value = RateLimit(
        key="k", count=3, reset_at=NOW - timedelta(seconds=1)
    )
    limiter = RateLimiter(mock_uow, clock=fixed_clock)

    result = await limiter.check_limit("k", RateLimitConfig(max_requests=3, window_ms=1000))

    assert result.allowed is True
    assert result.remaining == 2
    mock_uow.rate_limits.start_window.assert_called_once_with("k", NOW + timedelta(seconds=1))


@pytest.mark.asyncio
async def test_increment_within_window(mock_uow):
    counter = RateLimit(key="k", count=1, reset_at=NOW + timedelta(minutes=5))
    mock_uow.rate_limits.get_by_key.return_value = counter
    mock_uow.rate_limits.increment.side_effect = incremented
    limiter = RateLimiter(mock_uow, clock=fixed_clock)

    result = await limiter.check_limit("k", RateLimitConfig(max_requests=3))

    assert result.allowed is True
    assert result.remaining == 1
    assert result.reset_at == NOW + timedelta(minutes=5)


@pytest.mark.asyncio
async def test_exhausted_window_refuses(mock_uow):
    reset_at = NOW + timedelta(minutes=5)
    mock_uow.rate_limits.get_by_key.return_value = RateLimit(key="k", count=3, reset_at=reset_at)
    limiter = RateLimiter(mock_uow, clock=fixed_clock)

    result = await limiter.check_limit("k", RateLimitConfig(max_requests=3))

    assert result.allowed is False
    assert result.remaining == 0
    assert result.reset_at == reset_at
    mock_uow.rate_limits.increment.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_storage_error_fails_open(mock_uow):
    mock_uow.rate_limits.get_by_key.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    limiter = RateLimiter(mock_uow, clock=fixed_clock)

    result = await limiter.check_limit("k", RateLimitConfig(max_requests=3))

    assert result.allowed is True
    assert result.remaining == 3


@pytest.mark.asyncio
async def test_any_error_fails_open(mock_uow):
    mock_uow.rate_limits.get_by_key.side_effect = RuntimeError("greenlet_spawn has not been called")
    limiter = RateLimiter(mock_uow, clock=fixed_clock)

    result = await limiter.check_limit("k", RateLimitConfig(max_requests=3))

    assert result.allowed is True
    assert result.remaining == 3


@pytest.mark.asyncio
async def test_enforce_reports_rate_limit_exceeded(mock_uow):
    mock_uow.rate_limits.get_by_key.return_value = RateLimit(
        key="k", count=5, reset_at=NOW + timedelta(minutes=1)
    )
    limiter = RateLimiter(mock_uow, clock=fixed_clock)

    result = await limiter.enforce("k", RateLimitConfig(max_requests=5))

    assert result.is_err()
    assert result.error.code == "RATE_LIMIT_EXCEEDED"


def test_headers_use_iso_reset_instant():
    result = RateLimitResult(
        allowed=True, limit=100, remaining=42, reset_at=datetime(2026, 1, 1, 12, 15, 0, 250000)
    )

    assert result.headers() == {
        "X-RateLimit-Limit": "100",
        "X-RateLimit-Remaining": "42",
        "X-RateLimit-Reset": "2026-01-01T12:15:00.250Z",
    }
