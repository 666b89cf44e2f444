"""Tests for the exponential-backoff retry helper."""
import asyncio
import logging

import pytest

from app.utils.retry import RetryPolicy, with_retry


class Flaky:
    """Fails ``failures`` times, then returns ``value``."""

    def __init__(self, failures: int, value="ok", error: Exception = None):
        self.failures = failures
        self.value = value
        self.error = error or ConnectionError("upstream timeout")
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.value


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def test_succeeds_after_two_failures_with_increasing_delays():
    op = Flaky(failures=2, value="analysis")
    sleep = SleepRecorder()
    result = asyncio.run(with_retry(op, RetryPolicy(max_retries=3), sleep=sleep))
    assert result == "analysis"
    assert op.calls == 3
    assert sleep.delays == [1.0, 2.0]


def test_always_failing_raises_original_error_after_max_attempts():
    error = ValueError("bad gateway")
    op = Flaky(failures=10, error=error)
    sleep = SleepRecorder()
    with pytest.raises(ValueError) as excinfo:
        asyncio.run(with_retry(op, RetryPolicy(max_retries=3), sleep=sleep))
    assert excinfo.value is error
    assert op.calls == 3
    assert len(sleep.delays) == 2


def test_first_success_does_not_sleep():
    op = Flaky(failures=0)
    sleep = SleepRecorder()
    assert asyncio.run(with_retry(op, sleep=sleep)) == "ok"
    assert op.calls == 1
    assert sleep.delays == []


def test_delay_is_capped_at_max_delay():
    policy = RetryPolicy(max_retries=6, initial_delay=1.0, max_delay=5.0, backoff_multiplier=3.0)
    sleep = SleepRecorder()
    asyncio.run(with_retry(Flaky(failures=5), policy, sleep=sleep))
    assert sleep.delays == [1.0, 3.0, 5.0, 5.0, 5.0]


def test_each_retry_is_logged(caplog):
    caplog.set_level(logging.WARNING, logger="app.utils.retry")
    asyncio.run(with_retry(Flaky(failures=1), RetryPolicy(max_retries=2), label="shelf", sleep=SleepRecorder()))
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 1
    assert "shelf: attempt 1/2 failed" in messages[0]
    assert "upstream timeout" in messages[0]


def test_policy_requires_at_least_one_attempt():
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=0)
