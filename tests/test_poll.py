from pyln.regtest import ConvergenceTimeout, TransportError, wait_until
from pyln.regtest.poll import POLL_ATTEMPTS, POLL_DELAY
import pytest


def counter(values):
    """An async check that returns {values} in turn, counting calls."""
    calls = []

    async def check():
        calls.append(1)
        return values[min(len(calls), len(values)) - 1]
    return check, calls


def test_defaults():
    assert POLL_ATTEMPTS == 100
    assert POLL_DELAY == 2


@pytest.mark.asyncio
async def test_immediate_success(sleeps):
    check, calls = counter([True])
    assert await wait_until(check, bool) is True
    assert len(calls) == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_returns_first_satisfying_value(sleeps):
    check, calls = counter([0, 0, 3, 4])
    assert await wait_until(check, lambda v: v > 0) == 3
    assert len(calls) == 3
    assert sleeps == [POLL_DELAY, POLL_DELAY]


@pytest.mark.asyncio
async def test_timeout_after_all_attempts(sleeps):
    check, calls = counter([False])
    with pytest.raises(ConvergenceTimeout) as excinfo:
        await wait_until(check, bool, what="godot")

    assert len(calls) == POLL_ATTEMPTS
    assert sum(sleeps) == POLL_ATTEMPTS * POLL_DELAY == 200
    assert excinfo.value.attempts == 100
    assert "godot" in str(excinfo.value)
    # Callers catching the builtin still see it
    assert isinstance(excinfo.value, TimeoutError)


@pytest.mark.asyncio
async def test_custom_bounds(sleeps):
    check, calls = counter([False])
    with pytest.raises(ConvergenceTimeout):
        await wait_until(check, bool, attempts=3, delay=0.5)
    assert len(calls) == 3
    assert sleeps == [0.5, 0.5, 0.5]


@pytest.mark.asyncio
async def test_check_errors_are_not_retried(sleeps):
    calls = []

    async def check():
        calls.append(1)
        raise TransportError("getinfo", {}, "Connection refused")

    with pytest.raises(TransportError):
        await wait_until(check, bool)
    assert len(calls) == 1
    assert sleeps == []
