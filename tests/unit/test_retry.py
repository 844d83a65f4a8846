"""Unit tests for the transient-cancellation retry policy"""

import asyncio

import pytest

from greencard_client.domain.exceptions import (
    ServerError,
    TransientSessionCancelled,
    TransportError,
    TransportErrorKind,
    UserCancelled,
)
from greencard_client.services.retry import with_retry


class ScriptedOp:
    """Async operation that raises or returns the scripted outcomes in order"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def session_cancelled() -> TransportError:
    return TransportError(TransportErrorKind.CANCELLED, "cancelled by HTTP session")


async def test_success_runs_once():
    op = ScriptedOp("ok")
    assert await with_retry(op) == "ok"
    assert op.calls == 1


async def test_transient_cancellation_is_retried_exactly_once():
    """Test op runs twice when the session cancels once and the caller did not"""
    op = ScriptedOp(session_cancelled(), "ok")

    assert await with_retry(op, is_cancelled=lambda: False) == "ok"
    assert op.calls == 2


async def test_second_transient_cancellation_propagates_as_transport_error():
    """Test retry budget is one; the second cancellation is a normal transport failure"""
    op = ScriptedOp(session_cancelled(), session_cancelled(), "never reached")

    with pytest.raises(TransientSessionCancelled) as exc_info:
        await with_retry(op, is_cancelled=lambda: False)

    assert op.calls == 2
    assert isinstance(exc_info.value, TransportError)
    assert exc_info.value.kind is TransportErrorKind.CANCELLED
    assert not isinstance(exc_info.value, asyncio.CancelledError)


async def test_ambient_cancellation_propagates_without_retry():
    """Test caller-requested cancellation is never retried or masked"""
    op = ScriptedOp(session_cancelled(), "never reached")

    with pytest.raises(UserCancelled) as exc_info:
        await with_retry(op, is_cancelled=lambda: True)

    assert op.calls == 1
    assert isinstance(exc_info.value, asyncio.CancelledError)


async def test_ambient_cancellation_detected_on_the_retry():
    """Test cancellation requested between attempts stops the second attempt's retry path"""
    cancelled = iter([False, True])
    op = ScriptedOp(session_cancelled(), session_cancelled())

    with pytest.raises(UserCancelled):
        await with_retry(op, is_cancelled=lambda: next(cancelled))

    assert op.calls == 2


async def test_real_task_cancellation_is_detected_by_default():
    """Test default ambient check reads the running task's cancellation state"""
    calls = 0

    async def op():
        nonlocal calls
        calls += 1
        asyncio.current_task().cancel()
        raise session_cancelled()

    task = asyncio.create_task(with_retry(op))

    with pytest.raises(asyncio.CancelledError):
        await task
    assert task.cancelled()
    assert calls == 1


@pytest.mark.parametrize("kind", [TransportErrorKind.TIMEOUT, TransportErrorKind.CONNECTION_FAILED])
async def test_other_transport_errors_are_not_retried(kind: TransportErrorKind):
    op = ScriptedOp(TransportError(kind, "down"), "never reached")

    with pytest.raises(TransportError) as exc_info:
        await with_retry(op, is_cancelled=lambda: False)

    assert exc_info.value.kind is kind
    assert op.calls == 1


async def test_non_transport_errors_propagate_unchanged():
    error = ServerError("HTTP 500", status=500)
    op = ScriptedOp(error)

    with pytest.raises(ServerError) as exc_info:
        await with_retry(op, is_cancelled=lambda: False)

    assert exc_info.value is error
    assert op.calls == 1
