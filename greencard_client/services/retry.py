"""Single retry for requests the HTTP session cancelled on its own"""

import logging
from typing import Awaitable, Callable, TypeVar

from greencard_client.domain.exceptions import (
    TransientSessionCancelled,
    TransportError,
    TransportErrorKind,
    UserCancelled,
)
from greencard_client.infrastructure.observability.metrics import transient_cancel_retry_counter
from greencard_client.utils.cancellation import current_task_cancelling

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_TRANSIENT_RETRIES = 1


async def with_retry(
    op: Callable[[], Awaitable[T]],
    *,
    is_cancelled: Callable[[], bool] = current_task_cancelling,
    label: str = "request",
) -> T:
    """
    Run op, retrying once if the transport reports a cancellation nobody asked for.

    Retry strategy:
    - TransportError(CANCELLED) while the calling task is being cancelled:
      raise UserCancelled, no retry
    - TransportError(CANCELLED) otherwise: the session dropped the request,
      run op once more; a second one raises TransientSessionCancelled
    - any other error propagates unchanged

    Args:
        op: Zero-argument coroutine factory; called once per attempt
        is_cancelled: Ambient cancellation check, defaults to the current task
        label: Operation name for logs and metrics
    """
    attempt = 0
    while True:
        try:
            return await op()
        except TransportError as e:
            if e.kind is not TransportErrorKind.CANCELLED:
                raise

            if is_cancelled():
                logger.info("Caller cancelled, not retrying", extra={"operation": label})
                raise UserCancelled(label) from e

            attempt += 1
            if attempt > MAX_TRANSIENT_RETRIES:
                logger.warning("Session cancelled request again, giving up", extra={"operation": label})
                raise TransientSessionCancelled(e.detail) from e

            transient_cancel_retry_counter.labels(operation=label).inc()
            logger.warning("Session cancelled request, retrying once", extra={"operation": label})
