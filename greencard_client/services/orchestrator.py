"""Concurrent account + history fetch with all-or-nothing results"""

import asyncio
import logging
from typing import Any, Coroutine, List, Set, Tuple

from greencard_client.config import settings
from greencard_client.domain.exceptions import UserCancelled
from greencard_client.domain.models import Credential
from greencard_client.infrastructure.clients.greencard import GreencardClient
from greencard_client.infrastructure.clients.schemas import AccountSnapshot, HistoryEntry
from greencard_client.services.retry import with_retry

logger = logging.getLogger(__name__)


class DualFetchOrchestrator:
    """
    Runs the account and history fetches side by side and joins them.

    Detached legs are tasks owned by the orchestrator rather than by whoever
    awaits them: cancelling the caller (a pull-to-refresh gesture tearing down
    its scope, say) only abandons the caller's await, the requests themselves
    keep going. Non-detached legs share the caller's cancellation.
    """

    def __init__(self, client: GreencardClient, *, detached: bool | None = None):
        self.client = client
        self.detached = settings.detached_fetches if detached is None else detached
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Detached legs still running"""
        return len(self._tasks)

    async def fetch_account_and_history(
        self,
        credential: Credential,
        *,
        detached: bool | None = None,
    ) -> Tuple[AccountSnapshot, List[HistoryEntry]]:
        """
        Fetch both resources concurrently.

        Waits for both legs before returning or raising. When either fails the
        first failure (account before history) is raised and any successful
        sibling result is discarded.

        Args:
            credential: Credential used for both requests
            detached: Override the orchestrator default for this call
        """
        detach = self.detached if detached is None else detached

        account_leg = _keep_user_cancel(with_retry(lambda: self.client.fetch_account(credential), label="account"))
        history_leg = _keep_user_cancel(with_retry(lambda: self.client.fetch_history(credential), label="history"))

        if detach:
            account_task = self._spawn(account_leg, "greencard-account")
            history_task = self._spawn(history_leg, "greencard-history")
            joined = asyncio.gather(account_task, history_task, return_exceptions=True)
            results = await asyncio.shield(joined)
        else:
            results = await asyncio.gather(account_leg, history_leg, return_exceptions=True)

        account, history = results
        for result in results:
            if isinstance(result, BaseException):
                logger.info(
                    "Dual fetch failed",
                    extra={
                        "account_ok": not isinstance(account, BaseException),
                        "history_ok": not isinstance(history, BaseException),
                        "error": repr(result),
                    },
                )
                raise result

        return account, history

    async def aclose(self) -> None:
        """Cancel detached legs that are still running and wait for them to finish"""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task


async def _keep_user_cancel(leg: Coroutine[Any, Any, Any]) -> Any:
    """
    Return UserCancelled instead of raising it.

    A task that raises any CancelledError finishes as cancelled and gather
    reports a bare CancelledError in its place; returning the exception
    lets the join re-raise the original instance.
    """
    try:
        return await leg
    except UserCancelled as e:
        return e
