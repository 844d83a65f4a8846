"""Profile state controller: owns the last good account data and decides which errors are shown"""

import asyncio
import logging
import time

from greencard_client.domain.exceptions import GreencardError, MissingConfiguration
from greencard_client.domain.models import Credential, FetchResult
from greencard_client.infrastructure.credentials.store import CredentialStore
from greencard_client.infrastructure.observability.logging import log_fetch_outcome
from greencard_client.infrastructure.observability.metrics import record_profile_fetch
from greencard_client.services.orchestrator import DualFetchOrchestrator
from greencard_client.utils.cancellation import current_task_cancelling

logger = logging.getLogger(__name__)

NO_CREDENTIALS_MESSAGE = "No credentials available"
UNKNOWN = "Unknown"
ZERO_BALANCE = "$0.00"


class ProfileController:
    """
    Drives load/refresh for one signed-in card and holds the resulting FetchResult.

    All mutations happen on the event loop, so the state needs no lock.
    Runs are numbered; a run that finishes after a newer run's result was
    already applied is dropped instead of overwriting it.
    """

    def __init__(self, orchestrator: DualFetchOrchestrator, credential_store: CredentialStore | None = None):
        self.orchestrator = orchestrator
        self.state = FetchResult()
        self._credential: Credential | None = (
            credential_store.current_credential() if credential_store is not None else None
        )
        self._generation = 0
        self._applied_generation = 0

    @property
    def credential(self) -> Credential | None:
        return self._credential

    # Display accessors

    @property
    def account_name(self) -> str:
        snapshot = self.state.account_snapshot
        return snapshot.account.full_name if snapshot else UNKNOWN

    @property
    def balance(self) -> str:
        snapshot = self.state.account_snapshot
        return snapshot.card.balance_in_dollars if snapshot else ZERO_BALANCE

    @property
    def pending_balance(self) -> str:
        snapshot = self.state.account_snapshot
        return snapshot.card.pending_balance_in_dollars if snapshot else ZERO_BALANCE

    @property
    def card_number(self) -> str:
        snapshot = self.state.account_snapshot
        return snapshot.card.printed_card_number if snapshot else UNKNOWN

    # Operations

    async def update_credential(self, credential: Credential) -> None:
        """Switch to a new credential and load its data"""
        self._credential = credential
        await self.load()

    def clear(self) -> None:
        """Forget the credential and everything fetched with it (logout)"""
        self._credential = None
        self.state.account_snapshot = None
        self.state.history_feed = []
        self.state.last_error = None
        # Runs still in flight belong to the old credential; fence them off
        self._generation += 1
        self._applied_generation = self._generation

    async def load(self) -> None:
        """Full load; reports a missing credential as an error"""
        if self._credential is None:
            self.state.last_error = str(MissingConfiguration("credentials", NO_CREDENTIALS_MESSAGE))
            record_profile_fetch("load", "failure")
            return
        await self._run("load")

    async def refresh(self) -> None:
        """Pull-to-refresh; silently does nothing without a credential"""
        if self._credential is None:
            return
        await self._run("refresh")

    async def _run(self, mode: str) -> None:
        credential = self._credential
        self._generation += 1
        generation = self._generation
        start_time = time.time()

        if mode == "refresh":
            self.state.is_refreshing = True
        else:
            self.state.is_loading = True
        self.state.last_error = None

        outcome = "success"
        error_message = None
        try:
            snapshot, history = await self.orchestrator.fetch_account_and_history(credential)
        except asyncio.CancelledError:
            if current_task_cancelling():
                outcome = "cancelled"
                raise
            # The fetch was cancelled, not us; keep whatever is on screen
            outcome = "cancelled"
        except GreencardError as e:
            error_message = str(e)
            outcome = self._record_failure(error_message, generation)
        else:
            if generation < self._applied_generation:
                outcome = "stale"
            else:
                self.state.account_snapshot = snapshot
                self.state.history_feed = list(history)
                # An older run may have failed while nothing was loaded
                self.state.last_error = None
                self._applied_generation = generation
        finally:
            self.state.is_loading = False
            self.state.is_refreshing = False
            record_profile_fetch(mode, outcome)
            log_fetch_outcome(mode, generation, outcome, (time.time() - start_time) * 1000, error_message)

    def _record_failure(self, message: str, generation: int) -> str:
        if generation < self._applied_generation:
            return "stale"
        if self.state.account_snapshot is not None:
            logger.info("Keeping previous data after failed fetch", extra={"error": message})
            return "suppressed"
        self.state.last_error = message
        return "failure"
