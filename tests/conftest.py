"""Pytest fixtures for testing"""

import asyncio
import json
from pathlib import Path
from typing import AsyncGenerator, Callable, List

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from greencard_client.api.main import create_app
from greencard_client.bootstrap import Services, build_services
from greencard_client.config import Settings
from greencard_client.domain.models import Credential
from greencard_client.infrastructure.clients.schemas import AccountSnapshot, HistoryEntry
from greencard_client.infrastructure.clients.transport import GreencardTransport
from greencard_client.infrastructure.credentials.store import InMemoryCredentialStore
from mock_server.main import create_mock_app

API_BASE = "http://greencard.test/api/v1"
CARD_NUMBER = "1807022585-1"
PASSWORD = "correct"
USER_AGENT = "MetroTasMobile/0.0.0 android"

STUB_ACCOUNTS = Path(__file__).resolve().parents[1] / "mock_server" / "greencard_stub" / "accounts.json"


@pytest.fixture
def stub_record() -> dict:
    """Account fixture shared with the mock server"""
    return json.loads(STUB_ACCOUNTS.read_text())[CARD_NUMBER]


@pytest.fixture
def account_data(stub_record: dict) -> dict:
    return {"account": stub_record["account"], "card": stub_record["card"]}


@pytest.fixture
def history_data(stub_record: dict) -> list:
    return stub_record["history"]


@pytest.fixture
def snapshot(account_data: dict) -> AccountSnapshot:
    return AccountSnapshot.model_validate(account_data)


@pytest.fixture
def history(history_data: list) -> List[HistoryEntry]:
    return [HistoryEntry.model_validate(item) for item in history_data]


@pytest.fixture
def credential() -> Credential:
    return Credential(card_number=CARD_NUMBER, password=PASSWORD)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        greencard_api_base=API_BASE,
        user_agent=USER_AGENT,
        http_request_timeout_seconds=2.0,
        http_resource_timeout_seconds=5.0,
    )


@pytest.fixture
async def make_transport() -> AsyncGenerator[Callable[..., GreencardTransport], None]:
    """Factory for transports backed by an httpx.MockTransport handler"""
    created: List[GreencardTransport] = []

    def factory(handler, **kwargs) -> GreencardTransport:
        kwargs.setdefault("user_agent", USER_AGENT)
        transport = GreencardTransport(http_transport=httpx.MockTransport(handler), **kwargs)
        created.append(transport)
        return transport

    yield factory

    for transport in created:
        await transport.aclose()


@pytest.fixture
def mock_app() -> FastAPI:
    """Fresh mock Greencard server (state is mutable per test)"""
    return create_mock_app()


@pytest.fixture
async def services(test_settings: Settings, mock_app: FastAPI) -> AsyncGenerator[Services, None]:
    """Full client stack routed to the in-process mock server"""
    services = build_services(
        test_settings,
        credential_store=InMemoryCredentialStore(),
        http_transport=httpx.ASGITransport(app=mock_app),
    )
    yield services
    await services.aclose()


@pytest.fixture
def api_client(test_settings: Settings, mock_app: FastAPI):
    """FastAPI test client over a service graph talking to the mock server"""
    services = build_services(
        test_settings,
        credential_store=InMemoryCredentialStore(),
        http_transport=httpx.ASGITransport(app=mock_app),
    )
    with TestClient(create_app(services)) as client:
        yield client


class FakeGreencardClient:
    """Stand-in for GreencardClient; each call consumes the next scripted outcome"""

    def __init__(self, snapshot: AccountSnapshot, history: List[HistoryEntry]):
        self.snapshot = snapshot
        self.history = history
        self.account_outcomes: list = []
        self.history_outcomes: list = []
        self.account_gate: asyncio.Event | None = None
        self.history_gate: asyncio.Event | None = None
        self.account_calls = 0
        self.history_calls = 0
        self.account_completed = 0
        self.history_completed = 0

    async def fetch_account(self, credential: Credential) -> AccountSnapshot:
        self.account_calls += 1
        result = await self._next(self.account_outcomes, self.account_gate, self.snapshot)
        self.account_completed += 1
        return result

    async def fetch_history(self, credential: Credential) -> List[HistoryEntry]:
        self.history_calls += 1
        result = await self._next(self.history_outcomes, self.history_gate, self.history)
        self.history_completed += 1
        return result

    @staticmethod
    async def _next(outcomes: list, gate: asyncio.Event | None, default):
        if gate is not None:
            await gate.wait()
        outcome = outcomes.pop(0) if outcomes else default
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def fake_client(snapshot: AccountSnapshot, history: List[HistoryEntry]) -> FakeGreencardClient:
    return FakeGreencardClient(snapshot, history)


class ScriptedOrchestrator:
    """
    Stand-in for DualFetchOrchestrator.

    Pre-queued outcomes are returned (or raised) immediately; once the queue
    is empty each call parks on a future the test resolves by hand.
    """

    def __init__(self):
        self.outcomes: list = []
        self.pending: List[asyncio.Future] = []
        self.credentials: List[Credential] = []

    async def fetch_account_and_history(self, credential: Credential):
        self.credentials.append(credential)
        if self.outcomes:
            outcome = self.outcomes.pop(0)
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


@pytest.fixture
def orchestrator() -> ScriptedOrchestrator:
    return ScriptedOrchestrator()
