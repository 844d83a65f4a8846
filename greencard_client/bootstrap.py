"""Composition root: builds the shared transport and everything that depends on it"""

from dataclasses import dataclass
from typing import Optional

import httpx

from greencard_client.config import Settings, settings as default_settings
from greencard_client.infrastructure.clients.greencard import GreencardClient
from greencard_client.infrastructure.clients.signer import RequestSigner
from greencard_client.infrastructure.clients.transport import GreencardTransport
from greencard_client.infrastructure.credentials.store import CredentialStore, InMemoryCredentialStore
from greencard_client.services.orchestrator import DualFetchOrchestrator
from greencard_client.services.profile import ProfileController


@dataclass
class Services:
    """Process-lifetime objects; one transport is shared by every request"""

    transport: GreencardTransport
    client: GreencardClient
    orchestrator: DualFetchOrchestrator
    controller: ProfileController
    credential_store: CredentialStore

    async def aclose(self) -> None:
        await self.orchestrator.aclose()
        await self.transport.aclose()


def build_services(
    config: Settings | None = None,
    *,
    credential_store: Optional[CredentialStore] = None,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Services:
    """
    Wire the client stack from settings.

    Args:
        config: Settings to use instead of the module-level ones
        credential_store: Credential source; defaults to an empty in-memory store
        http_transport: httpx transport override (tests route this to the mock server)
    """
    config = config or default_settings
    store = credential_store if credential_store is not None else InMemoryCredentialStore()

    transport = GreencardTransport(
        request_timeout=config.http_request_timeout_seconds,
        resource_timeout=config.http_resource_timeout_seconds,
        max_redirects=config.max_redirects,
        user_agent=config.user_agent,
        http_transport=http_transport,
    )
    signer = RequestSigner(base_url=config.greencard_api_base, user_agent=config.user_agent)
    client = GreencardClient(transport, signer)
    orchestrator = DualFetchOrchestrator(client, detached=config.detached_fetches)
    controller = ProfileController(orchestrator, store)

    return Services(
        transport=transport,
        client=client,
        orchestrator=orchestrator,
        controller=controller,
        credential_store=store,
    )
