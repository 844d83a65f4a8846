"""Greencard API client for account, history and credential checks"""

import logging
from typing import Any, List

from greencard_client.domain.exceptions import GreencardError, TransportError
from greencard_client.domain.models import (
    Credential,
    HttpMethod,
    RequestDescriptor,
)
from greencard_client.infrastructure.clients.envelope import decode
from greencard_client.infrastructure.clients.schemas import (
    AccountSnapshot,
    AccountUpdatePayload,
    AccountUpdateRequest,
    HistoryEntry,
)
from greencard_client.infrastructure.clients.signer import RequestSigner
from greencard_client.infrastructure.clients.transport import GreencardTransport
from greencard_client.infrastructure.observability.metrics import (
    upstream_failure_counter,
    upstream_latency_histogram,
)

logger = logging.getLogger(__name__)

SERVER_ERROR_FLOOR = 500


class GreencardClient:
    """Client for the Greencard fare account API"""

    def __init__(self, transport: GreencardTransport, signer: RequestSigner | None = None):
        self.transport = transport
        self.signer = signer or RequestSigner()

    async def authenticate(self, credential: Credential) -> bool:
        """
        Check credentials against the auth endpoint (headers only, no body).

        Raises:
            AuthInputInvalid: blank card number or password
            AuthenticationFailed: 401 or success flag not true
        """
        await self._request(credential, RequestDescriptor("auth", HttpMethod.POST))
        logger.info("Authentication succeeded")
        return True

    async def fetch_account(self, credential: Credential) -> AccountSnapshot:
        """Fetch account holder and card details"""
        return await self._request(credential, RequestDescriptor("account"), AccountSnapshot)

    async def fetch_history(self, credential: Credential) -> List[HistoryEntry]:
        """Fetch the card's transaction history in server order"""
        return await self._request(credential, RequestDescriptor("history"), List[HistoryEntry])

    async def update_account(self, credential: Credential, payload: AccountUpdatePayload) -> AccountSnapshot:
        """Replace editable account details and return the updated snapshot"""
        body = AccountUpdateRequest(account=payload).model_dump_json().encode("utf-8")
        descriptor = RequestDescriptor("account", HttpMethod.PUT, body)
        return await self._request(credential, descriptor, AccountSnapshot)

    async def check_connectivity(self) -> bool:
        """True when the API answers ping with anything below 500"""
        try:
            status = await self.transport.probe(f"{self.signer.base_url}/ping")
        except TransportError as e:
            logger.info("Connectivity check failed", extra={"error": str(e)})
            return False

        connected = status < SERVER_ERROR_FLOOR
        logger.info("Connectivity check", extra={"status": status, "connected": connected})
        return connected

    def top_up_url(self) -> str:
        return f"{self.signer.base_url}/pages/top-up/"

    async def _request(self, credential: Credential, descriptor: RequestDescriptor, data_type: Any = Any) -> Any:
        signed = self.signer.sign(credential, descriptor)
        endpoint = descriptor.path

        try:
            with upstream_latency_histogram.labels(endpoint=endpoint).time():
                response = await self.transport.execute(signed)
            return decode(response.body, response.status_code, signed.endpoint_kind, data_type)
        except GreencardError as e:
            upstream_failure_counter.labels(endpoint=endpoint, error=type(e).__name__).inc()
            logger.warning(
                "Greencard request failed",
                extra={"endpoint": endpoint, "method": descriptor.method.value, "error": str(e)},
            )
            raise
