"""HTTP transport that keeps Greencard auth headers across redirects"""

import asyncio
import logging
from typing import Optional

import httpx

from greencard_client.config import settings
from greencard_client.domain.exceptions import TransportError, TransportErrorKind
from greencard_client.domain.models import SignedRequest, TransportResponse
from greencard_client.infrastructure.observability.metrics import redirect_counter
from greencard_client.utils.cancellation import current_task_cancelling

logger = logging.getLogger(__name__)

# httpx drops Authorization when a redirect changes origin; the API needs both on every hop
PRESERVED_HEADERS = ("Authorization", "User-Agent")


class GreencardTransport:
    """
    Executes signed requests over one shared httpx.AsyncClient.

    Redirects are followed by hand so the original Authorization and
    User-Agent headers can be put back on every hop. Nothing is cached and
    no conditional headers are ever sent.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        request_timeout: float | None = None,
        resource_timeout: float | None = None,
        max_redirects: int | None = None,
        user_agent: str | None = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.request_timeout = request_timeout or settings.http_request_timeout_seconds
        self.resource_timeout = resource_timeout or settings.http_resource_timeout_seconds
        self.max_redirects = settings.max_redirects if max_redirects is None else max_redirects
        self.user_agent = user_agent or settings.user_agent
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.request_timeout),
            follow_redirects=False,
            transport=http_transport,
        )

    async def __aenter__(self) -> "GreencardTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def execute(self, signed: SignedRequest) -> TransportResponse:
        """
        Send a signed request and return the final (non-redirect) response.

        Raises:
            TransportError: timeout, connection failure, too many redirects,
                or a cancellation that did not come from the calling task
        """
        try:
            async with asyncio.timeout(self.resource_timeout):
                response = await self._send_following_redirects(signed)
        except (TimeoutError, httpx.TimeoutException) as e:
            raise TransportError(TransportErrorKind.TIMEOUT, str(e) or None) from e
        except httpx.RequestError as e:
            raise TransportError(TransportErrorKind.CONNECTION_FAILED, str(e) or type(e).__name__) from e
        except asyncio.CancelledError as e:
            if current_task_cancelling():
                raise
            # Torn down underneath us, not by our caller
            logger.warning("Request cancelled by HTTP session", extra={"url": signed.url})
            raise TransportError(TransportErrorKind.CANCELLED, "cancelled by HTTP session") from e

        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    async def probe(self, url: str) -> int:
        """Unsigned GET used for reachability checks; returns the status code"""
        try:
            async with asyncio.timeout(self.resource_timeout):
                response = await self._client.get(
                    url,
                    headers={"User-Agent": self.user_agent},
                    follow_redirects=True,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise TransportError(TransportErrorKind.TIMEOUT, str(e) or None) from e
        except httpx.RequestError as e:
            raise TransportError(TransportErrorKind.CONNECTION_FAILED, str(e) or type(e).__name__) from e
        return response.status_code

    async def _send_following_redirects(self, signed: SignedRequest) -> httpx.Response:
        request = self._client.build_request(
            signed.method,
            signed.url,
            headers=dict(signed.headers),
            content=signed.body,
        )

        for hop in range(self.max_redirects + 1):
            response = await self._client.send(request, follow_redirects=False)
            if not response.has_redirect_location:
                return response

            next_request = response.next_request
            await response.aclose()
            if next_request is None:
                return response

            for name in PRESERVED_HEADERS:
                value = signed.headers.get(name)
                if value is not None:
                    next_request.headers[name] = value

            redirect_counter.inc()
            logger.info(
                "Following redirect",
                extra={"status": response.status_code, "from_url": str(request.url), "to_url": str(next_request.url), "hop": hop + 1},
            )
            request = next_request

        raise TransportError(
            TransportErrorKind.CONNECTION_FAILED,
            f"Exceeded maximum of {self.max_redirects} redirects",
        )
