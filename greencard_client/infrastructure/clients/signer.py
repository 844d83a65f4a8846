"""Builds authenticated requests for the Greencard API"""

import logging
from typing import Dict

from greencard_client.config import settings
from greencard_client.domain.exceptions import AuthInputInvalid
from greencard_client.domain.models import Credential, RequestDescriptor, SignedRequest

logger = logging.getLogger(__name__)

# Balances change server-side; never let anything between us and the API answer from cache
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

REDACTED = "[REDACTED]"


def redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Copy of headers safe for logs"""
    return {key: (REDACTED if key.lower() == "authorization" else value) for key, value in headers.items()}


class RequestSigner:
    """Turns a credential and a request descriptor into a SignedRequest"""

    def __init__(self, base_url: str | None = None, user_agent: str | None = None):
        self.base_url = (base_url or settings.greencard_api_base).rstrip("/")
        self.user_agent = user_agent or settings.user_agent

    def sign(self, credential: Credential, descriptor: RequestDescriptor) -> SignedRequest:
        """
        Attach Basic auth, client identity and no-cache headers.

        Raises:
            AuthInputInvalid: card number or password is blank after trimming
        """
        if not credential.is_valid:
            logger.warning("Refusing to sign request with blank credentials", extra={"path": descriptor.path})
            raise AuthInputInvalid()

        headers = {
            "Authorization": credential.authorization_header(),
            "User-Agent": self.user_agent,
            **NO_CACHE_HEADERS,
        }
        if descriptor.body is not None:
            headers["Content-Type"] = "application/json"

        url = f"{self.base_url}/{descriptor.path}"
        logger.debug(
            "Signed request",
            extra={"method": descriptor.method.value, "url": url, "headers": redact_headers(headers)},
        )
        return SignedRequest(descriptor=descriptor, url=url, headers=headers)
