"""Credential storage contract and an in-memory implementation"""

import logging
from typing import List, Optional, Protocol

from greencard_client.domain.models import Credential

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    """Source and sink for the signed-in card's credential"""

    def current_credential(self) -> Optional[Credential]: ...

    def save(self, credential: Credential) -> None: ...

    def delete(self, credential: Credential) -> None: ...


class InMemoryCredentialStore:
    """Keeps a single active credential; saving replaces whatever was stored"""

    def __init__(self, initial: Optional[Credential] = None):
        self._credentials: List[Credential] = [initial] if initial is not None else []

    def current_credential(self) -> Optional[Credential]:
        return self._credentials[-1] if self._credentials else None

    def save(self, credential: Credential) -> None:
        self._credentials = [credential]
        logger.info("Credential saved", extra={"card_number": credential.card_number})

    def delete(self, credential: Credential) -> None:
        self._credentials = [c for c in self._credentials if c != credential]
        logger.info("Credential deleted", extra={"card_number": credential.card_number})
