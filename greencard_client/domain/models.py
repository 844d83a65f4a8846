"""Domain models - pure Python dataclasses for credentials, requests and controller state"""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Mapping, Optional

from greencard_client.domain.exceptions import AuthInputInvalid

if TYPE_CHECKING:
    from greencard_client.infrastructure.clients.schemas import AccountSnapshot, HistoryEntry


AUTH_PROBE_PATH = "auth"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"


class EndpointKind(str, Enum):
    """How a response body has to be interpreted"""

    AUTH_PROBE = "auth_probe"  # {"success": true}, data is always null
    ENVELOPE = "envelope"


@dataclass(frozen=True)
class Credential:
    """Greencard login: card number plus account password"""

    card_number: str
    password: str = field(repr=False)

    @property
    def is_valid(self) -> bool:
        return bool(self.card_number.strip()) and bool(self.password.strip())

    def basic_token(self) -> str:
        """Base64 of "card_number:password" as sent in the Authorization header"""
        if not self.is_valid:
            raise AuthInputInvalid()
        raw = f"{self.card_number}:{self.password}".encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    def authorization_header(self) -> str:
        return f"Basic {self.basic_token()}"


def normalize_path(resource_path: str) -> str:
    """Drop a single leading slash; never add a trailing one (the API answers 405)"""
    return resource_path[1:] if resource_path.startswith("/") else resource_path


@dataclass(frozen=True)
class RequestDescriptor:
    """What to call: path relative to the API base, method and optional JSON body"""

    resource_path: str
    method: HttpMethod = HttpMethod.GET
    body: Optional[bytes] = None

    @property
    def path(self) -> str:
        return normalize_path(self.resource_path)

    @property
    def endpoint_kind(self) -> EndpointKind:
        if self.path == AUTH_PROBE_PATH:
            return EndpointKind.AUTH_PROBE
        return EndpointKind.ENVELOPE


@dataclass(frozen=True)
class SignedRequest:
    """Descriptor resolved to an absolute URL with auth and client headers attached"""

    descriptor: RequestDescriptor
    url: str
    headers: Mapping[str, str]

    @property
    def method(self) -> str:
        return self.descriptor.method.value

    @property
    def body(self) -> Optional[bytes]:
        return self.descriptor.body

    @property
    def endpoint_kind(self) -> EndpointKind:
        return self.descriptor.endpoint_kind


@dataclass
class TransportResponse:
    """Raw outcome of one request after redirects were followed"""

    status_code: int
    headers: Mapping[str, str]
    body: bytes


@dataclass
class FetchResult:
    """State owned by the profile controller and read by the presentation layer"""

    account_snapshot: Optional["AccountSnapshot"] = None
    history_feed: List["HistoryEntry"] = field(default_factory=list)
    last_error: Optional[str] = None
    is_loading: bool = False
    is_refreshing: bool = False
