"""Domain-specific exceptions

Every error a caller can see derives from GreencardError and renders its
user-facing message through str().
"""

import asyncio
from enum import Enum
from typing import Optional


class GreencardError(Exception):
    """Base exception for the Greencard client"""

    message = "Unexpected Greencard error."

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class AuthInputInvalid(GreencardError):
    """Card number or password is blank; the request is never sent"""

    message = "Card number and password are required."


class MissingConfiguration(GreencardError):
    """A required setting or credential is not available"""

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"Missing configuration for {key}.")


class TransportErrorKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION_FAILED = "connection_failed"
    CANCELLED = "cancelled"


class TransportError(GreencardError):
    """The request did not produce an HTTP response"""

    def __init__(self, kind: TransportErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        if kind is TransportErrorKind.TIMEOUT:
            message = "Request timed out."
        elif kind is TransportErrorKind.CANCELLED:
            message = "Request was cancelled."
        else:
            message = f"Network error: {detail or 'connection failed'}"
        super().__init__(message)


class TransientSessionCancelled(TransportError):
    """The HTTP session cancelled the request twice without the caller asking"""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(TransportErrorKind.CANCELLED, detail)
        self.message = "Request was cancelled by the network session."


class UserCancelled(asyncio.CancelledError):
    """The caller's own task was cancelled while a request was in flight"""


class AuthenticationFailed(GreencardError):
    """HTTP 401 or a failed auth probe"""

    message = "Authentication failed. Please check your credentials."


class ServerError(GreencardError):
    """Non-2xx status or an envelope reporting success=false"""

    def __init__(self, reason: str, status: Optional[int] = None):
        self.reason = reason
        self.status = status
        super().__init__(f"Server error: {reason}")


class InvalidResponse(GreencardError):
    """Successful envelope without a data payload"""

    message = "Invalid response from server."


class DecodeError(GreencardError):
    """Response body is not valid JSON or does not match the expected shape"""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Decoding error: {cause}")
