"""Maps client errors to HTTP responses"""

import logging

from fastapi import HTTPException

from greencard_client.domain.exceptions import (
    AuthenticationFailed,
    AuthInputInvalid,
    GreencardError,
    MissingConfiguration,
    TransportError,
)


def to_http_exception(error: GreencardError, request_id: str) -> HTTPException:
    """Pick a status code for a client error; upstream faults become 502/503"""
    if isinstance(error, AuthInputInvalid):
        status = 422
    elif isinstance(error, MissingConfiguration):
        status = 409
    elif isinstance(error, AuthenticationFailed):
        status = 401
    elif isinstance(error, TransportError):
        status = 503
    else:
        status = 502

    log = logging.warning if status < 500 else logging.error
    log(f"Greencard error: {error}", extra={"request_id": request_id, "status": status})
    return HTTPException(status_code=status, detail=str(error))
