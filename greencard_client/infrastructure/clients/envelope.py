"""Interprets Greencard responses: status code first, then the JSON envelope"""

import json
import logging
from typing import Any, Optional, TypeVar

from pydantic import ValidationError

from greencard_client.domain.exceptions import (
    AuthenticationFailed,
    DecodeError,
    InvalidResponse,
    ServerError,
)
from greencard_client.domain.models import EndpointKind
from greencard_client.infrastructure.clients.schemas import Envelope

logger = logging.getLogger(__name__)

T = TypeVar("T")

HTTP_UNAUTHORIZED = 401
GENERIC_FAILURE_MESSAGE = "Request was not successful"


def decode(body: bytes, status_code: int, endpoint_kind: EndpointKind, data_type: Any = Any) -> Optional[T]:
    """
    Turn a raw response into the endpoint's payload.

    Rules, in order:
    1. 401 is always an authentication failure, whatever the body says
    2. any other non-2xx status is a server error
    3. the auth probe only needs a top-level "success": true and yields None
    4. everything else is an Envelope[data_type]; success=false surfaces the
       first error message, success=true without data is invalid

    Raises:
        AuthenticationFailed, ServerError, InvalidResponse, DecodeError
    """
    if status_code == HTTP_UNAUTHORIZED:
        logger.warning("Authentication failed (401)")
        raise AuthenticationFailed()

    if not 200 <= status_code <= 299:
        logger.warning("HTTP error from Greencard API", extra={"status": status_code})
        raise ServerError(f"HTTP {status_code}", status=status_code)

    if endpoint_kind is EndpointKind.AUTH_PROBE:
        _check_auth_probe(body)
        return None

    envelope = _parse_envelope(body, data_type)

    if not envelope.success:
        errors = envelope.errors or []
        message = errors[0].message if errors else GENERIC_FAILURE_MESSAGE
        logger.warning("Greencard API reported failure", extra={"api_error": message})
        raise ServerError(message, status=status_code)

    if envelope.data is None:
        logger.warning("Successful envelope without data")
        raise InvalidResponse()

    return envelope.data


def _check_auth_probe(body: bytes) -> None:
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(e) from e

    # Only a literal boolean true counts; "true" or 1 do not
    if not isinstance(payload, dict) or payload.get("success") is not True:
        logger.warning("Auth probe rejected: success field is false or missing")
        raise AuthenticationFailed()


def _parse_envelope(body: bytes, data_type: Any) -> Envelope:
    try:
        return Envelope[data_type].model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(e) from e
