"""Unit tests for credential validation and request signing"""

import base64

import pytest

from greencard_client.domain.exceptions import AuthInputInvalid
from greencard_client.domain.models import (
    Credential,
    EndpointKind,
    HttpMethod,
    RequestDescriptor,
)
from greencard_client.infrastructure.clients.signer import RequestSigner, redact_headers

BASE = "http://greencard.test/api/v1"


@pytest.fixture
def signer() -> RequestSigner:
    return RequestSigner(base_url=BASE, user_agent="MetroTasMobile/0.0.0 android")


def test_sign_attaches_basic_auth_and_client_headers(signer: RequestSigner, credential: Credential):
    """Test Authorization, User-Agent and no-cache headers on a signed request"""
    signed = signer.sign(credential, RequestDescriptor("account"))

    expected_token = base64.b64encode(b"1807022585-1:correct").decode()
    assert signed.headers["Authorization"] == f"Basic {expected_token}"
    assert signed.headers["User-Agent"] == "MetroTasMobile/0.0.0 android"
    assert signed.headers["Cache-Control"] == "no-cache"
    assert signed.headers["Pragma"] == "no-cache"
    assert "Content-Type" not in signed.headers
    assert signed.method == "GET"
    assert signed.url == f"{BASE}/account"


@pytest.mark.parametrize(
    "card_number,password",
    [
        ("", "correct"),
        ("   ", "correct"),
        ("1807022585-1", ""),
        ("1807022585-1", " \t\n"),
        ("", ""),
    ],
)
def test_sign_rejects_blank_credentials(signer: RequestSigner, card_number: str, password: str):
    """Test blank-after-trim card number or password never produces a request"""
    credential = Credential(card_number=card_number, password=password)

    assert credential.is_valid is False
    with pytest.raises(AuthInputInvalid):
        signer.sign(credential, RequestDescriptor("account"))


@pytest.mark.parametrize(
    "resource_path,expected_suffix",
    [
        ("account", "/account"),
        ("/account", "/account"),
        ("history", "/history"),
        ("history/", "/history/"),  # caller's trailing slash is kept as-is
        ("//history", "//history"),  # only one leading slash is stripped
    ],
)
def test_sign_preserves_path_slug(signer: RequestSigner, credential: Credential, resource_path: str, expected_suffix: str):
    """Test path normalization never appends a trailing slash"""
    signed = signer.sign(credential, RequestDescriptor(resource_path))
    assert signed.url == BASE + expected_suffix


def test_sign_with_body_sets_json_content_type(signer: RequestSigner, credential: Credential):
    """Test PUT with a body is sent as JSON"""
    body = b'{"account": {}}'
    signed = signer.sign(credential, RequestDescriptor("account", HttpMethod.PUT, body))

    assert signed.method == "PUT"
    assert signed.body == body
    assert signed.headers["Content-Type"] == "application/json"


def test_base_url_trailing_slash_is_not_doubled(credential: Credential):
    """Test configured base URL with trailing slash"""
    signer = RequestSigner(base_url=BASE + "/", user_agent="ua")
    assert signer.sign(credential, RequestDescriptor("ping")).url == f"{BASE}/ping"


def test_endpoint_kind_follows_destination():
    """Test auth probe is recognised by path, with or without leading slash"""
    assert RequestDescriptor("auth", HttpMethod.POST).endpoint_kind is EndpointKind.AUTH_PROBE
    assert RequestDescriptor("/auth", HttpMethod.POST).endpoint_kind is EndpointKind.AUTH_PROBE
    assert RequestDescriptor("account").endpoint_kind is EndpointKind.ENVELOPE
    assert RequestDescriptor("history").endpoint_kind is EndpointKind.ENVELOPE


def test_credential_repr_hides_password(credential: Credential):
    assert "correct" not in repr(credential)
    assert "1807022585-1" in repr(credential)


def test_basic_token_uses_raw_values():
    """Test token is built from the values as entered"""
    credential = Credential(card_number="123", password=" pass word ")
    assert base64.b64decode(credential.basic_token()) == b"123: pass word "


def test_redact_headers_hides_authorization():
    headers = {"Authorization": "Basic abc", "User-Agent": "ua"}
    assert redact_headers(headers) == {"Authorization": "[REDACTED]", "User-Agent": "ua"}
