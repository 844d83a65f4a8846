"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from greencard_client.bootstrap import Services
from greencard_client.infrastructure.clients.greencard import GreencardClient
from greencard_client.infrastructure.credentials.store import CredentialStore
from greencard_client.services.profile import ProfileController


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_services(request: Request) -> Services:
    """Process-lifetime services built by create_app"""
    return request.app.state.services


def get_controller(request: Request) -> ProfileController:
    return get_services(request).controller


def get_greencard_client(request: Request) -> GreencardClient:
    return get_services(request).client


def get_credential_store(request: Request) -> CredentialStore:
    return get_services(request).credential_store
