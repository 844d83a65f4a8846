"""/v1/credentials - sign in and sign out"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from greencard_client.api.dependencies import (
    get_controller,
    get_credential_store,
    get_greencard_client,
    get_request_id,
)
from greencard_client.api.v1.errors import to_http_exception
from greencard_client.api.v1.schemas import CredentialsRequest, ProfileResponse
from greencard_client.domain.exceptions import GreencardError
from greencard_client.domain.models import Credential
from greencard_client.infrastructure.clients.greencard import GreencardClient
from greencard_client.infrastructure.credentials.store import CredentialStore
from greencard_client.services.profile import ProfileController

router = APIRouter()


@router.put("/credentials", response_model=ProfileResponse)
async def sign_in(
    request_body: CredentialsRequest,
    request: Request,
    controller: ProfileController = Depends(get_controller),
    client: GreencardClient = Depends(get_greencard_client),
    store: CredentialStore = Depends(get_credential_store),
):
    """
    Sign in with a card number and password.

    Flow:
    1. Probe the auth endpoint with the new credential
    2. Replace the stored credential
    3. Hand it to the profile controller, which loads account and history
    """
    request_id = get_request_id(request)
    credential = Credential(card_number=request_body.card_number, password=request_body.password)

    try:
        await client.authenticate(credential)
    except GreencardError as e:
        raise to_http_exception(e, request_id)

    store.save(credential)
    await controller.update_credential(credential)

    logging.info("Signed in", extra={"request_id": request_id, "card_number": credential.card_number})
    return ProfileResponse.from_controller(controller)


@router.delete("/credentials", status_code=204)
async def sign_out(
    request: Request,
    controller: ProfileController = Depends(get_controller),
    store: CredentialStore = Depends(get_credential_store),
):
    """Remove the stored credential and clear all loaded data"""
    credential = controller.credential or store.current_credential()
    if credential is not None:
        store.delete(credential)
    controller.clear()

    logging.info("Signed out", extra={"request_id": get_request_id(request)})
    return Response(status_code=204)
