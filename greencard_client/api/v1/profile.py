"""/v1/profile - profile state, load, refresh and account updates"""

from fastapi import APIRouter, Depends, Request

from greencard_client.api.dependencies import get_controller, get_greencard_client, get_request_id
from greencard_client.api.v1.errors import to_http_exception
from greencard_client.api.v1.schemas import ProfileResponse
from greencard_client.domain.exceptions import GreencardError, MissingConfiguration
from greencard_client.infrastructure.clients.greencard import GreencardClient
from greencard_client.infrastructure.clients.schemas import AccountUpdatePayload
from greencard_client.services.profile import NO_CREDENTIALS_MESSAGE, ProfileController

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(controller: ProfileController = Depends(get_controller)):
    """Current profile state as last loaded"""
    return ProfileResponse.from_controller(controller)


@router.post("/profile/load", response_model=ProfileResponse)
async def load_profile(controller: ProfileController = Depends(get_controller)):
    """
    Load account and history.

    Failures are reported through last_error, never as an HTTP error, so a
    caller can keep rendering whatever data the controller still holds.
    """
    await controller.load()
    return ProfileResponse.from_controller(controller)


@router.post("/profile/refresh", response_model=ProfileResponse)
async def refresh_profile(controller: ProfileController = Depends(get_controller)):
    """Pull-to-refresh; a failure never replaces data that was already loaded"""
    await controller.refresh()
    return ProfileResponse.from_controller(controller)


@router.put("/profile/account", response_model=ProfileResponse)
async def update_account(
    payload: AccountUpdatePayload,
    request: Request,
    controller: ProfileController = Depends(get_controller),
    client: GreencardClient = Depends(get_greencard_client),
):
    """Update account details upstream, then refresh account and history together"""
    request_id = get_request_id(request)
    try:
        if controller.credential is None:
            raise MissingConfiguration("credentials", NO_CREDENTIALS_MESSAGE)
        await client.update_account(controller.credential, payload)
    except GreencardError as e:
        raise to_http_exception(e, request_id)

    await controller.refresh()
    return ProfileResponse.from_controller(controller)
