"""GET /v1/connectivity - can the Greencard API be reached"""

from fastapi import APIRouter, Depends

from greencard_client.api.dependencies import get_greencard_client
from greencard_client.api.v1.schemas import ConnectivityResponse
from greencard_client.infrastructure.clients.greencard import GreencardClient

router = APIRouter()


@router.get("/connectivity", response_model=ConnectivityResponse)
async def check_connectivity(client: GreencardClient = Depends(get_greencard_client)):
    connected = await client.check_connectivity()
    return ConnectivityResponse(connected=connected, top_up_url=client.top_up_url())
