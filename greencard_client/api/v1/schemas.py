"""Pydantic schemas for API request/response validation"""

from typing import List, Optional

from pydantic import BaseModel, Field

from greencard_client.infrastructure.clients.schemas import AccountSnapshot, HistoryEntry
from greencard_client.services.profile import ProfileController


class CredentialsRequest(BaseModel):
    """Request body for PUT /v1/credentials"""

    card_number: str = Field(..., description="Greencard number, e.g. 1807022585-1")
    password: str = Field(..., description="Greencard account password")


class HistoryItemSchema(BaseModel):
    """Single transaction in the profile history"""

    id: str
    date: str
    formatted_date: str
    type: str
    balance_change_cents: int
    balance_change: str
    is_positive: bool

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryItemSchema":
        return cls(
            id=entry.id,
            date=entry.date,
            formatted_date=entry.formatted_date,
            type=entry.type,
            balance_change_cents=entry.balance_change_cents,
            balance_change=entry.balance_change_in_dollars,
            is_positive=entry.is_positive,
        )


class ProfileResponse(BaseModel):
    """Response for the /v1/profile endpoints"""

    account_name: str
    balance: str
    pending_balance: str
    card_number: str
    account: Optional[AccountSnapshot] = None
    history: List[HistoryItemSchema]
    last_error: Optional[str] = None
    is_loading: bool
    is_refreshing: bool

    @classmethod
    def from_controller(cls, controller: ProfileController) -> "ProfileResponse":
        state = controller.state
        return cls(
            account_name=controller.account_name,
            balance=controller.balance,
            pending_balance=controller.pending_balance,
            card_number=controller.card_number,
            account=state.account_snapshot,
            history=[HistoryItemSchema.from_entry(entry) for entry in state.history_feed],
            last_error=state.last_error,
            is_loading=state.is_loading,
            is_refreshing=state.is_refreshing,
        )


class ConnectivityResponse(BaseModel):
    """Response for GET /v1/connectivity"""

    connected: bool
    top_up_url: str
