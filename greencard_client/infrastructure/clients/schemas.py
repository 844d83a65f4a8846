"""Pydantic schemas for Greencard API payloads"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from greencard_client.utils.date_utils import format_history_date
from greencard_client.utils.money import cents_to_dollars, signed_cents_to_dollars

T = TypeVar("T")


class ApiErrorDetail(BaseModel):
    message: str


class Envelope(BaseModel, Generic[T]):
    """Wrapper used by every endpoint except the auth probe"""

    success: bool
    data: Optional[T] = None
    errors: Optional[List[ApiErrorDetail]] = None


class Address(BaseModel):
    suburb: str
    street: str
    postcode: str


class Account(BaseModel):
    username: str
    family_name: str
    given_name: str
    date_of_birth: str
    postal_address: Address
    residential_address: Address
    phone: str
    email: str
    default_trip: str
    allow_marketing: bool

    @property
    def full_name(self) -> str:
        return f"{self.given_name} {self.family_name}"


class AutoTopUp(BaseModel):
    minimum_amount: int
    top_up_amount: int

    @property
    def minimum_amount_in_dollars(self) -> str:
        return cents_to_dollars(self.minimum_amount)

    @property
    def top_up_amount_in_dollars(self) -> str:
        return cents_to_dollars(self.top_up_amount)


class Card(BaseModel):
    card_type: str
    printed_card_number: str
    card_number: str
    balance: int  # cents
    pending_balance: int  # cents
    auto_top_up: Optional[AutoTopUp] = None

    @property
    def balance_in_dollars(self) -> str:
        return cents_to_dollars(self.balance)

    @property
    def pending_balance_in_dollars(self) -> str:
        return cents_to_dollars(self.pending_balance)


class AccountSnapshot(BaseModel):
    """Payload of GET/PUT account"""

    account: Account
    card: Card


class HistoryEntry(BaseModel):
    """Single card transaction, in server order"""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    type: str
    balance_change_cents: int = Field(alias="balance_change")

    @property
    def id(self) -> str:
        return f"{self.date}-{self.type}-{self.balance_change_cents}"

    @property
    def formatted_date(self) -> str:
        return format_history_date(self.date)

    @property
    def balance_change_in_dollars(self) -> str:
        return signed_cents_to_dollars(self.balance_change_cents)

    @property
    def is_positive(self) -> bool:
        return self.balance_change_cents >= 0


class AccountUpdatePayload(BaseModel):
    """Editable account fields for PUT account"""

    family_name: str
    given_name: str
    date_of_birth: str
    postal_address: Address
    residential_address: Address
    phone: str
    email: str
    default_trip: str
    allow_marketing: bool


class AccountUpdateRequest(BaseModel):
    account: AccountUpdatePayload
