"""Order and checkout schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fresh_grocery.models.delivery import DeliveryStatus
from fresh_grocery.models.order import PaymentMethod, PaymentStatus
from fresh_grocery.schemas.profile_schema import ProfileSummarySchema


class PaymentDetailsSchema(BaseModel):
    """Sender and delivery details entered at checkout."""

    sender_name: str = Field(..., max_length=200, description="Letters and spaces only")
    sender_account: str = Field(..., max_length=64, description="Wallet number or IBAN")
    sender_mobile: str = Field(..., max_length=20, description="10 or 11 digits")
    delivery_address: str = Field(..., max_length=1000)
    bank_code: str | None = Field(None, description="Required for bank transfers")


class OrderCreateSchema(BaseModel):
    """Checkout request. The amount is computed server-side from the basket."""

    subscription_id: int
    payment_method: PaymentMethod
    payment_details: PaymentDetailsSchema


class OrderStatusUpdateSchema(BaseModel):
    payment_status: PaymentStatus
    transaction_id: str | None = Field(None, max_length=100)


class OrderDeliverySchema(BaseModel):
    id: int
    status: DeliveryStatus
    total_days: int
    delivered_days: int
    progress_percent: float

    model_config = {"from_attributes": True}


class OrderResponseSchema(BaseModel):
    """Schema for order responses."""

    id: int
    user_id: str
    subscription_id: int | None
    amount_pkr: float
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    transaction_id: str | None
    payment_details: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime
    delivery_assignment: OrderDeliverySchema | None

    model_config = {"from_attributes": True}


class OrderListResponseSchema(BaseModel):
    items: list[OrderResponseSchema]
    total: int


class AdminOrderResponseSchema(OrderResponseSchema):
    profile: ProfileSummarySchema


class AdminOrderListResponseSchema(BaseModel):
    items: list[AdminOrderResponseSchema]
    total: int


class WalletAccountSchema(BaseModel):
    method: PaymentMethod
    name: str
    description: str
    account_number: str


class BankAccountSchema(BaseModel):
    code: str
    name: str
    iban: str


class PaymentMethodsResponseSchema(BaseModel):
    """Accounts customers transfer their payment into."""

    account_title: str
    currency: str
    wallets: list[WalletAccountSchema]
    banks: list[BankAccountSchema]
