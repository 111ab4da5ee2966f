"""Subscription API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from fresh_grocery.models.subscription import SubscriptionStatus, SubscriptionType
from fresh_grocery.schemas.profile_schema import ProfileSummarySchema


class SubscriptionCreateSchema(BaseModel):
    type: SubscriptionType = Field(SubscriptionType.WEEKLY, description="Billing and delivery period")


class SubscriptionUpdateSchema(BaseModel):
    """Change the period and/or status of a subscription."""

    type: SubscriptionType | None = None
    status: SubscriptionStatus | None = None


class SubscriptionStatusSchema(BaseModel):
    status: SubscriptionStatus


class SubscriptionItemCreateSchema(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1, description="Units per day")


class SubscriptionItemUpdateSchema(BaseModel):
    quantity: int = Field(..., description="Units per day; below 1 removes the item")


class ItemProductSchema(BaseModel):
    id: int
    name: str
    price_pkr: float
    image_url: str | None
    category: str

    model_config = {"from_attributes": True}


class SubscriptionItemResponseSchema(BaseModel):
    id: int
    subscription_id: int
    product_id: int
    quantity: int
    created_at: datetime
    product: ItemProductSchema

    model_config = {"from_attributes": True}


class SubscriptionItemListResponseSchema(BaseModel):
    items: list[SubscriptionItemResponseSchema]
    total: int


class SubscriptionResponseSchema(BaseModel):
    """Schema for subscription responses, basket included."""

    id: int
    user_id: str
    type: SubscriptionType
    status: SubscriptionStatus
    total_pkr: float
    next_renewal_date: date | None
    created_at: datetime
    updated_at: datetime
    items: list[SubscriptionItemResponseSchema]

    model_config = {"from_attributes": True}


class SubscriptionListResponseSchema(BaseModel):
    items: list[SubscriptionResponseSchema]
    total: int
    current_id: int | None = Field(None, description="First active subscription, else the newest")


class AdminSubscriptionResponseSchema(SubscriptionResponseSchema):
    profile: ProfileSummarySchema


class AdminSubscriptionListResponseSchema(BaseModel):
    items: list[AdminSubscriptionResponseSchema]
    total: int


class PriceQuoteResponseSchema(BaseModel):
    """Pricing breakdown of a subscription basket."""

    base_total: float = Field(..., description="Daily basket total")
    days: int
    subtotal: float
    discount_rate: float
    discount: float
    total: float

    model_config = {"from_attributes": True}
