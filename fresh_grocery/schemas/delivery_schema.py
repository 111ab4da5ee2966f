"""Delivery assignment and daily delivery schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from fresh_grocery.models.delivery import DailyDeliveryStatus, DeliveryStatus
from fresh_grocery.models.order import PaymentStatus
from fresh_grocery.models.rider import RiderStatus
from fresh_grocery.schemas.profile_schema import ProfileSummarySchema


class AssignRiderSchema(BaseModel):
    """Give an order's delivery to a rider, replacing any current one."""

    order_id: int
    rider_id: int
    start_date: date | None = Field(None, description="First delivery day; defaults to today")


class AssignmentCreateSchema(BaseModel):
    order_id: int
    rider_id: int | None = None
    start_date: date | None = None
    notes: str | None = Field(None, max_length=1000)


class DeliveryStatusUpdateSchema(BaseModel):
    status: DeliveryStatus
    notes: str | None = Field(None, max_length=1000)


class DailyDeliveryMarkSchema(BaseModel):
    notes: str | None = Field(None, max_length=1000)


class DeliveryRiderSchema(BaseModel):
    id: int
    phone: str
    vehicle_type: str | None
    status: RiderStatus
    profile: ProfileSummarySchema

    model_config = {"from_attributes": True}


class DeliveryOrderSchema(BaseModel):
    id: int
    amount_pkr: float
    payment_status: PaymentStatus
    payment_details: dict[str, Any] | None
    profile: ProfileSummarySchema

    model_config = {"from_attributes": True}


class DailyDeliveryResponseSchema(BaseModel):
    id: int
    delivery_assignment_id: int
    day_number: int
    delivery_date: date
    status: DailyDeliveryStatus
    delivered_at: datetime | None
    notes: str | None

    model_config = {"from_attributes": True}


class DeliveryAssignmentResponseSchema(BaseModel):
    """Schema for delivery assignment responses, daily schedule included."""

    id: int
    order_id: int
    rider_id: int | None
    status: DeliveryStatus
    total_days: int
    delivered_days: int
    progress_percent: float
    assigned_at: datetime | None
    picked_up_at: datetime | None
    delivered_at: datetime | None
    notes: str | None
    created_at: datetime
    updated_at: datetime
    rider: DeliveryRiderSchema | None
    order: DeliveryOrderSchema
    daily_deliveries: list[DailyDeliveryResponseSchema]

    model_config = {"from_attributes": True}


class DeliveryAssignmentListResponseSchema(BaseModel):
    items: list[DeliveryAssignmentResponseSchema]
    total: int


class TodayAssignmentSchema(BaseModel):
    id: int
    status: DeliveryStatus
    total_days: int
    delivered_days: int
    order: DeliveryOrderSchema

    model_config = {"from_attributes": True}


class TodayDeliveryResponseSchema(DailyDeliveryResponseSchema):
    assignment: TodayAssignmentSchema


class TodayDeliveryListResponseSchema(BaseModel):
    items: list[TodayDeliveryResponseSchema]
    total: int
