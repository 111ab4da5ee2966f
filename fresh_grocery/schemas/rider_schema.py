"""Rider schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from fresh_grocery.models.rider import RiderStatus
from fresh_grocery.schemas.profile_schema import ProfileSummarySchema


class RiderSignupSchema(BaseModel):
    phone: str = Field(..., min_length=1, max_length=20, description="At least 10 digits")
    vehicle_type: str | None = Field(None, max_length=50, description="e.g. motorcycle, bicycle")


class RiderCreateSchema(RiderSignupSchema):
    """Admin onboarding of an existing user as a rider."""

    user_id: str = Field(..., min_length=1, max_length=64)


class RiderUpdateSchema(BaseModel):
    phone: str | None = Field(None, max_length=20)
    vehicle_type: str | None = Field(None, max_length=50)
    is_available: bool | None = None
    status: RiderStatus | None = None


class RiderReviewSchema(BaseModel):
    approved: bool


class RiderAvailabilitySchema(BaseModel):
    is_available: bool


class RiderResponseSchema(BaseModel):
    id: int
    user_id: str
    phone: str
    vehicle_type: str | None
    status: RiderStatus
    is_available: bool
    created_at: datetime
    updated_at: datetime
    profile: ProfileSummarySchema

    model_config = {"from_attributes": True}


class RiderListResponseSchema(BaseModel):
    items: list[RiderResponseSchema]
    total: int


class RiderStatsResponseSchema(BaseModel):
    active_assignments: int
    completed_assignments: int
    today_pending: int

    model_config = {"from_attributes": True}
