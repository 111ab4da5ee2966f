"""Profile and user role schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from fresh_grocery.models.profile import AppRole


class ProfileSummarySchema(BaseModel):
    """Who a record belongs to, as shown on admin lists."""

    id: str
    email: str | None
    full_name: str | None
    phone: str | None

    model_config = {"from_attributes": True}


class ProfileResponseSchema(BaseModel):
    """Schema for profile responses."""

    id: str
    email: str | None
    full_name: str | None
    phone: str | None
    address: str | None
    roles: list[str] = Field(validation_alias="role_names")
    primary_role: AppRole
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}

    @field_validator("roles", mode="before")
    @classmethod
    def _sort_roles(cls, value: Any) -> list[str]:
        return sorted(value)


class ProfileUpdateSchema(BaseModel):
    """Schema for updating the caller's own profile."""

    full_name: str | None = Field(None, max_length=200, description="Display name")
    phone: str | None = Field(None, max_length=20, description="Contact phone number")
    address: str | None = Field(None, max_length=1000, description="Default delivery address")


class UserListResponseSchema(BaseModel):
    items: list[ProfileResponseSchema]
    total: int


class RoleChangeSchema(BaseModel):
    role: AppRole = Field(..., description="Role to grant or revoke")
