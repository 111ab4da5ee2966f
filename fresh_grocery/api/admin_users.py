"""Admin user and role management endpoints."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.models.profile import AppRole
from fresh_grocery.schemas.profile_schema import (
    ProfileResponseSchema,
    RoleChangeSchema,
    UserListResponseSchema,
)
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.profile_service import ProfileService
from fresh_grocery.utils.auth import allow_roles
from fresh_grocery.utils.spectree_config import api

admin_users_bp = Blueprint("admin_users", __name__, url_prefix="/admin/users")


@admin_users_bp.route("", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=UserListResponseSchema))
@inject
def list_users(
    profile_service: ProfileService = Provide[ServiceContainer.profile_service],
):
    """List all profiles with their roles, newest first."""
    profiles = profile_service.list_profiles_with_roles()
    return UserListResponseSchema(
        items=[ProfileResponseSchema.model_validate(profile) for profile in profiles],
        total=len(profiles),
    ).model_dump(mode="json")


@admin_users_bp.route("/<string:user_id>", methods=["GET"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=ProfileResponseSchema))
@inject
def get_user(
    user_id: str,
    profile_service: ProfileService = Provide[ServiceContainer.profile_service],
):
    profile = profile_service.get_profile(user_id)
    return ProfileResponseSchema.model_validate(profile).model_dump(mode="json")


@admin_users_bp.route("/<string:user_id>/roles", methods=["POST"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=ProfileResponseSchema), json=RoleChangeSchema)
@inject
def grant_role(
    user_id: str,
    profile_service: ProfileService = Provide[ServiceContainer.profile_service],
):
    data = RoleChangeSchema(**request.get_json())
    profile = profile_service.grant_role(user_id, data.role)
    return ProfileResponseSchema.model_validate(profile).model_dump(mode="json")


@admin_users_bp.route("/<string:user_id>/roles/<string:role>", methods=["DELETE"])
@allow_roles(AppRole.ADMIN.value)
@api.validate(resp=SpectreeResponse(HTTP_200=ProfileResponseSchema))
@inject
def revoke_role(
    user_id: str,
    role: str,
    profile_service: ProfileService = Provide[ServiceContainer.profile_service],
):
    """Revoke a role. The ``user`` role cannot be revoked."""
    data = RoleChangeSchema(role=role)
    profile = profile_service.revoke_role(user_id, data.role)
    return ProfileResponseSchema.model_validate(profile).model_dump(mode="json")
