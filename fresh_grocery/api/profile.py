"""The caller's own profile."""

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from fresh_grocery.schemas.profile_schema import ProfileResponseSchema, ProfileUpdateSchema
from fresh_grocery.services.container import ServiceContainer
from fresh_grocery.services.profile_service import ProfileService
from fresh_grocery.utils.auth import current_user_id
from fresh_grocery.utils.spectree_config import api

profile_bp = Blueprint("profile", __name__, url_prefix="/profile")


@profile_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=ProfileResponseSchema))
@inject
def get_profile(
    profile_service: ProfileService = Provide[ServiceContainer.profile_service],
):
    """The caller's profile and roles."""
    profile = profile_service.get_profile(current_user_id())
    return ProfileResponseSchema.model_validate(profile).model_dump(mode="json")


@profile_bp.route("", methods=["PUT"])
@api.validate(resp=SpectreeResponse(HTTP_200=ProfileResponseSchema), json=ProfileUpdateSchema)
@inject
def update_profile(
    profile_service: ProfileService = Provide[ServiceContainer.profile_service],
):
    data = ProfileUpdateSchema(**request.get_json())
    profile = profile_service.update_profile(current_user_id(), **data.model_dump(exclude_unset=True))
    return ProfileResponseSchema.model_validate(profile).model_dump(mode="json")
