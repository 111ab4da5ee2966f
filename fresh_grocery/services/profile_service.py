"""Profile and role management."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from fresh_grocery.config import Settings
from fresh_grocery.exceptions import InvalidOperationException, RecordNotFoundException
from fresh_grocery.models.profile import AppRole, Profile, UserRole
from fresh_grocery.services.auth_service import AuthContext

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for customer profiles and their roles."""

    def __init__(self, db: Session, config: Settings):
        self.db = db
        self.config = config

    def ensure_profile(self, auth_context: AuthContext) -> Profile:
        """Return the caller's profile, creating it on first sight.

        New profiles get the ``user`` role, plus ``admin`` when the email is
        listed in ADMIN_EMAILS.
        """
        profile = self.db.get(Profile, auth_context.subject)
        if profile is not None:
            if not profile.email and auth_context.email:
                profile.email = auth_context.email
                self.db.commit()
            return profile

        profile = Profile(
            id=auth_context.subject,
            email=auth_context.email,
            full_name=auth_context.name,
        )
        profile.roles.append(UserRole(role=AppRole.USER))

        email = (auth_context.email or "").lower()
        if email and email in self.config.admin_emails:
            profile.roles.append(UserRole(role=AppRole.ADMIN))

        self.db.add(profile)
        # Committed here so a refused request still keeps the profile
        self.db.commit()

        logger.info(
            "Created profile for subject=%s roles=%s", profile.id, sorted(profile.role_names)
        )
        return profile

    def get_profile(self, user_id: str) -> Profile:
        profile = self.db.get(Profile, user_id)
        if profile is None:
            raise RecordNotFoundException("Profile", user_id)
        return profile

    def update_profile(self, user_id: str, **kwargs) -> Profile:
        """Update profile fields. Keys with a None value are left unchanged."""
        profile = self.get_profile(user_id)
        for key, value in kwargs.items():
            if value is not None:
                setattr(profile, key, value.strip() if isinstance(value, str) else value)
        self.db.flush()
        return profile

    def get_roles(self, user_id: str) -> set[str]:
        stmt = select(UserRole.role).where(UserRole.user_id == user_id)
        return {role.value for role in self.db.scalars(stmt)}

    def has_role(self, user_id: str, role: AppRole) -> bool:
        return role.value in self.get_roles(user_id)

    def grant_role(self, user_id: str, role: AppRole) -> Profile:
        """Grant a role. Granting a role the user already has is a no-op."""
        profile = self.get_profile(user_id)
        role = AppRole(role)
        if role.value not in profile.role_names:
            profile.roles.append(UserRole(role=role))
            self.db.flush()
            logger.info("Granted role %s to %s", role.value, user_id)
        return profile

    def revoke_role(self, user_id: str, role: AppRole) -> Profile:
        """Revoke a role. Revoking a role the user does not have is a no-op."""
        role = AppRole(role)
        if role == AppRole.USER:
            raise InvalidOperationException("revoke the user role", "every account keeps it")

        profile = self.get_profile(user_id)
        for user_role in list(profile.roles):
            if user_role.role == role:
                profile.roles.remove(user_role)
                logger.info("Revoked role %s from %s", role.value, user_id)
        self.db.flush()
        return profile

    def list_profiles_with_roles(self) -> list[Profile]:
        stmt = select(Profile).order_by(Profile.created_at.desc(), Profile.id)
        return list(self.db.scalars(stmt))
