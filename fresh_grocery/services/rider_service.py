"""Delivery rider registration and review."""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fresh_grocery.exceptions import (
    AuthorizationException,
    DependencyException,
    RecordNotFoundException,
    ResourceConflictException,
    ValidationException,
)
from fresh_grocery.models.delivery import CLOSED_DELIVERY_STATUSES, DeliveryAssignment
from fresh_grocery.models.profile import AppRole
from fresh_grocery.models.rider import Rider, RiderStatus
from fresh_grocery.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

MIN_PHONE_DIGITS = 10


def _normalize_phone(phone: str) -> str:
    phone = phone.strip()
    if sum(ch.isdigit() for ch in phone) < MIN_PHONE_DIGITS:
        raise ValidationException(f"Phone number must contain at least {MIN_PHONE_DIGITS} digits")
    return phone


class RiderService:
    """Service for riders: self signup, admin onboarding and approval."""

    def __init__(self, db: Session, profile_service: ProfileService):
        self.db = db
        self.profile_service = profile_service

    def signup(self, user_id: str, phone: str, vehicle_type: str | None = None) -> Rider:
        """Register the caller as a rider awaiting approval."""
        return self._register(
            user_id, phone, vehicle_type, status=RiderStatus.PENDING, is_available=False
        )

    def create_rider(self, user_id: str, phone: str, vehicle_type: str | None = None) -> Rider:
        """Onboard an existing user as an approved, available rider."""
        return self._register(
            user_id, phone, vehicle_type, status=RiderStatus.APPROVED, is_available=True
        )

    def _register(
        self,
        user_id: str,
        phone: str,
        vehicle_type: str | None,
        status: RiderStatus,
        is_available: bool,
    ) -> Rider:
        phone = _normalize_phone(phone)
        self.profile_service.get_profile(user_id)

        if self.find_by_user(user_id) is not None:
            raise ResourceConflictException("Rider", f"user {user_id}")

        self.profile_service.grant_role(user_id, AppRole.RIDER)

        rider = Rider(
            user_id=user_id,
            phone=phone,
            vehicle_type=(vehicle_type or "").strip() or None,
            status=status,
            is_available=is_available,
        )
        self.db.add(rider)
        self.db.flush()
        logger.info("Registered rider %s for %s with status %s", rider.id, user_id, status.value)
        return rider

    def get_by_id(self, rider_id: int) -> Rider:
        rider = self.db.get(Rider, rider_id)
        if rider is None:
            raise RecordNotFoundException("Rider", rider_id)
        return rider

    def find_by_user(self, user_id: str) -> Rider | None:
        return self.db.scalars(select(Rider).where(Rider.user_id == user_id)).first()

    def get_by_user(self, user_id: str) -> Rider:
        rider = self.find_by_user(user_id)
        if rider is None:
            raise RecordNotFoundException("Rider profile for user", user_id)
        return rider

    def get_approved_by_user(self, user_id: str) -> Rider:
        """The caller's rider record, refused unless an admin has approved it."""
        rider = self.get_by_user(user_id)
        if rider.status != RiderStatus.APPROVED:
            raise AuthorizationException(f"Rider account is {rider.status.value}")
        return rider

    def list_all(self) -> list[Rider]:
        return list(self.db.scalars(select(Rider).order_by(Rider.created_at.desc(), Rider.id.desc())))

    def list_available(self) -> list[Rider]:
        stmt = (
            select(Rider)
            .where(Rider.status == RiderStatus.APPROVED, Rider.is_available.is_(True))
            .order_by(Rider.id)
        )
        return list(self.db.scalars(stmt))

    def list_pending(self) -> list[Rider]:
        stmt = (
            select(Rider)
            .where(Rider.status == RiderStatus.PENDING)
            .order_by(Rider.created_at, Rider.id)
        )
        return list(self.db.scalars(stmt))

    def update_rider(
        self,
        rider_id: int,
        phone: str | None = None,
        vehicle_type: str | None = None,
        is_available: bool | None = None,
        status: RiderStatus | None = None,
    ) -> Rider:
        rider = self.get_by_id(rider_id)
        if phone is not None:
            rider.phone = _normalize_phone(phone)
        if vehicle_type is not None:
            rider.vehicle_type = vehicle_type.strip() or None
        if is_available is not None:
            rider.is_available = is_available
        if status is not None:
            rider.status = RiderStatus(status)
            if rider.status == RiderStatus.APPROVED:
                self.profile_service.grant_role(rider.user_id, AppRole.RIDER)
        self.db.flush()
        return rider

    def set_availability(self, user_id: str, is_available: bool) -> Rider:
        rider = self.get_approved_by_user(user_id)
        rider.is_available = is_available
        self.db.flush()
        return rider

    def review_rider(self, rider_id: int, approved: bool) -> Rider:
        """Approve (available) or reject (unavailable) a rider."""
        rider = self.get_by_id(rider_id)
        rider.status = RiderStatus.APPROVED if approved else RiderStatus.REJECTED
        rider.is_available = approved
        if approved:
            self.profile_service.grant_role(rider.user_id, AppRole.RIDER)
        self.db.flush()
        logger.info("Rider %s %s", rider.id, rider.status.value)
        return rider

    def delete_rider(self, rider_id: int) -> None:
        rider = self.get_by_id(rider_id)

        open_assignments = self.db.scalar(
            select(func.count(DeliveryAssignment.id)).where(
                DeliveryAssignment.rider_id == rider_id,
                DeliveryAssignment.status.not_in(list(CLOSED_DELIVERY_STATUSES)),
            )
        )
        if open_assignments:
            raise DependencyException(
                "rider", rider_id, f"they have {open_assignments} open delivery assignment(s)"
            )

        self.db.delete(rider)
        self.db.flush()
        logger.info("Deleted rider %s", rider_id)
