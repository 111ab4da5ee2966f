"""Delivery rider model."""

from enum import Enum

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fresh_grocery.extensions import db
from fresh_grocery.models.base import TimestampMixin, enum_column
from fresh_grocery.models.profile import Profile


class RiderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Rider(TimestampMixin, db.Model):  # type: ignore[name-defined]
    __tablename__ = "riders"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        sa.String(64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    phone: Mapped[str] = mapped_column(sa.String(20), nullable=False)
    vehicle_type: Mapped[str | None] = mapped_column(sa.String(50), nullable=True)
    status: Mapped[RiderStatus] = mapped_column(
        enum_column(RiderStatus), nullable=False, default=RiderStatus.PENDING
    )
    is_available: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)

    profile: Mapped[Profile] = relationship(lazy="joined")

    @property
    def is_assignable(self) -> bool:
        return self.status == RiderStatus.APPROVED and self.is_available

    def __repr__(self) -> str:
        return f"<Rider id={self.id} user_id={self.user_id!r} status={self.status.value}>"
