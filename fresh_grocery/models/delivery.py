"""Delivery assignment and per-day delivery models."""

from datetime import date, datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fresh_grocery.extensions import db
from fresh_grocery.models.base import TimestampMixin, enum_column
from fresh_grocery.models.order import Order
from fresh_grocery.models.rider import Rider


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


CLOSED_DELIVERY_STATUSES = frozenset({DeliveryStatus.COMPLETED, DeliveryStatus.CANCELLED})


class DailyDeliveryStatus(str, Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    MISSED = "missed"


class DeliveryAssignment(TimestampMixin, db.Model):  # type: ignore[name-defined]
    """Links an order to a rider and tracks progress over the subscription period."""

    __tablename__ = "delivery_assignments"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    rider_id: Mapped[int | None] = mapped_column(
        sa.Integer, sa.ForeignKey("riders.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[DeliveryStatus] = mapped_column(
        enum_column(DeliveryStatus), nullable=False, default=DeliveryStatus.PENDING
    )
    total_days: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=7)
    delivered_days: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    assigned_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    picked_up_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    order: Mapped[Order] = relationship(back_populates="delivery_assignment", lazy="joined")
    rider: Mapped[Rider | None] = relationship(lazy="joined")
    daily_deliveries: Mapped[list["DailyDelivery"]] = relationship(
        back_populates="assignment",
        cascade="all, delete-orphan",
        order_by="DailyDelivery.day_number",
    )

    @property
    def is_open(self) -> bool:
        return self.status not in CLOSED_DELIVERY_STATUSES

    @property
    def progress_percent(self) -> float:
        if not self.total_days:
            return 0.0
        return round(self.delivered_days / self.total_days * 100, 1)

    def __repr__(self) -> str:
        return f"<DeliveryAssignment id={self.id} order_id={self.order_id} status={self.status.value}>"


class DailyDelivery(TimestampMixin, db.Model):  # type: ignore[name-defined]
    __tablename__ = "daily_deliveries"
    __table_args__ = (
        sa.UniqueConstraint("delivery_assignment_id", "day_number", name="uq_daily_deliveries_day"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    delivery_assignment_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("delivery_assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_number: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    delivery_date: Mapped[date] = mapped_column(sa.Date, nullable=False, index=True)
    status: Mapped[DailyDeliveryStatus] = mapped_column(
        enum_column(DailyDeliveryStatus), nullable=False, default=DailyDeliveryStatus.PENDING
    )
    delivered_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    assignment: Mapped[DeliveryAssignment] = relationship(back_populates="daily_deliveries")

    def __repr__(self) -> str:
        return f"<DailyDelivery id={self.id} day={self.day_number} status={self.status.value}>"
