"""Subscription and subscription item models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fresh_grocery.extensions import db
from fresh_grocery.models.base import TimestampMixin, enum_column
from fresh_grocery.models.product import Product
from fresh_grocery.models.profile import Profile


class SubscriptionType(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class Subscription(TimestampMixin, db.Model):  # type: ignore[name-defined]
    """A customer's recurring grocery basket."""

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        sa.String(64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[SubscriptionType] = mapped_column(
        enum_column(SubscriptionType), nullable=False, default=SubscriptionType.WEEKLY
    )
    status: Mapped[SubscriptionStatus] = mapped_column(
        enum_column(SubscriptionStatus), nullable=False, default=SubscriptionStatus.ACTIVE
    )
    total_pkr: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False, default=Decimal("0"))
    next_renewal_date: Mapped[date | None] = mapped_column(sa.Date, nullable=True)

    profile: Mapped[Profile] = relationship(lazy="joined")
    items: Mapped[list["SubscriptionItem"]] = relationship(
        back_populates="subscription",
        cascade="all, delete-orphan",
        order_by="SubscriptionItem.id",
    )

    def __repr__(self) -> str:
        return f"<Subscription id={self.id} type={self.type.value} status={self.status.value}>"


class SubscriptionItem(db.Model):  # type: ignore[name-defined]
    __tablename__ = "subscription_items"
    __table_args__ = (
        sa.UniqueConstraint("subscription_id", "product_id", name="uq_subscription_items_product"),
        sa.CheckConstraint("quantity >= 1", name="ck_subscription_items_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    subscription_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("subscriptions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("products.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )

    subscription: Mapped[Subscription] = relationship(back_populates="items")
    product: Mapped[Product] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<SubscriptionItem id={self.id} product_id={self.product_id} quantity={self.quantity}>"
