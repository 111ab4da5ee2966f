"""Order model."""

from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fresh_grocery.extensions import db
from fresh_grocery.models.base import TimestampMixin, enum_column
from fresh_grocery.models.profile import Profile
from fresh_grocery.models.subscription import Subscription

if TYPE_CHECKING:
    from fresh_grocery.models.delivery import DeliveryAssignment


class PaymentMethod(str, Enum):
    EASYPAISA = "easypaisa"
    JAZZCASH = "jazzcash"
    BANK_TRANSFER = "bank_transfer"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


# Orders in these states can still be fulfilled
DELIVERABLE_PAYMENT_STATUSES = frozenset(
    {PaymentStatus.PENDING, PaymentStatus.PROCESSING, PaymentStatus.COMPLETED}
)


class Order(TimestampMixin, db.Model):  # type: ignore[name-defined]
    """A checkout of a subscription, paid by wallet or bank transfer."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        sa.String(64), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subscription_id: Mapped[int | None] = mapped_column(
        sa.Integer, sa.ForeignKey("subscriptions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    amount_pkr: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(enum_column(PaymentMethod), nullable=False)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        enum_column(PaymentStatus), nullable=False, default=PaymentStatus.PENDING
    )
    transaction_id: Mapped[str | None] = mapped_column(sa.String(100), nullable=True)
    payment_details: Mapped[dict[str, Any] | None] = mapped_column(sa.JSON, nullable=True)

    profile: Mapped[Profile] = relationship(lazy="joined")
    subscription: Mapped[Subscription | None] = relationship()
    delivery_assignment: Mapped[Optional["DeliveryAssignment"]] = relationship(
        back_populates="order",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} amount_pkr={self.amount_pkr} status={self.payment_status.value}>"
