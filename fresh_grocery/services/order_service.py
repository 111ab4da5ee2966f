"""Checkout and order payment tracking."""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal

from prometheus_client import Counter
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fresh_grocery.consts import BANK_ACCOUNTS
from fresh_grocery.exceptions import (
    AuthorizationException,
    InvalidOperationException,
    InvalidStatusTransitionException,
    RecordNotFoundException,
    ValidationException,
)
from fresh_grocery.models.order import Order, PaymentMethod, PaymentStatus
from fresh_grocery.models.profile import Profile
from fresh_grocery.models.subscription import SubscriptionStatus
from fresh_grocery.services.delivery_service import DeliveryService
from fresh_grocery.services.subscription_service import SubscriptionService

ORDERS_CREATED_TOTAL = Counter(
    "orders_created_total",
    "Total orders placed by payment method",
    ["payment_method"],
)
PAYMENT_STATUS_CHANGES_TOTAL = Counter(
    "order_payment_status_changes_total",
    "Total order payment status changes by new status",
    ["status"],
)

logger = logging.getLogger(__name__)

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset(
        {PaymentStatus.PROCESSING, PaymentStatus.COMPLETED, PaymentStatus.FAILED, PaymentStatus.CANCELLED}
    ),
    PaymentStatus.PROCESSING: frozenset(
        {PaymentStatus.COMPLETED, PaymentStatus.FAILED, PaymentStatus.CANCELLED}
    ),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.COMPLETED: frozenset({PaymentStatus.CANCELLED}),
    PaymentStatus.CANCELLED: frozenset(),
}

_NAME_RE = re.compile(r"^[A-Za-z\s]+$")
_WALLET_ACCOUNT_RE = re.compile(r"^[0-9-]+$")
_MOBILE_RE = re.compile(r"^[0-9]{10,11}$")
MIN_ADDRESS_LENGTH = 10


@dataclass
class PaymentDetails:
    sender_name: str
    sender_account: str
    sender_mobile: str
    delivery_address: str
    bank_code: str | None = None


class OrderService:
    """Service for checkout and the admin payment workflow."""

    def __init__(
        self,
        db: Session,
        subscription_service: SubscriptionService,
        delivery_service: DeliveryService,
    ):
        self.db = db
        self.subscription_service = subscription_service
        self.delivery_service = delivery_service

    def validate_payment_details(
        self, payment_method: PaymentMethod, details: PaymentDetails
    ) -> dict[str, str]:
        """Check checkout fields and return the normalized details to store.

        Raises:
            ValidationException: listing every invalid field
        """
        errors: list[str] = []
        name = details.sender_name.strip()
        account = details.sender_account.strip()
        mobile = details.sender_mobile.strip()
        address = details.delivery_address.strip()

        if not name:
            errors.append("sender_name is required")
        elif not _NAME_RE.match(name):
            errors.append("sender_name may only contain letters and spaces")

        if not account:
            errors.append("sender_account is required")
        elif payment_method == PaymentMethod.BANK_TRANSFER:
            account = account.replace(" ", "").upper()
        elif not _WALLET_ACCOUNT_RE.match(account):
            errors.append("sender_account may only contain digits and dashes")

        if not mobile:
            errors.append("sender_mobile is required")
        elif not _MOBILE_RE.match(mobile):
            errors.append("sender_mobile must be 10 or 11 digits")

        if not address:
            errors.append("delivery_address is required")
        elif len(address) < MIN_ADDRESS_LENGTH:
            errors.append(f"delivery_address must be at least {MIN_ADDRESS_LENGTH} characters")

        normalized = {
            "sender_name": name,
            "sender_account": account,
            "sender_mobile": mobile,
            "delivery_address": address,
        }

        if payment_method == PaymentMethod.BANK_TRANSFER:
            bank_code = (details.bank_code or "").strip().lower()
            if bank_code not in BANK_ACCOUNTS:
                errors.append("bank_code must name a supported bank")
            else:
                normalized["bank_code"] = bank_code
                normalized["bank_name"] = BANK_ACCOUNTS[bank_code]["name"]

        if errors:
            raise ValidationException("Invalid payment details: " + "; ".join(errors))

        return normalized

    def create_order(
        self,
        user_id: str,
        subscription_id: int,
        payment_method: PaymentMethod,
        details: PaymentDetails,
    ) -> Order:
        """Place an order for a subscription at its server-side quoted total."""
        payment_method = PaymentMethod(payment_method)
        subscription = self.subscription_service.get_for_user(subscription_id, user_id)

        if subscription.status != SubscriptionStatus.ACTIVE:
            raise InvalidOperationException(
                "check out", f"the subscription is {subscription.status.value}"
            )

        amount = self.subscription_service.quote(subscription).total
        if amount <= Decimal("0"):
            raise InvalidOperationException("check out", "the subscription has no items")

        payment_details = self.validate_payment_details(payment_method, details)

        order = Order(
            user_id=user_id,
            subscription_id=subscription.id,
            amount_pkr=amount,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING,
            payment_details=payment_details,
        )
        self.db.add(order)

        profile = self.db.get(Profile, user_id)
        if profile is not None and not (profile.address or "").strip():
            profile.address = payment_details["delivery_address"]

        self.db.flush()

        ORDERS_CREATED_TOTAL.labels(payment_method=payment_method.value).inc()
        logger.info(
            "Order %s placed by %s: %s PKR via %s", order.id, user_id, amount, payment_method.value
        )
        return order

    def get_order(self, order_id: int) -> Order:
        order = self.db.get(Order, order_id)
        if order is None:
            raise RecordNotFoundException("Order", order_id)
        return order

    def get_for_user(self, order_id: int, user_id: str, is_admin: bool = False) -> Order:
        order = self.get_order(order_id)
        if order.user_id != user_id and not is_admin:
            raise AuthorizationException("You do not have access to this order")
        return order

    def list_user_orders(self, user_id: str) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(self.db.scalars(stmt).unique())

    def list_all(self, payment_status: PaymentStatus | None = None, limit: int | None = None) -> list[Order]:
        stmt = select(Order)
        if payment_status is not None:
            stmt = stmt.where(Order.payment_status == PaymentStatus(payment_status))
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt).unique())

    def count_by_status(self, payment_status: PaymentStatus) -> int:
        stmt = select(func.count(Order.id)).where(Order.payment_status == payment_status)
        return self.db.scalar(stmt) or 0

    def completed_revenue(self) -> Decimal:
        stmt = select(func.coalesce(func.sum(Order.amount_pkr), 0)).where(
            Order.payment_status == PaymentStatus.COMPLETED
        )
        return Decimal(str(self.db.scalar(stmt) or 0))

    def update_payment_status(
        self,
        order_id: int,
        payment_status: PaymentStatus,
        transaction_id: str | None = None,
    ) -> Order:
        """Move an order's payment to a new status.

        Cancelling an order also cancels its open delivery assignment.
        """
        order = self.get_order(order_id)
        payment_status = PaymentStatus(payment_status)
        current = order.payment_status

        if payment_status != current:
            if payment_status not in PAYMENT_TRANSITIONS[current]:
                raise InvalidStatusTransitionException("Order", current.value, payment_status.value)
            order.payment_status = payment_status
            PAYMENT_STATUS_CHANGES_TOTAL.labels(status=payment_status.value).inc()
            logger.info("Order %s payment: %s -> %s", order.id, current.value, payment_status.value)

        if transaction_id is not None:
            order.transaction_id = transaction_id.strip() or None

        if payment_status == PaymentStatus.CANCELLED:
            self.delivery_service.cancel_for_order(order)

        self.db.flush()
        return order
