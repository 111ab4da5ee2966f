"""Subscription and basket management."""

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fresh_grocery.app_config import AppSettings
from fresh_grocery.exceptions import (
    AuthorizationException,
    InvalidOperationException,
    InvalidStatusTransitionException,
    RecordNotFoundException,
)
from fresh_grocery.models.product import Product
from fresh_grocery.models.subscription import (
    Subscription,
    SubscriptionItem,
    SubscriptionStatus,
    SubscriptionType,
)
from fresh_grocery.utils import local_today
from fresh_grocery.utils.pricing import PriceLine, PriceQuote, next_renewal_date, quote

logger = logging.getLogger(__name__)

SUBSCRIPTION_TRANSITIONS: dict[SubscriptionStatus, frozenset[SubscriptionStatus]] = {
    SubscriptionStatus.ACTIVE: frozenset({SubscriptionStatus.PAUSED, SubscriptionStatus.CANCELLED}),
    SubscriptionStatus.PAUSED: frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED}),
    SubscriptionStatus.CANCELLED: frozenset(),
}


class SubscriptionService:
    """Service for customer subscriptions and their item baskets.

    ``total_pkr`` is kept in step with the basket: every item change and every
    type change recomputes it from the pricing quote.
    """

    def __init__(self, db: Session, app_settings: AppSettings):
        self.db = db
        self.app_settings = app_settings

    # ── Subscriptions ─────────────────────────────────────────────────

    def create_subscription(self, user_id: str, subscription_type: SubscriptionType) -> Subscription:
        subscription_type = SubscriptionType(subscription_type)
        subscription = Subscription(
            user_id=user_id,
            type=subscription_type,
            status=SubscriptionStatus.ACTIVE,
            total_pkr=0,
            next_renewal_date=next_renewal_date(subscription_type, self._today()),
        )
        self.db.add(subscription)
        self.db.flush()
        logger.info("Created %s subscription %s for %s", subscription_type.value, subscription.id, user_id)
        return subscription

    def list_user_subscriptions(self, user_id: str) -> list[Subscription]:
        """Active and paused subscriptions of a user, newest first."""
        stmt = (
            select(Subscription)
            .where(
                Subscription.user_id == user_id,
                Subscription.status.in_([SubscriptionStatus.ACTIVE, SubscriptionStatus.PAUSED]),
            )
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        )
        return list(self.db.scalars(stmt).unique())

    def get_current_subscription(self, user_id: str) -> Subscription | None:
        subscriptions = self.list_user_subscriptions(user_id)
        for subscription in subscriptions:
            if subscription.status == SubscriptionStatus.ACTIVE:
                return subscription
        return subscriptions[0] if subscriptions else None

    def get_subscription(self, subscription_id: int) -> Subscription:
        subscription = self.db.get(Subscription, subscription_id)
        if subscription is None:
            raise RecordNotFoundException("Subscription", subscription_id)
        return subscription

    def get_for_user(self, subscription_id: int, user_id: str, is_admin: bool = False) -> Subscription:
        """Load a subscription the caller owns (admins may load any)."""
        subscription = self.get_subscription(subscription_id)
        if subscription.user_id != user_id and not is_admin:
            raise AuthorizationException("You do not have access to this subscription")
        return subscription

    def list_all(self, status: SubscriptionStatus | None = None) -> list[Subscription]:
        stmt = select(Subscription)
        if status is not None:
            stmt = stmt.where(Subscription.status == SubscriptionStatus(status))
        stmt = stmt.order_by(Subscription.created_at.desc(), Subscription.id.desc())
        return list(self.db.scalars(stmt).unique())

    def count_by_status(self, status: SubscriptionStatus) -> int:
        stmt = select(func.count(Subscription.id)).where(Subscription.status == status)
        return self.db.scalar(stmt) or 0

    def update_subscription(
        self,
        subscription: Subscription,
        subscription_type: SubscriptionType | None = None,
        status: SubscriptionStatus | None = None,
    ) -> Subscription:
        """Change type and/or status.

        A type change reprices the basket and restarts the renewal period
        from today.
        """
        if subscription_type is not None:
            subscription_type = SubscriptionType(subscription_type)
            self._ensure_not_cancelled(subscription, "change the subscription type")
            if subscription_type != subscription.type:
                subscription.type = subscription_type
                subscription.next_renewal_date = next_renewal_date(subscription_type, self._today())
                self._recompute_total(subscription)
                logger.info("Subscription %s switched to %s", subscription.id, subscription_type.value)

        if status is not None:
            self.set_status(subscription, status)

        self.db.flush()
        return subscription

    def set_status(self, subscription: Subscription, status: SubscriptionStatus) -> Subscription:
        status = SubscriptionStatus(status)
        current = subscription.status
        if status == current:
            return subscription
        if status not in SUBSCRIPTION_TRANSITIONS[current]:
            raise InvalidStatusTransitionException("Subscription", current.value, status.value)

        subscription.status = status
        self.db.flush()
        logger.info("Subscription %s: %s -> %s", subscription.id, current.value, status.value)
        return subscription

    def toggle_pause(self, subscription: Subscription) -> Subscription:
        if subscription.status == SubscriptionStatus.ACTIVE:
            return self.set_status(subscription, SubscriptionStatus.PAUSED)
        if subscription.status == SubscriptionStatus.PAUSED:
            return self.set_status(subscription, SubscriptionStatus.ACTIVE)
        raise InvalidOperationException("pause or resume the subscription", "it is cancelled")

    def delete_subscription(self, subscription: Subscription) -> None:
        subscription_id = subscription.id
        subscription.items.clear()
        self.db.flush()
        self.db.delete(subscription)
        self.db.flush()
        logger.info("Deleted subscription %s", subscription_id)

    def quote(self, subscription: Subscription) -> PriceQuote:
        lines = [PriceLine(item.product.price_pkr, item.quantity) for item in subscription.items]
        return quote(lines, subscription.type, self.app_settings.yearly_discount_rate)

    # ── Items ─────────────────────────────────────────────────────────

    def list_items(self, subscription: Subscription) -> list[SubscriptionItem]:
        return list(subscription.items)

    def add_item(self, subscription: Subscription, product_id: int, quantity: int = 1) -> SubscriptionItem:
        """Add a product to the basket, merging with an existing line for it."""
        self._ensure_not_cancelled(subscription, "add items")
        if quantity < 1:
            raise InvalidOperationException("add the item", "quantity must be at least 1")

        product = self.db.get(Product, product_id)
        if product is None:
            raise RecordNotFoundException("Product", product_id)
        if not product.is_active:
            raise InvalidOperationException("add the item", f"product '{product.name}' is not available")

        item = next((i for i in subscription.items if i.product_id == product_id), None)
        if item is not None:
            item.quantity += quantity
        else:
            item = SubscriptionItem(product_id=product_id, product=product, quantity=quantity)
            subscription.items.append(item)

        self.db.flush()
        self._recompute_total(subscription)
        return item

    def update_item_quantity(
        self, subscription: Subscription, item_id: int, quantity: int
    ) -> SubscriptionItem | None:
        """Set an item's quantity. Anything below 1 removes the item and returns None."""
        self._ensure_not_cancelled(subscription, "change items")
        item = self._get_item(subscription, item_id)

        if quantity < 1:
            subscription.items.remove(item)
            self.db.flush()
            self._recompute_total(subscription)
            return None

        item.quantity = quantity
        self.db.flush()
        self._recompute_total(subscription)
        return item

    def remove_item(self, subscription: Subscription, item_id: int) -> None:
        self._ensure_not_cancelled(subscription, "remove items")
        item = self._get_item(subscription, item_id)
        subscription.items.remove(item)
        self.db.flush()
        self._recompute_total(subscription)

    # ── Helpers ───────────────────────────────────────────────────────

    def _get_item(self, subscription: Subscription, item_id: int) -> SubscriptionItem:
        item = next((i for i in subscription.items if i.id == item_id), None)
        if item is None:
            raise RecordNotFoundException("Subscription item", item_id)
        return item

    def _recompute_total(self, subscription: Subscription) -> None:
        subscription.total_pkr = self.quote(subscription).total
        self.db.flush()

    def _ensure_not_cancelled(self, subscription: Subscription, operation: str) -> None:
        if subscription.status == SubscriptionStatus.CANCELLED:
            raise InvalidOperationException(operation, "the subscription is cancelled")

    def _today(self) -> date:
        return local_today(self.app_settings.delivery_timezone)
