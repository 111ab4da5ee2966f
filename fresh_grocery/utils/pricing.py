"""Subscription pricing and renewal arithmetic.

Product prices are daily prices. A subscription's subtotal is the daily
basket total multiplied by the number of days its type covers; yearly
subscriptions then receive a percentage discount.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from dateutil.relativedelta import relativedelta

from fresh_grocery.models.subscription import SubscriptionType

SUBSCRIPTION_DAYS: dict[SubscriptionType, int] = {
    SubscriptionType.WEEKLY: 7,
    SubscriptionType.MONTHLY: 30,
    SubscriptionType.YEARLY: 365,
}

_RENEWAL_PERIODS: dict[SubscriptionType, relativedelta] = {
    SubscriptionType.WEEKLY: relativedelta(days=7),
    SubscriptionType.MONTHLY: relativedelta(months=1),
    SubscriptionType.YEARLY: relativedelta(years=1),
}

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PriceLine:
    """One basket line: a daily unit price and a quantity."""

    unit_price: Decimal
    quantity: int

    @property
    def daily_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PriceQuote:
    base_total: Decimal
    days: int
    subtotal: Decimal
    discount_rate: Decimal
    discount: Decimal
    total: Decimal


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def subscription_days(subscription_type: SubscriptionType) -> int:
    return SUBSCRIPTION_DAYS[SubscriptionType(subscription_type)]


def quote(
    lines: Iterable[PriceLine],
    subscription_type: SubscriptionType,
    yearly_discount_rate: Decimal = Decimal("0.10"),
) -> PriceQuote:
    """Price a basket for a subscription period."""
    base_total = sum((line.daily_total for line in lines), Decimal("0"))
    days = subscription_days(subscription_type)
    subtotal = base_total * days

    discount_rate = yearly_discount_rate if subscription_type == SubscriptionType.YEARLY else Decimal("0")
    discount = subtotal * discount_rate

    return PriceQuote(
        base_total=_money(base_total),
        days=days,
        subtotal=_money(subtotal),
        discount_rate=discount_rate,
        discount=_money(discount),
        total=_money(subtotal - discount),
    )


def next_renewal_date(subscription_type: SubscriptionType, start: date) -> date:
    """Date the subscription renews when started (or reset) on ``start``.

    Month and year steps clamp to the end of shorter months.
    """
    return start + _RENEWAL_PERIODS[SubscriptionType(subscription_type)]
