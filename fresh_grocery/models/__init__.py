"""Database models.

All SQLAlchemy models are imported here so they are registered when the app starts.
"""

from fresh_grocery.models.delivery import (
    DailyDelivery,
    DailyDeliveryStatus,
    DeliveryAssignment,
    DeliveryStatus,
)
from fresh_grocery.models.order import Order, PaymentMethod, PaymentStatus
from fresh_grocery.models.product import Product
from fresh_grocery.models.profile import AppRole, Profile, UserRole
from fresh_grocery.models.rider import Rider, RiderStatus
from fresh_grocery.models.subscription import (
    Subscription,
    SubscriptionItem,
    SubscriptionStatus,
    SubscriptionType,
)

__all__ = [
    "AppRole",
    "DailyDelivery",
    "DailyDeliveryStatus",
    "DeliveryAssignment",
    "DeliveryStatus",
    "Order",
    "PaymentMethod",
    "PaymentStatus",
    "Product",
    "Profile",
    "Rider",
    "RiderStatus",
    "Subscription",
    "SubscriptionItem",
    "SubscriptionStatus",
    "SubscriptionType",
    "UserRole",
]
