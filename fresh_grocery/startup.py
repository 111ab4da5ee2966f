"""Storefront startup hooks.

Hook points called by create_app():
  - create_container()
  - register_blueprints()

Hook point called by CLI command handlers:
  - load_test_data_hook()
"""

import logging
from decimal import Decimal

from flask import Blueprint, Flask

from fresh_grocery.services.container import ServiceContainer

logger = logging.getLogger(__name__)

# Catalog loaded by `load-test-data`: (name, description, daily price, category)
TEST_PRODUCTS: list[tuple[str, str, str, str]] = [
    ("Fresh Milk 1L", "Pure fresh milk from local farms", "250", "Dairy"),
    ("Yogurt 500g", "Plain set yogurt", "180", "Dairy"),
    ("Desi Eggs (6)", "Free-range eggs", "270", "Dairy"),
    ("Whole Wheat Bread", "Baked every morning", "160", "Bakery"),
    ("Rusk 200g", "Crispy tea rusk", "120", "Bakery"),
    ("Bananas (1 dozen)", "Ripe local bananas", "200", "Fruits"),
    ("Apples 1kg", "Kala Kulu apples", "350", "Fruits"),
    ("Tomatoes 1kg", "Farm fresh tomatoes", "140", "Vegetables"),
    ("Onions 1kg", "Red onions", "120", "Vegetables"),
    ("Potatoes 1kg", "Washed potatoes", "100", "Vegetables"),
]


def create_container() -> ServiceContainer:
    """Create and configure the application's service container."""
    return ServiceContainer()


def register_blueprints(api_bp: Blueprint, app: Flask) -> None:
    """Register all storefront blueprints on api_bp (under /api prefix)."""
    if not api_bp._got_registered_once:  # type: ignore[attr-defined]
        from fresh_grocery.api.admin_dashboard import admin_dashboard_bp
        from fresh_grocery.api.admin_deliveries import admin_deliveries_bp
        from fresh_grocery.api.admin_orders import admin_orders_bp
        from fresh_grocery.api.admin_products import admin_products_bp
        from fresh_grocery.api.admin_riders import admin_riders_bp
        from fresh_grocery.api.admin_subscriptions import admin_subscriptions_bp
        from fresh_grocery.api.admin_users import admin_users_bp
        from fresh_grocery.api.orders import orders_bp
        from fresh_grocery.api.payment_methods import payment_methods_bp
        from fresh_grocery.api.products import products_bp
        from fresh_grocery.api.profile import profile_bp
        from fresh_grocery.api.riders import riders_bp
        from fresh_grocery.api.subscriptions import subscriptions_bp

        # Customer surface
        api_bp.register_blueprint(products_bp)
        api_bp.register_blueprint(subscriptions_bp)
        api_bp.register_blueprint(orders_bp)
        api_bp.register_blueprint(payment_methods_bp)
        api_bp.register_blueprint(profile_bp)

        # Rider surface
        api_bp.register_blueprint(riders_bp)

        # Admin surface
        api_bp.register_blueprint(admin_dashboard_bp)
        api_bp.register_blueprint(admin_products_bp)
        api_bp.register_blueprint(admin_subscriptions_bp)
        api_bp.register_blueprint(admin_orders_bp)
        api_bp.register_blueprint(admin_riders_bp)
        api_bp.register_blueprint(admin_deliveries_bp)
        api_bp.register_blueprint(admin_users_bp)


def load_test_data_hook(app: Flask) -> None:
    """Load the sample catalog after database recreation."""
    container: ServiceContainer = app.container  # type: ignore[attr-defined]
    session = container.db_session()
    try:
        product_service = container.product_service()
        for name, description, price, category in TEST_PRODUCTS:
            product_service.create(
                name=name,
                description=description,
                price_pkr=Decimal(price),
                category=category,
            )
        session.commit()
        logger.info("Loaded %d test products", len(TEST_PRODUCTS))
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        container.db_session.reset()
