"""Dependency injection container."""

from dependency_injector import containers, providers
from sqlalchemy.orm import sessionmaker

from fresh_grocery.app_config import AppSettings
from fresh_grocery.config import Settings
from fresh_grocery.services.auth_service import AuthService
from fresh_grocery.services.dashboard_service import DashboardService
from fresh_grocery.services.delivery_service import DeliveryService
from fresh_grocery.services.metrics_service import MetricsService
from fresh_grocery.services.order_service import OrderService
from fresh_grocery.services.product_import_service import ProductImportService
from fresh_grocery.services.product_service import ProductService
from fresh_grocery.services.profile_service import ProfileService
from fresh_grocery.services.rider_service import RiderService
from fresh_grocery.services.subscription_service import SubscriptionService


class ServiceContainer(containers.DeclarativeContainer):
    """Container for service dependency injection."""

    # Configuration providers
    config = providers.Dependency(instance_of=Settings)
    app_config = providers.Dependency(instance_of=AppSettings)
    session_maker = providers.Dependency(instance_of=sessionmaker)
    db_session = providers.ContextLocalSingleton(
        session_maker.provided.call()
    )

    # Infrastructure services
    auth_service = providers.Singleton(AuthService, config=config)
    metrics_service = providers.Singleton(MetricsService)

    # Catalog
    product_service = providers.Factory(ProductService, db=db_session)
    product_import_service = providers.Factory(ProductImportService, db=db_session)

    # Customers
    profile_service = providers.Factory(ProfileService, db=db_session, config=config)
    subscription_service = providers.Factory(
        SubscriptionService,
        db=db_session,
        app_settings=app_config,
    )

    # Fulfilment
    delivery_service = providers.Factory(
        DeliveryService,
        db=db_session,
        app_settings=app_config,
    )
    order_service = providers.Factory(
        OrderService,
        db=db_session,
        subscription_service=subscription_service,
        delivery_service=delivery_service,
    )
    rider_service = providers.Factory(
        RiderService,
        db=db_session,
        profile_service=profile_service,
    )

    dashboard_service = providers.Factory(
        DashboardService,
        product_service=product_service,
        subscription_service=subscription_service,
        order_service=order_service,
    )
