"""Flask application factory."""

from flask import g
from flask_cors import CORS

from fresh_grocery.app import App
from fresh_grocery.app_config import AppSettings
from fresh_grocery.config import Settings
from fresh_grocery.extensions import db


def create_app(
    settings: "Settings | None" = None,
    app_settings: "AppSettings | None" = None,
) -> App:
    """Create and configure the Flask application.

    App-specific wiring goes through the hooks in fresh_grocery/startup.py:
    - create_container(): builds the DI container
    - register_blueprints(): registers the storefront blueprints on /api
    """
    app = App(__name__)

    # Load configuration
    if settings is None:
        settings = Settings.load()

    # Validate configuration before proceeding
    settings.validate_production_config()

    app.config.from_object(settings.to_flask_config())

    # Initialize extensions
    db.init_app(app)

    # Import models to register them with SQLAlchemy
    from fresh_grocery import models  # noqa: F401

    # Per-request sessions need db.engine, which requires an app context
    with app.app_context():
        from sqlalchemy.orm import Session, sessionmaker

        SessionLocal: sessionmaker[Session] = sessionmaker(
            class_=Session,
            bind=db.engine,
            autoflush=True,
            expire_on_commit=False,
        )

    # Initialize SpecTree for OpenAPI docs
    from fresh_grocery.utils.spectree_config import configure_spectree

    configure_spectree(app)

    # --- Hook 1: Create service container ---
    from fresh_grocery.startup import create_container

    if app_settings is None:
        app_settings = AppSettings.load()

    container = create_container()
    container.config.override(settings)
    container.app_config.override(app_settings)
    container.session_maker.override(SessionLocal)

    # Wire container to all API modules via package scanning
    container.wire(packages=["fresh_grocery.api"])

    app.container = container

    # Configure CORS
    CORS(app, origins=settings.cors_origins, supports_credentials=True)

    # Initialize correlation ID tracking
    from fresh_grocery.utils import _init_request_id

    _init_request_id(app)

    # Register error handlers
    from fresh_grocery.utils.flask_error_handlers import (
        register_business_error_handlers,
        register_core_error_handlers,
    )

    register_core_error_handlers(app)
    register_business_error_handlers(app)

    # Register main API blueprint (includes the authentication hook)
    from fresh_grocery.api import api_bp

    # --- Hook 2: Storefront blueprint registrations ---
    from fresh_grocery.startup import register_blueprints

    register_blueprints(api_bp, app)

    app.register_blueprint(api_bp)

    # Probes and metrics sit outside /api and need no authentication
    from fresh_grocery.api.health import health_bp
    from fresh_grocery.api.metrics import metrics_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_bp)

    # Fail fast on a typo in an @allow_roles decorator
    from fresh_grocery.utils.auth import validate_allow_roles_at_startup

    validate_allow_roles_at_startup(app, container.auth_service())

    @app.teardown_request
    def close_session(exc: Exception | None) -> None:
        """Commit or roll back the request's session, then close it.

        Flask does not pass handled exceptions to teardown_request, so error
        handlers set ``g.needs_rollback`` instead.
        """
        try:
            db_session = container.db_session()

            needs_rollback = exc or getattr(g, "needs_rollback", False)
            if needs_rollback:
                db_session.rollback()
            else:
                db_session.commit()

            db_session.close()

        finally:
            container.db_session.reset()

    return app
