"""Pytest configuration and fixtures."""

import sqlite3
import time
from collections.abc import Callable, Generator
from typing import Any

import jwt
import pytest
from flask import Flask
from prometheus_client import REGISTRY
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from fresh_grocery import create_app
from fresh_grocery.app_config import AppSettings
from fresh_grocery.config import Settings
from fresh_grocery.database import upgrade_database
from fresh_grocery.services.container import ServiceContainer

TEST_JWT_SECRET = "test-jwt-secret"
ADMIN_EMAIL = "admin@example.com"


@pytest.fixture(autouse=True)
def clear_prometheus_registry():
    """Clear Prometheus registry before and after each test to ensure isolation."""
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        try:
            REGISTRY.unregister(collector)
        except (KeyError, ValueError):
            pass
    yield
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        try:
            REGISTRY.unregister(collector)
        except (KeyError, ValueError):
            pass


def _build_test_settings() -> Settings:
    """Construct base Settings object for tests."""
    return Settings(
        database_url="sqlite:///:memory:",
        secret_key="test-secret-key",
        debug=True,
        flask_env="testing",
        cors_origins=["http://localhost:3000"],

        # Database pool
        db_pool_size=20,
        db_pool_max_overflow=30,
        db_pool_timeout=10,
        db_pool_echo=False,

        # Auth
        auth_jwt_secret=TEST_JWT_SECRET,
        auth_jwt_audience="authenticated",
        auth_jwt_issuer=None,
        auth_clock_skew_seconds=30,
        auth_cookie_name="access_token",
        admin_emails=[ADMIN_EMAIL],
    )


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with in-memory database."""
    return _build_test_settings()


@pytest.fixture
def test_app_settings() -> AppSettings:
    """Business settings with deliveries scheduled in UTC."""
    return AppSettings(delivery_timezone="UTC")


@pytest.fixture(scope="session")
def template_connection() -> Generator[sqlite3.Connection, None, None]:
    """Create a template SQLite database once and build the schema."""
    conn = sqlite3.connect(":memory:", check_same_thread=False)

    settings = _build_test_settings().model_copy(update={
        "database_url": "sqlite://",
        "sqlalchemy_engine_options": {
            "poolclass": StaticPool,
            "creator": lambda: conn,
        },
    })

    template_app = create_app(settings, AppSettings(delivery_timezone="UTC"))
    with template_app.app_context():
        upgrade_database(recreate=True)

    yield conn

    conn.close()


@pytest.fixture
def app(
    test_settings: Settings,
    test_app_settings: AppSettings,
    template_connection: sqlite3.Connection,
) -> Generator[Flask, None, None]:
    """Create Flask app for testing using a fresh copy of the template database."""
    clone_conn = sqlite3.connect(":memory:", check_same_thread=False)
    template_connection.backup(clone_conn)

    settings = test_settings.model_copy(update={
        "database_url": "sqlite://",
        "sqlalchemy_engine_options": {
            "poolclass": StaticPool,
            "creator": lambda: clone_conn,
        },
    })

    app = create_app(settings, test_app_settings)

    try:
        yield app
    finally:
        with app.app_context():
            from fresh_grocery.extensions import db as flask_db
            flask_db.session.remove()

        clone_conn.close()


@pytest.fixture
def session(container: ServiceContainer) -> Generator[Session, None, None]:
    """Create a new database session for a test."""
    session = container.db_session()

    exc = None
    try:
        yield session
    except Exception as e:
        exc = e

    if exc:
        session.rollback()
    else:
        session.commit()
    session.close()

    container.db_session.reset()


@pytest.fixture
def client(app: Flask):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def container(app: Flask):
    """Access to the DI container for testing."""
    container = app.container

    with app.app_context():
        from sqlalchemy.orm import sessionmaker

        from fresh_grocery.extensions import db as flask_db

        SessionLocal = sessionmaker(
            bind=flask_db.engine, autoflush=True, expire_on_commit=False
        )

    container.session_maker.override(SessionLocal)

    return container


@pytest.fixture
def generate_test_jwt() -> Callable[..., str]:
    """Factory fixture to generate HS256 tokens like the identity service issues."""

    def _generate(
        subject: str = "test-user",
        email: str | None = "test@example.com",
        name: str | None = "Test User",
        expired: bool = False,
        invalid_signature: bool = False,
        audience: str = "authenticated",
    ) -> str:
        now = int(time.time())
        exp = now - 3600 if expired else now + 3600

        payload: dict[str, Any] = {
            "sub": subject,
            "aud": audience,
            "exp": exp,
            "iat": now,
            "role": "authenticated",
        }
        if email:
            payload["email"] = email
        if name:
            payload["user_metadata"] = {"full_name": name}

        secret = "not-the-signing-secret" if invalid_signature else TEST_JWT_SECRET
        return jwt.encode(payload, secret, algorithm="HS256")

    return _generate


@pytest.fixture
def auth_headers(generate_test_jwt: Callable[..., str]) -> Callable[..., dict[str, str]]:
    """Factory for Authorization headers carrying a freshly signed token."""

    def _headers(subject: str = "test-user", email: str | None = "test@example.com", **kwargs: Any) -> dict[str, str]:
        token = generate_test_jwt(subject=subject, email=email, **kwargs)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def user_headers(auth_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    """Headers for a regular customer (subject ``customer-1``)."""
    return auth_headers(subject="customer-1", email="customer@example.com")


@pytest.fixture
def admin_headers(auth_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    """Headers for a user whose email is listed in ADMIN_EMAILS."""
    return auth_headers(subject="admin-1", email=ADMIN_EMAIL)


@pytest.fixture
def rider_headers(auth_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    """Headers for ``rider-1``. Pair with testing_utils.make_rider."""
    return auth_headers(subject="rider-1", email="rider@example.com")
