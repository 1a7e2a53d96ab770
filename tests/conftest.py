import os


def _set_test_env() -> None:
    defaults = {
        "APP_NAME": "Partner Portal Test",
        "ENVIRONMENT": "test",
        "PASSWORD_BCRYPT_ROUNDS": "4",
        "SESSION_TTL_MINUTES": "120",
        "RATE_LIMIT_ENABLED": "false",
        "AUTO_CREATE_TABLES": "false",
        "SEED_ON_STARTUP": "false",
        "DATABASE_URL": "sqlite://",
        "EMAIL_PROVIDER": "console",
        "SEND_CREDENTIALS_EMAIL": "false",
        "FRONTEND_BASE_URL": "https://portal.example.com",
        "CORS_ORIGINS": "http://localhost:5173,http://localhost:3000",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


_set_test_env()

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from partner_portal.core.database import Base, get_db
from partner_portal.main import app
from partner_portal.services.permissions import seed_permissions
from partner_portal.services.roles import seed_default_roles


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def seeded(db):
    seed_permissions(db)
    seed_default_roles(db)
    return db


@pytest.fixture
def client(db):
    app.dependency_overrides.clear()

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


