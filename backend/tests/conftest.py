"""Shared fixtures: a throwaway SQLite database and a FastAPI test client."""
import os
import tempfile

# Settings are read at import time, so the environment goes first
_DB_DIR = tempfile.mkdtemp(prefix="opticon-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'opticon.db')}"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
for _name in ("INBOUND_WEBHOOK_SECRET", "ADMIN_API_KEY", "MAKE_WEBHOOK_URL", "PERPLEXITY_API_KEY", "REDIS_URL"):
    os.environ.pop(_name, None)

import pytest
from fastapi.testclient import TestClient

from app import models  # noqa: F401
from app.database import Base, SessionLocal, engine
from app.main import app
from app.services.accounts import create_account

OWNER_EMAIL = "owner@example.com"
OWNER_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def account(db):
    return create_account(
        db,
        email=OWNER_EMAIL,
        password=OWNER_PASSWORD,
        full_name="Ada Owner",
        company_name="Acme Analytics",
    )


@pytest.fixture
def other_account(db):
    return create_account(
        db,
        email="rival@example.com",
        password="another-secret-pw",
        full_name="Rita Rival",
        company_name="Rival Corp",
    )


@pytest.fixture
def auth_client(client, account):
    """Test client holding a live session cookie for `account`."""
    response = client.post("/api/auth/login", json={"email": OWNER_EMAIL, "password": OWNER_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def profile_payload():
    """Factory for valid /api/submit-profile bodies."""
    def build(**overrides):
        payload = {
            "business_description": "Industrial IoT sensors for cold-chain logistics",
            "topics": ["FDA cold chain rules", "Logistics market"],
            "frequency": "weekly",
            "delivery_method": "email",
            "approved_sources": [
                {"name": "FDA", "url": "https://www.fda.gov", "description": "Regulator", "suggested_by_ai": True},
                {"name": "Supply Chain Dive", "url": "https://www.supplychaindive.com"},
            ],
            "preferences": {"relevance_threshold": 6, "competitor_urls": ["https://rival.example.com"]},
        }
        payload.update(overrides)
        return payload

    return build
