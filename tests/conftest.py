"""
Pytest configuration and fixtures
"""
import base64
import io
import os

# Settings are read at import time
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["API_TOKEN"] = "test-token-for-testing-only"
os.environ["AUTH_REQUIRED"] = "true"
os.environ["SIGNATURE_TARGET"] = "667"
os.environ["AUTO_CREATE_TABLES"] = "true"

import pytest
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from PIL import Image

from signvote.db.models import Base, Signature
from signvote.db.repository import SignatureRepository
from signvote.core.database import get_db
from signvote.main import app

TEST_TOKEN = "test-token-for-testing-only"


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """
    Create an in-memory SQLite database for testing

    Each test gets a fresh database with all tables created.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def repository(test_db: Session) -> SignatureRepository:
    return SignatureRepository(test_db)


@pytest.fixture(scope="function")
def client(test_db: Session) -> Generator[TestClient, None, None]:
    """
    Create FastAPI test client with the database session overridden
    """
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# AUTHENTICATION FIXTURES
# ============================================================================

@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


# ============================================================================
# TEST DATA
# ============================================================================

@pytest.fixture
def signature_png_base64() -> str:
    """Small PNG, base64 encoded, standing in for a drawn signature"""
    img = Image.new("RGBA", (8, 4), color=(0, 0, 0, 0))
    img.putpixel((1, 1), (0, 0, 0, 255))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def sample_submission(signature_png_base64: str) -> dict[str, str]:
    return {
        "signature_data": f"data:image/png;base64,{signature_png_base64}",
        "signature_name": "  Alice Example ",
        "room_number": " 12B ",
        "device_uuid": "uuid-alice",
        "device_fingerprint": "fp-alice",
    }


@pytest.fixture
def create_signature(test_db: Session):
    """
    Factory fixture for inserting Signature rows directly

    Usage:
        record = create_signature(device_uuid="u1", signature="Bob")
    """
    counter = {"n": 0}

    def _create_signature(**kwargs) -> Signature:
        counter["n"] += 1
        n = counter["n"]
        defaults = {
            "ip": "203.0.113.7",
            "device_uuid": f"uuid-{n}",
            "device_fingerprint": f"fp-{n}",
            "signature": f"Signer {n}",
            "room_number": f"{n}01",
            "signature_image": "iVBORw0KGgo=",
            "created_at": f"2025-03-0{min(n, 9)}T10:00:00.000Z",
        }
        defaults.update(kwargs)

        record = Signature(**defaults)
        test_db.add(record)
        test_db.commit()
        test_db.refresh(record)
        return record

    return _create_signature
