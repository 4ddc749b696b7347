"""
Global test fixtures for Lifeline.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- User factories
- FastAPI test clients
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    from mongomock_motor import AsyncMongoMockClient
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_app_db(mock_async_mongo_client):
    """Provide the mock application database with its real indexes."""
    db = mock_async_mongo_client["lifeline"]
    await db.users.create_index("email", unique=True)
    yield db


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """
    Create an async mock Redis client using fakeredis.
    """
    import fakeredis.aioredis
    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Registration payload for a donor."""
    return {
        "name": "Test Donor",
        "email": "donor@example.com",
        "password": "SecurePassword123!",
        "password_confirm": "SecurePassword123!",
        "blood_group": "O+",
        "location": "Chennai",
        "role": "donor",
    }


@pytest.fixture
def admin_user():
    """An authenticated administrator."""
    from lifeline.models.user import User, UserRole

    return User(
        id="507f1f77bcf86cd799439011",
        name="Admin",
        email="admin@example.com",
        hashed_password="$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.qOZ3q7K9V6X6Hy",
        role=UserRole.ADMIN,
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def donor_user():
    """An authenticated donor (no admin rights)."""
    from lifeline.models.user import User, UserRole

    return User(
        id="507f1f77bcf86cd799439012",
        name="Donor",
        email="donor@example.com",
        hashed_password="$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.qOZ3q7K9V6X6Hy",
        role=UserRole.DONOR,
        blood_group="A+",
        location="Madurai",
        created_at=datetime.now(timezone.utc),
    )


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    The FastAPI app with dependency overrides cleared after each test.

    The lifespan is not run unless a test enters the TestClient context,
    so no real MongoDB or Redis connection is attempted.
    """
    from lifeline.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator:
    """Create a TestClient for the FastAPI app (lifespan not started)."""
    yield TestClient(app)
