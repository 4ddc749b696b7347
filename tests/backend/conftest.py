"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with a fake storage client for
the provisioner (with call counting), and API clients wired to it through
dependency overrides.
"""

import asyncio
import sys
from collections import Counter
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import CollectionInvalid

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Fake storage client
# =============================================================================

class FakeDatabase:
    """
    Stand-in for the collection-level calls the provisioner makes on a
    Motor database.

    Every call yields to the event loop once, like a real round-trip, so
    concurrent callers interleave. Set `create_error`, `list_error` or
    `drop_error` to make the next calls fail. Document operations go to
    `backing` (a mongomock-motor database) when one is given.
    """

    def __init__(self, existing=(), backing=None):
        self.collections = set(existing)
        self.calls = Counter()
        self.create_kwargs = {}
        self.create_error = None
        self.list_error = None
        self.drop_error = None
        self.backing = backing

    async def list_collection_names(self, filter=None):
        self.calls["list_collection_names"] += 1
        await asyncio.sleep(0)
        if self.list_error is not None:
            raise self.list_error
        names = sorted(self.collections)
        if filter and "name" in filter:
            names = [n for n in names if n == filter["name"]]
        return names

    async def create_collection(self, name, **kwargs):
        self.calls["create_collection"] += 1
        self.create_kwargs[name] = kwargs
        await asyncio.sleep(0)
        if self.create_error is not None:
            raise self.create_error
        if name in self.collections:
            raise CollectionInvalid(f"collection {name} already exists")
        self.collections.add(name)

    async def drop_collection(self, name):
        self.calls["drop_collection"] += 1
        await asyncio.sleep(0)
        if self.drop_error is not None:
            raise self.drop_error
        self.collections.discard(name)

    def __getitem__(self, name):
        if self.backing is None:
            raise KeyError(f"no backing database for collection {name}")
        return self.backing[name]


@pytest.fixture
def fake_db():
    """Empty fake database without document storage."""
    return FakeDatabase()


@pytest.fixture
def backed_fake_db():
    """Fake database whose collections are real mongomock-motor collections."""
    from mongomock_motor import AsyncMongoMockClient
    return FakeDatabase(backing=AsyncMongoMockClient()["lifeline"])


@pytest.fixture
def provisioner(fake_db):
    """Fresh provisioner per test."""
    from lifeline.database.provisioner import CollectionProvisioner
    return CollectionProvisioner(fake_db)


@pytest.fixture
def registry():
    """Fresh model registry per test."""
    from lifeline.services.model_registry import ModelRegistry
    return ModelRegistry()


@pytest.fixture
def backed_provisioner(backed_fake_db):
    from lifeline.database.provisioner import CollectionProvisioner
    return CollectionProvisioner(backed_fake_db)


@pytest.fixture
def model_factory(backed_provisioner, registry):
    """ModelFactory over a provisioner whose collections accept documents."""
    from lifeline.services.model_factory import ModelFactory
    return ModelFactory(backed_provisioner, registry)


# =============================================================================
# API client fixtures
# =============================================================================

def _wire(app, provisioner, registry, user):
    from lifeline.dependencies.auth import get_current_active_user
    from lifeline.dependencies.provisioning import get_model_registry, get_provisioner

    app.dependency_overrides[get_provisioner] = lambda: provisioner
    app.dependency_overrides[get_model_registry] = lambda: registry
    if user is not None:
        app.dependency_overrides[get_current_active_user] = lambda: user
    return TestClient(app)


@pytest.fixture
def admin_client(app, backed_provisioner, registry, admin_user):
    """TestClient authenticated as an administrator."""
    return _wire(app, backed_provisioner, registry, admin_user)


@pytest.fixture
def donor_client(app, backed_provisioner, registry, donor_user):
    """TestClient authenticated as a donor."""
    return _wire(app, backed_provisioner, registry, donor_user)


@pytest.fixture
def anonymous_client(app, backed_provisioner, registry):
    """TestClient with no authenticated user."""
    return _wire(app, backed_provisioner, registry, None)


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in str(data["detail"]).lower()
    return _assert
