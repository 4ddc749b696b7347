"""
Tests for startup preparation and provisioning dependencies.
"""

import pytest
from fastapi import FastAPI
from unittest.mock import MagicMock
from pymongo.errors import OperationFailure


class TestRequiredCollections:
    """Tests for lifeline.database.registry."""

    @pytest.mark.asyncio
    async def test_all_required_collections_created(self, provisioner, fake_db):
        from lifeline.database.databases import core_db
        from lifeline.database.registry import ensure_required_collections

        results = await ensure_required_collections(provisioner)

        assert set(results) == set(core_db.REQUIRED_COLLECTIONS)
        assert all(r.success for r in results.values())
        assert fake_db.collections == set(core_db.REQUIRED_COLLECTIONS)

    @pytest.mark.asyncio
    async def test_existing_collections_left_alone(self, fake_db):
        from lifeline.database.databases import core_db
        from lifeline.database.provisioner import CollectionProvisioner
        from lifeline.database.registry import ensure_required_collections
        fake_db.collections.update({"users", "contacts"})

        results = await ensure_required_collections(CollectionProvisioner(fake_db))

        assert results["users"].created is False
        assert results["bloodrequests"].created is True
        assert fake_db.calls["create_collection"] == len(core_db.REQUIRED_COLLECTIONS) - 2

    @pytest.mark.asyncio
    async def test_failures_logged_not_raised(self, provisioner, fake_db, caplog):
        from lifeline.database.registry import ensure_required_collections
        fake_db.create_error = OperationFailure("not authorized", code=13)

        results = await ensure_required_collections(provisioner)

        assert not any(r.success for r in results.values())
        assert "not provisioned" in caplog.text

    @pytest.mark.asyncio
    async def test_indexes_created(self, mock_async_mongo_client):
        from lifeline.database.registry import create_indexes
        db = mock_async_mongo_client["lifeline"]

        await create_indexes(db)

        user_indexes = await db.users.index_information()
        assert any(info.get("unique") for info in user_indexes.values())


class TestProvisioningDependencies:
    """Tests for lifeline.dependencies.provisioning."""

    def _request(self, app):
        request = MagicMock()
        request.app = app
        return request

    def test_provisioner_from_app_state(self, provisioner):
        from lifeline.dependencies.provisioning import get_provisioner
        app = FastAPI()
        app.state.provisioner = provisioner

        assert get_provisioner(self._request(app)) is provisioner

    def test_provisioner_without_lifespan_reports_unavailable(self):
        from lifeline.dependencies.provisioning import get_provisioner

        provisioner = get_provisioner(self._request(FastAPI()))

        assert provisioner.db is None

    def test_registry_created_once(self):
        from lifeline.dependencies.provisioning import get_model_registry
        request = self._request(FastAPI())

        assert get_model_registry(request) is get_model_registry(request)

    @pytest.mark.asyncio
    async def test_require_collection_guard(self, provisioner, fake_db):
        from lifeline.dependencies.provisioning import require_collection
        guard = require_collection("contacts")

        assert await guard(provisioner=provisioner) == "contacts"
        assert "contacts" in fake_db.collections

    @pytest.mark.asyncio
    async def test_require_collection_guard_failure(self):
        from fastapi import HTTPException
        from lifeline.database.provisioner import CollectionProvisioner
        from lifeline.dependencies.provisioning import require_collection
        guard = require_collection("contacts")

        with pytest.raises(HTTPException) as exc_info:
            await guard(provisioner=CollectionProvisioner(None))

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail["message"] == "Failed to ensure collection exists"
