"""
Collection provisioning.

Guarantees that a named collection exists in MongoDB before anything uses
it, creating it on demand. Every distinct name costs at most one
existence check per process: names confirmed to exist are remembered in
an in-memory cache owned by the provisioner instance.
"""
import logging
from enum import Enum
from typing import Any, Literal, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field
from pymongo.errors import (
    CollectionInvalid,
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
)

from lifeline.database.naming import NameRule, validate_collection_name

logger = logging.getLogger(__name__)

# Server error code for "collection already exists"
NAMESPACE_EXISTS = 48


class FailureReason(str, Enum):
    """Why a provisioning or model operation failed."""
    INVALID_NAME = "invalid_name"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    STORAGE_ERROR = "storage_error"
    NOT_FOUND = "not_found"
    SCHEMA_INVALID = "schema_invalid"
    MODEL_CONFLICT = "model_conflict"


class ProvisionOptions(BaseModel):
    """Options forwarded to `create_collection`."""
    validator: dict[str, Any] = Field(
        default_factory=dict,
        description="MongoDB document validator, e.g. a $jsonSchema",
    )
    validation_level: Literal["off", "strict", "moderate"] = "strict"
    validation_action: Literal["error", "warn"] = "error"
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Engine-specific options passed through verbatim",
    )

    def to_create_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "validationLevel": self.validation_level,
            "validationAction": self.validation_action,
        }
        if self.validator:
            kwargs["validator"] = self.validator
        kwargs.update(self.extra)
        return kwargs


class ProvisionResult(BaseModel):
    """Structured outcome of ensure/drop."""
    success: bool
    message: str
    collection_name: Optional[str] = None
    created: bool = False
    reason: Optional[FailureReason] = None
    rule: Optional[NameRule] = None


class CollectionListResult(BaseModel):
    """Structured outcome of listing collections."""
    success: bool
    collections: list[str] = Field(default_factory=list)
    message: Optional[str] = None
    reason: Optional[FailureReason] = None


def _storage_failure(name: Optional[str], action: str, exc: PyMongoError) -> ProvisionResult:
    if isinstance(exc, ConnectionFailure):
        reason = FailureReason.STORAGE_UNAVAILABLE
    else:
        reason = FailureReason.STORAGE_ERROR
    return ProvisionResult(
        success=False,
        message=f"Failed to {action} collection: {exc}",
        collection_name=name,
        reason=reason,
    )


def _is_benign_duplicate(exc: PyMongoError) -> bool:
    if isinstance(exc, CollectionInvalid):
        return True
    return isinstance(exc, OperationFailure) and exc.code == NAMESPACE_EXISTS


class CollectionProvisioner:
    """
    Creates collections on demand and remembers which ones exist.

    One instance is built at startup and injected wherever collections
    need to be guaranteed. The cache is only mutated by `ensure` and
    `drop`, and only after the server confirmed the state change.
    """

    def __init__(self, db: Optional[AsyncIOMotorDatabase]):
        """Initialize with the application database (None when unavailable)."""
        self.db = db
        self._known: set[str] = set()

    def is_cached(self, name: str) -> bool:
        return name in self._known

    def cached_names(self) -> list[str]:
        return sorted(self._known)

    def _unavailable(self, name: Optional[str] = None) -> ProvisionResult:
        return ProvisionResult(
            success=False,
            message="Database connection not available",
            collection_name=name,
            reason=FailureReason.STORAGE_UNAVAILABLE,
        )

    async def _exists(self, name: str) -> bool:
        names = await self.db.list_collection_names(filter={"name": name})
        return name in names

    async def ensure(
        self,
        name: str,
        options: Optional[ProvisionOptions] = None,
    ) -> ProvisionResult:
        """
        Make sure a collection exists, creating it if needed.

        Args:
            name: Collection name
            options: Creation options (validator, validation level/action)

        Returns:
            ProvisionResult; `created` is True only when this call created it
        """
        validation = validate_collection_name(name)
        if not validation.valid:
            return ProvisionResult(
                success=False,
                message=validation.message,
                collection_name=name if isinstance(name, str) else None,
                reason=FailureReason.INVALID_NAME,
                rule=validation.rule,
            )

        if name in self._known:
            return ProvisionResult(
                success=True,
                message=f"Collection '{name}' already exists in this session",
                collection_name=name,
            )

        if self.db is None:
            return self._unavailable(name)

        options = options or ProvisionOptions()

        try:
            if await self._exists(name):
                self._known.add(name)
                return ProvisionResult(
                    success=True,
                    message=f"Collection '{name}' already exists in database",
                    collection_name=name,
                )

            await self.db.create_collection(name, **options.to_create_kwargs())
        except PyMongoError as exc:
            if _is_benign_duplicate(exc):
                # Lost a creation race; the collection exists all the same
                logger.debug("Collection %s was created concurrently", name)
                self._known.add(name)
                return ProvisionResult(
                    success=True,
                    message=f"Collection '{name}' already exists in database",
                    collection_name=name,
                )
            logger.error("Failed to create collection %s: %s", name, exc)
            return _storage_failure(name, "create", exc)

        self._known.add(name)
        logger.info("Created collection: %s", name)
        return ProvisionResult(
            success=True,
            message=f"Collection '{name}' created successfully",
            collection_name=name,
            created=True,
        )

    async def ensure_many(
        self,
        names: list[str],
        options: Optional[ProvisionOptions] = None,
    ) -> dict[str, ProvisionResult]:
        """Ensure each collection independently; one failure never stops the rest."""
        results: dict[str, ProvisionResult] = {}
        for name in names:
            if name in results:
                continue
            results[name] = await self.ensure(name, options)
        return results

    async def list_collections(self) -> CollectionListResult:
        """List every collection in the database, straight from the server."""
        if self.db is None:
            return CollectionListResult(
                success=False,
                message="Database connection not available",
                reason=FailureReason.STORAGE_UNAVAILABLE,
            )

        try:
            names = await self.db.list_collection_names()
        except PyMongoError as exc:
            logger.error("Failed to list collections: %s", exc)
            failure = _storage_failure(None, "list", exc)
            return CollectionListResult(
                success=False,
                message=failure.message,
                reason=failure.reason,
            )

        return CollectionListResult(success=True, collections=sorted(names))

    async def drop(self, name: str) -> ProvisionResult:
        """
        Drop a collection and forget it.

        The cache entry is only removed once the server confirmed the
        collection is gone; on a storage error it is left as it was.
        """
        validation = validate_collection_name(name)
        if not validation.valid:
            return ProvisionResult(
                success=False,
                message=validation.message,
                collection_name=name if isinstance(name, str) else None,
                reason=FailureReason.INVALID_NAME,
                rule=validation.rule,
            )

        if self.db is None:
            return self._unavailable(name)

        try:
            if not await self._exists(name):
                self._known.discard(name)
                return ProvisionResult(
                    success=False,
                    message=f"Collection '{name}' does not exist",
                    collection_name=name,
                    reason=FailureReason.NOT_FOUND,
                )
            await self.db.drop_collection(name)
        except PyMongoError as exc:
            logger.error("Failed to drop collection %s: %s", name, exc)
            return _storage_failure(name, "drop", exc)

        self._known.discard(name)
        logger.info("Dropped collection: %s", name)
        return ProvisionResult(
            success=True,
            message=f"Collection '{name}' dropped successfully",
            collection_name=name,
        )
