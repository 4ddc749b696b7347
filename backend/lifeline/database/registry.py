"""
Startup database preparation.
Ensures the required collections exist and creates their indexes.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from lifeline.database.databases import core_db
from lifeline.database.provisioner import CollectionProvisioner, ProvisionResult

logger = logging.getLogger(__name__)


async def ensure_required_collections(
    provisioner: CollectionProvisioner,
) -> dict[str, ProvisionResult]:
    """
    Provision every collection the API depends on.

    Best-effort: a collection that fails is logged and the others are
    still created.
    """
    required = core_db.REQUIRED_COLLECTIONS
    results = await provisioner.ensure_many(required)

    success_count = sum(1 for r in results.values() if r.success)
    logger.info("Ensured %d/%d required collections exist", success_count, len(required))
    for name, result in results.items():
        if not result.success:
            logger.warning("Required collection %s not provisioned: %s", name, result.message)
    return results


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create necessary indexes on the application collections."""
    users = db[core_db.Collections.USERS]
    await users.create_index("email", unique=True)
    await users.create_index([("role", 1), ("blood_group", 1)])

    notifications = db[core_db.Collections.NOTIFICATIONS]
    await notifications.create_index([("user_id", 1), ("timestamp", -1)])

    blood_requests = db[core_db.Collections.BLOOD_REQUESTS]
    await blood_requests.create_index([("status", 1), ("blood_group", 1)])
