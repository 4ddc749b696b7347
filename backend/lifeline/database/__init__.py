"""
Database module - MongoDB and Redis connections, collection naming and provisioning.
"""
from lifeline.database.connections import (
    get_mongo_client,
    get_redis_client,
    close_connections,
    get_database,
    ping_database,
)
from lifeline.database.databases import core_db
from lifeline.database.naming import NameRule, NameValidation, validate_collection_name
from lifeline.database.provisioner import (
    CollectionListResult,
    CollectionProvisioner,
    FailureReason,
    ProvisionOptions,
    ProvisionResult,
)

__all__ = [
    "get_mongo_client",
    "get_redis_client",
    "close_connections",
    "get_database",
    "ping_database",
    "core_db",
    "NameRule",
    "NameValidation",
    "validate_collection_name",
    "CollectionListResult",
    "CollectionProvisioner",
    "FailureReason",
    "ProvisionOptions",
    "ProvisionResult",
]
