"""
Health check router for liveness and readiness probes.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from lifeline.database.connections import get_mongo_client, get_redis_client
from lifeline.database.databases import core_db
from lifeline.database.provisioner import CollectionProvisioner
from lifeline.dependencies.provisioning import get_provisioner

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """Returns 200 if the API process is running."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check(
    provisioner: CollectionProvisioner = Depends(get_provisioner),
):
    """
    Readiness check covering MongoDB, Redis and startup provisioning.

    `collections` is healthy once every required collection has been
    confirmed by the provisioner.
    """
    checks = {
        "api": "healthy",
        "mongodb": "unknown",
        "redis": "unknown",
        "collections": "unknown",
    }

    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        checks["mongodb"] = "healthy"
    except Exception as e:
        checks["mongodb"] = f"unhealthy: {str(e)}"

    try:
        redis = await get_redis_client()
        await redis.ping()
        checks["redis"] = "healthy"
    except Exception as e:
        checks["redis"] = f"unhealthy: {str(e)}"

    missing = [
        name for name in core_db.REQUIRED_COLLECTIONS
        if not provisioner.is_cached(name)
    ]
    if missing:
        checks["collections"] = f"unhealthy: not provisioned: {', '.join(missing)}"
    else:
        checks["collections"] = "healthy"

    all_healthy = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }
