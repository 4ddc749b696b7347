"""
Collections router for administrative collection management.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from lifeline.core.errors import failure_response
from lifeline.database.naming import validate_collection_name
from lifeline.database.provisioner import CollectionProvisioner, ProvisionResult
from lifeline.dependencies.auth import get_current_active_user
from lifeline.dependencies.provisioning import get_provisioner
from lifeline.dependencies.roles import require_admin
from lifeline.schemas.collections import (
    CollectionBatchCreate,
    CollectionBatchResponse,
    CollectionCreate,
    CollectionListResponse,
    NameValidationRequest,
    NameValidationResponse,
)

router = APIRouter(prefix="/api/collections", tags=["Collections"])


@router.get(
    "",
    response_model=CollectionListResponse,
    summary="List collections",
    dependencies=[Depends(require_admin())],
)
async def list_collections(
    provisioner: CollectionProvisioner = Depends(get_provisioner),
):
    """
    List every collection in the database (admin only).

    Always reads from MongoDB, not from the provisioning cache.
    """
    result = await provisioner.list_collections()
    if not result.success:
        return failure_response(result)

    return CollectionListResponse(
        collections=result.collections,
        count=len(result.collections),
    )


@router.post(
    "",
    response_model=ProvisionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create collection",
    dependencies=[Depends(require_admin())],
)
async def create_collection(
    body: CollectionCreate,
    provisioner: CollectionProvisioner = Depends(get_provisioner),
):
    """
    Create a collection (admin only).

    - **name**: Collection name
    - **options**: validator, validation_level, validation_action, extra

    Returns 201 when the collection was created, 200 when it already existed.
    """
    result = await provisioner.ensure(body.name, body.options)
    if not result.success:
        return failure_response(result)
    if not result.created:
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.model_dump(mode="json"))
    return result


@router.post(
    "/batch",
    response_model=CollectionBatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create several collections",
    dependencies=[Depends(require_admin())],
)
async def create_collections_batch(
    body: CollectionBatchCreate,
    provisioner: CollectionProvisioner = Depends(get_provisioner),
):
    """
    Create multiple collections at once (admin only).

    Each name is handled independently; failures are reported per name
    and never hide the collections that succeeded.
    """
    results = await provisioner.ensure_many(body.names, body.options)
    success_count = sum(1 for r in results.values() if r.success)

    return CollectionBatchResponse(
        success=success_count == len(results),
        message=f"Created {success_count}/{len(results)} collections",
        results=results,
    )


@router.post(
    "/ensure",
    response_model=ProvisionResult,
    summary="Ensure collection exists",
    dependencies=[Depends(get_current_active_user)],
)
async def ensure_collection(
    body: CollectionCreate,
    provisioner: CollectionProvisioner = Depends(get_provisioner),
):
    """
    Ensure a collection exists, creating it if it doesn't.

    Available to any authenticated user.
    """
    result = await provisioner.ensure(body.name, body.options)
    if not result.success:
        return failure_response(result)
    return result


@router.delete(
    "/{name}",
    response_model=ProvisionResult,
    summary="Drop collection",
    dependencies=[Depends(require_admin())],
)
async def drop_collection(
    name: str,
    provisioner: CollectionProvisioner = Depends(get_provisioner),
):
    """Drop a collection (admin only). Returns 404 if it does not exist."""
    result = await provisioner.drop(name)
    if not result.success:
        return failure_response(result)
    return result


@router.post(
    "/validate",
    response_model=NameValidationResponse,
    summary="Validate collection name",
)
async def validate_name(body: NameValidationRequest):
    """Check a candidate collection name without touching the database."""
    validation = validate_collection_name(body.name)
    return NameValidationResponse(
        is_valid=validation.valid,
        rule=validation.rule,
        error=validation.message,
    )
