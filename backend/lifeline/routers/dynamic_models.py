"""
Dynamic models router: create record types at runtime.
"""
from fastapi import APIRouter, Depends, status

from lifeline.core.errors import failure_response
from lifeline.dependencies.auth import get_current_active_user
from lifeline.dependencies.provisioning import get_model_factory, get_model_registry
from lifeline.dependencies.roles import require_admin
from lifeline.schemas.dynamic_models import (
    DynamicModelBatchCreate,
    DynamicModelBatchResponse,
    DynamicModelCreate,
    DynamicModelResponse,
    RegisteredModel,
    TemplateInfo,
    TemplateModelCreate,
)
from lifeline.services.model_factory import ModelFactory, ModelResult
from lifeline.services.model_registry import ModelRegistry
from lifeline.services.model_templates import TEMPLATES

router = APIRouter(prefix="/api/dynamic-models", tags=["Dynamic Models"])


def _created(result: ModelResult):
    if not result.success:
        return failure_response(result)
    return DynamicModelResponse(
        message=result.message,
        model_name=result.model_name,
        collection_name=result.collection_name,
    )


@router.post(
    "",
    response_model=DynamicModelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create model from definition",
    dependencies=[Depends(require_admin())],
)
async def create_dynamic_model(
    body: DynamicModelCreate,
    factory: ModelFactory = Depends(get_model_factory),
):
    """
    Create a new model from a field definition (admin only).

    - **name**: Model name
    - **schema**: Field name -> descriptor, e.g. `{"title": {"type": "String", "required": true}}`
    - **collection_name**: Optional, defaults to the lower-cased model name
    - **options**: schema_options.timestamps, provision options, apply_validator
    """
    result = await factory.create_from_definition(
        body.name, body.definition, body.collection_name, body.options,
    )
    return _created(result)


@router.post(
    "/batch",
    response_model=DynamicModelBatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create several models",
    dependencies=[Depends(require_admin())],
)
async def create_dynamic_models_batch(
    body: DynamicModelBatchCreate,
    factory: ModelFactory = Depends(get_model_factory),
):
    """Create multiple models; each one succeeds or fails on its own (admin only)."""
    results = await factory.create_many(body.models)
    success_count = sum(1 for r in results.values() if r.success)
    return DynamicModelBatchResponse(
        success=success_count == len(results),
        message=f"Created {success_count}/{len(results)} models",
        results=results,
    )


@router.post(
    "/simple",
    response_model=DynamicModelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create simple model",
    dependencies=[Depends(require_admin())],
)
async def create_simple_model(
    body: TemplateModelCreate,
    factory: ModelFactory = Depends(get_model_factory),
):
    """Create a model with name, description and isActive fields plus `fields`."""
    result = await factory.create_simple(body.name, body.fields, body.collection_name)
    return _created(result)


@router.post(
    "/user-related",
    response_model=DynamicModelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user-related model",
    dependencies=[Depends(require_admin())],
)
async def create_user_related_model(
    body: TemplateModelCreate,
    factory: ModelFactory = Depends(get_model_factory),
):
    """Create a model with userId/createdBy/updatedBy references plus `fields`."""
    result = await factory.create_user_related(body.name, body.fields, body.collection_name)
    return _created(result)


@router.post(
    "/content",
    response_model=DynamicModelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create content model",
    dependencies=[Depends(require_admin())],
)
async def create_content_model(
    body: TemplateModelCreate,
    factory: ModelFactory = Depends(get_model_factory),
):
    """Create a post/article style model plus `fields`."""
    result = await factory.create_content(body.name, body.fields, body.collection_name)
    return _created(result)


@router.post(
    "/transaction",
    response_model=DynamicModelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create transaction model",
    dependencies=[Depends(require_admin())],
)
async def create_transaction_model(
    body: TemplateModelCreate,
    factory: ModelFactory = Depends(get_model_factory),
):
    """Create a transaction/audit model plus `fields`."""
    result = await factory.create_transaction(body.name, body.fields, body.collection_name)
    return _created(result)


@router.get(
    "",
    response_model=list[RegisteredModel],
    summary="List registered models",
    dependencies=[Depends(require_admin())],
)
async def list_dynamic_models(
    registry: ModelRegistry = Depends(get_model_registry),
):
    """List the models registered in this process (admin only)."""
    return [
        RegisteredModel(
            model_name=model.name,
            collection_name=model.collection_name,
            fields=list(model.schema.fields),
            timestamps=model.schema.timestamps,
        )
        for model in registry.models()
    ]


@router.get(
    "/templates",
    response_model=dict[str, TemplateInfo],
    summary="Get model templates",
    dependencies=[Depends(get_current_active_user)],
)
async def get_templates():
    """Describe the available model templates."""
    return {
        name: TemplateInfo(description=t["description"], fields=t["fields"])
        for name, t in TEMPLATES.items()
    }
