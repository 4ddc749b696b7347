"""
Dependencies exposing the provisioner, model registry and model factory.

All three are built once in the application lifespan and kept on
`app.state`; handlers receive them through these functions so tests can
swap in fresh instances with `app.dependency_overrides`.
"""
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status

from lifeline.database.provisioner import CollectionProvisioner, ProvisionOptions
from lifeline.services.model_factory import ModelFactory
from lifeline.services.model_registry import ModelRegistry


def get_provisioner(request: Request) -> CollectionProvisioner:
    """Dependency to get the process-wide CollectionProvisioner."""
    provisioner = getattr(request.app.state, "provisioner", None)
    if provisioner is None:
        # Lifespan did not run or failed before connecting
        provisioner = CollectionProvisioner(None)
    return provisioner


def get_model_registry(request: Request) -> ModelRegistry:
    """Dependency to get the process-wide ModelRegistry."""
    registry = getattr(request.app.state, "model_registry", None)
    if registry is None:
        registry = ModelRegistry()
        request.app.state.model_registry = registry
    return registry


def get_model_factory(
    provisioner: CollectionProvisioner = Depends(get_provisioner),
    registry: ModelRegistry = Depends(get_model_registry),
) -> ModelFactory:
    """Dependency to get a ModelFactory over the shared provisioner and registry."""
    return ModelFactory(provisioner, registry)


def require_collection(
    collection_name: str,
    options: Optional[ProvisionOptions] = None,
) -> Callable:
    """
    Dependency factory guaranteeing a collection exists before the handler runs.

    Usage:
        @router.post("/contact", dependencies=[Depends(require_collection("contacts"))])
        async def create_contact(...):
            ...
    """
    async def collection_guard(
        provisioner: CollectionProvisioner = Depends(get_provisioner),
    ) -> str:
        result = await provisioner.ensure(collection_name, options)
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={
                    "message": "Failed to ensure collection exists",
                    "error": result.message,
                },
            )
        return collection_name

    return collection_guard
