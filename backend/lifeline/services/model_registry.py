"""
Registry of runtime-defined models.
"""
from typing import Optional

from lifeline.models.dynamic import DynamicModel, ModelSchema


class ModelConflictError(ValueError):
    """A model name is already bound to a different collection or schema."""


class ModelRegistry:
    """
    Process-wide map of model name -> DynamicModel.

    Registering a name again is idempotent when it targets the same
    collection with an equal schema: the existing accessor is returned.
    Any other re-registration raises ModelConflictError.
    """

    def __init__(self):
        self._models: dict[str, DynamicModel] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)

    def get(self, name: str) -> Optional[DynamicModel]:
        return self._models.get(name)

    def names(self) -> list[str]:
        return sorted(self._models)

    def models(self) -> list[DynamicModel]:
        return [self._models[name] for name in self.names()]

    def check(self, name: str, schema: ModelSchema, collection_name: str) -> Optional[DynamicModel]:
        """
        Return the existing accessor if an identical binding exists.

        Raises:
            ModelConflictError: If `name` is bound differently
        """
        existing = self._models.get(name)
        if existing is None:
            return None
        if existing.collection_name != collection_name:
            raise ModelConflictError(
                f"Model '{name}' is already bound to collection "
                f"'{existing.collection_name}'"
            )
        if existing.schema != schema:
            raise ModelConflictError(
                f"Model '{name}' is already registered with a different schema"
            )
        return existing

    def add(self, model: DynamicModel) -> DynamicModel:
        existing = self.check(model.name, model.schema, model.collection_name)
        if existing is not None:
            return existing
        self._models[model.name] = model
        return model

    def remove(self, name: str) -> Optional[DynamicModel]:
        return self._models.pop(name, None)
