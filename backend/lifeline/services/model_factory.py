"""
Dynamic model factory.

Lets administrators stand up new record types at runtime: a declarative
field map becomes a compiled schema, the backing collection is provisioned,
and the resulting accessor is registered under the model name.

Registration is all-or-nothing from the caller's point of view. Nothing is
registered unless the schema compiled and the collection exists.
"""
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from lifeline.database.provisioner import (
    CollectionProvisioner,
    FailureReason,
    ProvisionOptions,
)
from lifeline.models.dynamic import CREATED_AT, UPDATED_AT, DynamicModel, ModelSchema
from lifeline.models.fields import SchemaDefinitionError, parse_fields
from lifeline.services.model_registry import ModelConflictError, ModelRegistry
from lifeline.services.model_templates import UnknownTemplateError, template_fields

logger = logging.getLogger(__name__)


class SchemaOptions(BaseModel):
    """Options applied when compiling a schema."""
    timestamps: bool = Field(
        default=True,
        description="Add created_at/updated_at to every document",
    )


class ModelOptions(BaseModel):
    """Options for creating a model."""
    schema_options: SchemaOptions = Field(default_factory=SchemaOptions)
    provision: ProvisionOptions = Field(default_factory=ProvisionOptions)
    apply_validator: bool = Field(
        default=False,
        description="Install the schema as the collection's $jsonSchema validator",
    )


class ModelResult(BaseModel):
    """Structured outcome of a model creation."""
    model_config = ConfigDict(protected_namespaces=())

    success: bool
    message: str
    model_name: Optional[str] = None
    collection_name: Optional[str] = None
    created: bool = False
    reason: Optional[FailureReason] = None
    accessor: Optional[Any] = Field(default=None, exclude=True)


class ModelDefinition(BaseModel):
    """One entry of a batch model creation."""
    model_config = ConfigDict(protected_namespaces=())

    name: str
    fields: dict[str, Any]
    collection_name: Optional[str] = None
    options: ModelOptions = Field(default_factory=ModelOptions)


def _failure(
    model_name: Any,
    collection_name: Optional[str],
    reason: FailureReason,
    message: str,
) -> ModelResult:
    return ModelResult(
        success=False,
        message=message,
        model_name=model_name if isinstance(model_name, str) else None,
        collection_name=collection_name,
        reason=reason,
    )


class ModelFactory:
    """Builds schemas and registers models against provisioned collections."""

    def __init__(self, provisioner: CollectionProvisioner, registry: ModelRegistry):
        self.provisioner = provisioner
        self.registry = registry

    @staticmethod
    def build_schema(
        definition: dict[str, Any],
        schema_options: Optional[SchemaOptions] = None,
    ) -> ModelSchema:
        """
        Compile a field map into a schema.

        Pure: performs no I/O.

        Raises:
            SchemaDefinitionError: If any field descriptor is malformed
        """
        schema_options = schema_options or SchemaOptions()
        fields = parse_fields(definition)
        if not fields:
            raise SchemaDefinitionError("Model definition must declare at least one field")
        if schema_options.timestamps:
            for reserved in (CREATED_AT, UPDATED_AT):
                if reserved in fields:
                    raise SchemaDefinitionError(
                        f"Field '{reserved}' is managed by timestamps; "
                        "set schema_options.timestamps to false to declare it"
                    )
        return ModelSchema(fields, timestamps=schema_options.timestamps)

    async def register_model(
        self,
        model_name: str,
        schema: ModelSchema,
        collection_name: Optional[str] = None,
        options: Optional[ModelOptions] = None,
    ) -> ModelResult:
        """
        Provision the collection, then bind the schema to it under `model_name`.

        Args:
            model_name: Registry key, e.g. "Widget"
            schema: Compiled schema
            collection_name: Backing collection, defaults to model_name.lower()
            options: Provisioning and validator options

        Returns:
            ModelResult carrying the accessor on success
        """
        if not isinstance(model_name, str) or not model_name.strip() or model_name.strip() != model_name:
            return _failure(
                model_name, collection_name, FailureReason.SCHEMA_INVALID,
                "Model name must be a non-empty string without surrounding spaces",
            )

        options = options or ModelOptions()
        final_collection = collection_name or model_name.lower()

        try:
            existing = self.registry.check(model_name, schema, final_collection)
        except ModelConflictError as exc:
            return _failure(model_name, final_collection, FailureReason.MODEL_CONFLICT, str(exc))
        if existing is not None:
            return ModelResult(
                success=True,
                message=f"Model '{model_name}' already registered",
                model_name=model_name,
                collection_name=final_collection,
                accessor=existing,
            )

        provision = options.provision
        if options.apply_validator:
            provision = provision.model_copy(update={"validator": schema.to_json_schema()})

        provisioned = await self.provisioner.ensure(final_collection, provision)
        if not provisioned.success:
            logger.error(
                "Failed to provision collection %s for model %s: %s",
                final_collection, model_name, provisioned.message,
            )
            return _failure(
                model_name, final_collection, provisioned.reason, provisioned.message,
            )

        accessor = DynamicModel(
            model_name,
            final_collection,
            schema,
            self.provisioner.db[final_collection],
        )
        try:
            accessor = self.registry.add(accessor)
        except ModelConflictError as exc:
            # Another registration for this name won while we were provisioning
            return _failure(model_name, final_collection, FailureReason.MODEL_CONFLICT, str(exc))

        logger.info("Created dynamic model: %s -> collection: %s", model_name, final_collection)
        return ModelResult(
            success=True,
            message=f"Model '{model_name}' created successfully",
            model_name=model_name,
            collection_name=final_collection,
            created=provisioned.created,
            accessor=accessor,
        )

    async def create_from_definition(
        self,
        model_name: str,
        field_map: dict[str, Any],
        collection_name: Optional[str] = None,
        options: Optional[ModelOptions] = None,
    ) -> ModelResult:
        """Build a schema from `field_map` and register it."""
        options = options or ModelOptions()
        try:
            schema = self.build_schema(field_map, options.schema_options)
        except SchemaDefinitionError as exc:
            return _failure(
                model_name,
                collection_name or (model_name.lower() if isinstance(model_name, str) else None),
                FailureReason.SCHEMA_INVALID,
                str(exc),
            )
        return await self.register_model(model_name, schema, collection_name, options)

    async def create_many(self, definitions: list[ModelDefinition]) -> dict[str, ModelResult]:
        """Create several models; each succeeds or fails on its own."""
        results: dict[str, ModelResult] = {}
        for definition in definitions:
            results[definition.name] = await self.create_from_definition(
                definition.name,
                definition.fields,
                definition.collection_name,
                definition.options,
            )
        return results

    async def create_from_template(
        self,
        template: str,
        name: str,
        fields: Optional[dict[str, Any]] = None,
        collection_name: Optional[str] = None,
    ) -> ModelResult:
        """Create a model from a named template extended with `fields`."""
        try:
            field_map = template_fields(template, fields)
        except UnknownTemplateError:
            return _failure(
                name,
                collection_name,
                FailureReason.SCHEMA_INVALID,
                f"Unknown template '{template}'",
            )
        return await self.create_from_definition(name, field_map, collection_name)

    async def create_simple(
        self,
        name: str,
        fields: Optional[dict[str, Any]] = None,
        collection_name: Optional[str] = None,
    ) -> ModelResult:
        return await self.create_from_template("simple", name, fields, collection_name)

    async def create_user_related(
        self,
        name: str,
        fields: Optional[dict[str, Any]] = None,
        collection_name: Optional[str] = None,
    ) -> ModelResult:
        return await self.create_from_template("userRelated", name, fields, collection_name)

    async def create_content(
        self,
        name: str,
        fields: Optional[dict[str, Any]] = None,
        collection_name: Optional[str] = None,
    ) -> ModelResult:
        return await self.create_from_template("content", name, fields, collection_name)

    async def create_transaction(
        self,
        name: str,
        fields: Optional[dict[str, Any]] = None,
        collection_name: Optional[str] = None,
    ) -> ModelResult:
        return await self.create_from_template("transaction", name, fields, collection_name)
