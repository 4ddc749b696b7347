"""
Compiled schemas and accessors for runtime-defined models.

A `ModelSchema` is built once from parsed field descriptors. It compiles
to a pydantic model that validates documents before they are written, and
it can render itself as a MongoDB `$jsonSchema` collection validator.
A `DynamicModel` binds a schema to a Motor collection.
"""
from datetime import datetime, timezone
from functools import partial
from typing import Annotated, Any, Literal, Optional, Union

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    create_model,
)

from lifeline.models.fields import DATE_NOW, FieldDescriptor, FieldType

CREATED_AT = "created_at"
UPDATED_AT = "updated_at"


class DocumentValidationError(ValueError):
    """A document does not satisfy its model schema."""

    def __init__(self, model_name: str, errors: list[dict[str, str]]):
        self.model_name = model_name
        self.errors = errors
        details = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"{model_name} validation failed: {details}")


def _to_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError("must be a 24 character hex ObjectId")


ObjectIdValue = Annotated[Any, BeforeValidator(_to_object_id)]

NUMBER = Union[int, float]

SCALAR_TYPES: dict[FieldType, Any] = {
    FieldType.STRING: str,
    FieldType.NUMBER: NUMBER,
    FieldType.BOOLEAN: bool,
    FieldType.DATE: datetime,
    FieldType.OBJECT_ID: ObjectIdValue,
    FieldType.MIXED: Any,
}

BSON_TYPES = {
    FieldType.STRING: "string",
    FieldType.NUMBER: ["int", "long", "double", "decimal"],
    FieldType.BOOLEAN: "bool",
    FieldType.DATE: "date",
    FieldType.OBJECT_ID: "objectId",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _annotation(descriptor: FieldDescriptor, model_name: str) -> Any:
    if descriptor.type == FieldType.OBJECT:
        annotation = _compile(descriptor.fields, model_name, timestamps=False)
    elif descriptor.enum is not None:
        annotation = Literal[tuple(descriptor.enum)]
    else:
        annotation = SCALAR_TYPES[descriptor.type]

    if descriptor.is_array:
        annotation = list[annotation]
    return annotation


def _resolve_date(value: Any) -> Any:
    if value == DATE_NOW:
        return _now()
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def _date_default(descriptor: FieldDescriptor) -> Any:
    value = descriptor.default
    if value is None:
        return None
    if descriptor.is_array:
        return [_resolve_date(item) for item in value]
    return _resolve_date(value)


def _not_null(value: Any) -> Any:
    if value is None:
        raise ValueError("field is required")
    return value


def _field_spec(name: str, descriptor: FieldDescriptor, model_name: str) -> tuple[Any, Any]:
    annotation = _annotation(descriptor, model_name)

    if descriptor.required:
        if descriptor.type == FieldType.MIXED and not descriptor.is_array:
            annotation = Annotated[Any, AfterValidator(_not_null)]
        return annotation, Field(..., alias=name)

    annotation = Optional[annotation]
    if descriptor.has_default:
        if descriptor.type == FieldType.DATE:
            # "now" is resolved per document
            return annotation, Field(default_factory=partial(_date_default, descriptor), alias=name)
        return annotation, Field(default=descriptor.default, alias=name)
    if descriptor.is_array:
        return annotation, Field(default_factory=list, alias=name)
    return annotation, Field(default=None, alias=name)


def _compile(fields: dict[str, FieldDescriptor], model_name: str, timestamps: bool) -> type[BaseModel]:
    # Field names are aliased so any storable key works, even "_meta" or "model_config"
    specs = {
        f"field_{index}": _field_spec(name, descriptor, model_name)
        for index, (name, descriptor) in enumerate(fields.items())
    }
    if timestamps:
        specs["created_at_"] = (Optional[datetime], Field(default=None, alias=CREATED_AT))
        specs["updated_at_"] = (Optional[datetime], Field(default=None, alias=UPDATED_AT))
    return create_model(
        f"{model_name}Document",
        __config__=ConfigDict(extra="ignore", arbitrary_types_allowed=True),
        **specs,
    )


def _bson_property(descriptor: FieldDescriptor) -> dict[str, Any]:
    if descriptor.type == FieldType.OBJECT:
        prop = _bson_object(descriptor.fields)
    elif descriptor.type == FieldType.MIXED:
        prop = {}
    else:
        prop = {"bsonType": BSON_TYPES[descriptor.type]}
        if descriptor.enum is not None:
            prop["enum"] = list(descriptor.enum)

    if descriptor.is_array:
        prop = {"bsonType": "array", "items": prop}
    return prop


def _bson_object(fields: dict[str, FieldDescriptor]) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "bsonType": "object",
        "properties": {name: _bson_property(d) for name, d in fields.items()},
    }
    required = [name for name, d in fields.items() if d.required]
    if required:
        schema["required"] = required
    return schema


class ModelSchema:
    """A compiled model schema."""

    def __init__(self, fields: dict[str, FieldDescriptor], timestamps: bool = True):
        self.fields = dict(fields)
        self.timestamps = timestamps
        self._document_model: Optional[type[BaseModel]] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModelSchema):
            return NotImplemented
        return self.fields == other.fields and self.timestamps == other.timestamps

    def __repr__(self) -> str:
        return f"ModelSchema(fields={list(self.fields)}, timestamps={self.timestamps})"

    def document_model(self, model_name: str = "Dynamic") -> type[BaseModel]:
        """Pydantic model used to validate documents (compiled on first use)."""
        if self._document_model is None:
            self._document_model = _compile(self.fields, model_name, self.timestamps)
        return self._document_model

    def validate(self, data: dict[str, Any], model_name: str = "Dynamic") -> dict[str, Any]:
        """
        Validate a document and apply defaults.

        Keys not declared in the schema are dropped. Optional fields that
        were neither supplied nor defaulted are left out of the result.

        Raises:
            DocumentValidationError: If the document does not match
        """
        if not isinstance(data, dict):
            raise DocumentValidationError(
                model_name, [{"field": "<root>", "message": "document must be an object"}]
            )
        try:
            parsed = self.document_model(model_name).model_validate(data)
        except ValidationError as exc:
            errors = [
                {
                    "field": ".".join(str(part) for part in error["loc"]) or "<root>",
                    "message": error["msg"],
                }
                for error in exc.errors()
            ]
            raise DocumentValidationError(model_name, errors) from exc

        document = parsed.model_dump(by_alias=True)
        for name, descriptor in self.fields.items():
            if (
                document.get(name) is None
                and name not in data
                and not descriptor.has_default
            ):
                document.pop(name, None)
        if self.timestamps:
            for key in (CREATED_AT, UPDATED_AT):
                if document.get(key) is None:
                    document.pop(key, None)
        return document

    def to_json_schema(self) -> dict[str, Any]:
        """Render the schema as a MongoDB `$jsonSchema` collection validator."""
        schema = _bson_object(self.fields)
        if self.timestamps:
            schema["properties"][CREATED_AT] = {"bsonType": "date"}
            schema["properties"][UPDATED_AT] = {"bsonType": "date"}
        return {"$jsonSchema": schema}


class DynamicModel:
    """Accessor pairing a model name, its schema and its collection."""

    def __init__(
        self,
        name: str,
        collection_name: str,
        schema: ModelSchema,
        collection: AsyncIOMotorCollection,
    ):
        self.name = name
        self.collection_name = collection_name
        self.schema = schema
        self.collection = collection

    def __repr__(self) -> str:
        return f"DynamicModel({self.name!r} -> {self.collection_name!r})"

    def validate(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.schema.validate(data, self.name)

    async def insert_one(self, data: dict[str, Any]) -> str:
        """Validate and insert a document, returning its id."""
        document = self.validate(data)
        if self.schema.timestamps:
            now = _now()
            document[CREATED_AT] = now
            document[UPDATED_AT] = now
        result = await self.collection.insert_one(document)
        return str(result.inserted_id)

    async def find_one(self, query: Optional[dict[str, Any]] = None) -> Optional[dict[str, Any]]:
        return await self.collection.find_one(query or {})

    async def find(
        self,
        query: Optional[dict[str, Any]] = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        cursor = self.collection.find(query or {}).limit(limit)
        return await cursor.to_list(length=limit)

    async def count(self, query: Optional[dict[str, Any]] = None) -> int:
        return await self.collection.count_documents(query or {})
