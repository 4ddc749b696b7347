"""
Field descriptors for runtime-defined models.

Administrators describe a record type as a JSON object mapping field names
to descriptors, in the same shapes Mongoose accepts:

    {
        "title": {"type": "String", "required": true},
        "tags": ["String"],
        "status": {"type": "String", "enum": ["open", "closed"], "default": "open"},
        "owner": {"type": "ObjectId", "ref": "User"},
        "address": {"city": "String", "zip": "String"}
    }

`parse_field` turns each entry into a `FieldDescriptor`, a tagged variant
that is checked exhaustively when it is built. Anything malformed raises
`SchemaDefinitionError` naming the offending field.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ValidationError, model_validator


class SchemaDefinitionError(ValueError):
    """A model definition contains a malformed field descriptor."""


class FieldType(str, Enum):
    """Supported field types."""
    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATE = "Date"
    OBJECT_ID = "ObjectId"
    MIXED = "Mixed"
    OBJECT = "Object"  # nested shape, see FieldDescriptor.fields


TYPE_ALIASES = {
    "string": FieldType.STRING,
    "str": FieldType.STRING,
    "number": FieldType.NUMBER,
    "int": FieldType.NUMBER,
    "float": FieldType.NUMBER,
    "boolean": FieldType.BOOLEAN,
    "bool": FieldType.BOOLEAN,
    "date": FieldType.DATE,
    "datetime": FieldType.DATE,
    "objectid": FieldType.OBJECT_ID,
    "reference": FieldType.OBJECT_ID,
    "ref": FieldType.OBJECT_ID,
    "mixed": FieldType.MIXED,
    "any": FieldType.MIXED,
    "object": FieldType.MIXED,
}

DESCRIPTOR_KEYS = frozenset({"type", "required", "default", "enum", "ref"})

# Date default meaning "time of insertion"
DATE_NOW = "now"


def _matches_type(field_type: FieldType, value: Any) -> bool:
    if field_type == FieldType.STRING:
        return isinstance(value, str)
    if field_type == FieldType.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if field_type == FieldType.BOOLEAN:
        return isinstance(value, bool)
    if field_type == FieldType.DATE:
        if isinstance(value, datetime) or value == DATE_NOW:
            return True
        if isinstance(value, str):
            try:
                datetime.fromisoformat(value)
            except ValueError:
                return False
            return True
        return False
    if field_type == FieldType.OBJECT_ID:
        return isinstance(value, ObjectId) or (
            isinstance(value, str) and ObjectId.is_valid(value)
        )
    if field_type == FieldType.MIXED:
        return True
    return False


class FieldDescriptor(BaseModel):
    """
    Declarative description of one field.

    `is_array` wraps the type: an array of strings is
    `FieldDescriptor(type=STRING, is_array=True)`. `fields` is only used by
    OBJECT and holds the nested shape.
    """
    type: FieldType
    required: bool = False
    default: Any = None
    enum: Optional[list[Any]] = None
    ref: Optional[str] = None
    is_array: bool = False
    fields: Optional[dict[str, "FieldDescriptor"]] = None

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    @model_validator(mode="after")
    def _check_consistency(self) -> "FieldDescriptor":
        if self.enum is not None:
            if self.type not in (FieldType.STRING, FieldType.NUMBER):
                raise ValueError(f"enum is not supported on {self.type.value} fields")
            if not self.enum:
                raise ValueError("enum must list at least one value")
            for value in self.enum:
                if not _matches_type(self.type, value):
                    raise ValueError(
                        f"enum value {value!r} is not a valid {self.type.value}"
                    )

        if self.ref is not None and self.type != FieldType.OBJECT_ID:
            raise ValueError("ref is only allowed on ObjectId fields")

        if self.type == FieldType.OBJECT:
            if not self.fields:
                raise ValueError("nested object must declare at least one field")
            if self.has_default:
                raise ValueError("nested object cannot declare a default")
        elif self.fields is not None:
            raise ValueError(f"{self.type.value} fields cannot declare nested fields")

        if self.has_default:
            self._check_default()
        return self

    def _check_default(self) -> None:
        value = self.default
        if value is None:
            if self.required:
                raise ValueError("required field cannot default to null")
            return

        values = value if self.is_array else [value]
        if self.is_array and not isinstance(value, list):
            raise ValueError("default of an array field must be a list")

        for item in values:
            if not _matches_type(self.type, item):
                raise ValueError(f"default {item!r} is not a valid {self.type.value}")
            if self.enum is not None and item not in self.enum:
                raise ValueError(f"default {item!r} is not one of {self.enum}")


FieldDescriptor.model_rebuild()


def _parse_type_tag(tag: str, path: str) -> tuple[FieldType, bool]:
    """Resolve a type tag such as "String", "objectid" or "[Number]"."""
    text = tag.strip()
    is_array = False
    if text.startswith("[") and text.endswith("]"):
        is_array = True
        text = text[1:-1].strip() or "Mixed"

    field_type = TYPE_ALIASES.get(text.lower())
    if field_type is None:
        raise SchemaDefinitionError(f"Field '{path}': unknown type '{tag}'")
    return field_type, is_array


def _as_array(descriptor: FieldDescriptor, path: str) -> FieldDescriptor:
    if descriptor.is_array:
        raise SchemaDefinitionError(f"Field '{path}': nested arrays are not supported")
    data = descriptor.model_dump(exclude_unset=True)
    data.pop("required", None)
    data.pop("default", None)
    data["is_array"] = True
    return _build(data, path)


def _build(data: dict[str, Any], path: str) -> FieldDescriptor:
    try:
        return FieldDescriptor(**data)
    except ValidationError as exc:
        message = exc.errors()[0]["msg"].removeprefix("Value error, ")
        raise SchemaDefinitionError(f"Field '{path}': {message}") from exc


def check_field_name(name: Any, path: str) -> None:
    if not isinstance(name, str) or not name:
        raise SchemaDefinitionError(f"Field '{path}': name must be a non-empty string")
    if name.startswith("$") or "." in name or "\0" in name:
        raise SchemaDefinitionError(
            f"Field '{path}': name cannot start with $ or contain '.'"
        )
    if name == "_id":
        raise SchemaDefinitionError("Field '_id' is reserved")


def parse_fields(raw: Any, prefix: str = "") -> dict[str, FieldDescriptor]:
    """Parse a whole field map; keys keep their input order."""
    if not isinstance(raw, dict):
        raise SchemaDefinitionError(
            f"Field '{prefix or '<root>'}': definition must be an object"
        )
    parsed = {}
    for name, value in raw.items():
        path = f"{prefix}.{name}" if prefix else str(name)
        check_field_name(name, path)
        parsed[name] = parse_field(path, value)
    return parsed


def parse_field(path: str, raw: Any) -> FieldDescriptor:
    """
    Parse one field descriptor in any of the accepted JSON shapes.

    Args:
        path: Dotted field path, used in error messages
        raw: Type tag, descriptor mapping, one-element list or nested mapping

    Returns:
        Validated FieldDescriptor

    Raises:
        SchemaDefinitionError: If the descriptor is malformed
    """
    if isinstance(raw, FieldDescriptor):
        return raw

    if isinstance(raw, str):
        field_type, is_array = _parse_type_tag(raw, path)
        return _build({"type": field_type, "is_array": is_array}, path)

    if isinstance(raw, list):
        if len(raw) == 0:
            return _build({"type": FieldType.MIXED, "is_array": True}, path)
        if len(raw) > 1:
            raise SchemaDefinitionError(
                f"Field '{path}': array shorthand takes exactly one element type"
            )
        return _as_array(parse_field(path, raw[0]), path)

    if not isinstance(raw, dict):
        raise SchemaDefinitionError(
            f"Field '{path}': descriptor must be a type name, list or object"
        )

    type_value = raw.get("type")
    if type_value is None or isinstance(type_value, dict):
        # No usable "type" key: this is a nested shape
        if not raw:
            raise SchemaDefinitionError(f"Field '{path}': empty descriptor")
        return _build({"type": FieldType.OBJECT, "fields": parse_fields(raw, path)}, path)

    unknown = set(raw) - DESCRIPTOR_KEYS
    if unknown:
        raise SchemaDefinitionError(
            f"Field '{path}': unknown descriptor keys {sorted(unknown)}"
        )

    nested = None
    if isinstance(type_value, list):
        element = parse_field(path, type_value)
        field_type, is_array, nested = element.type, True, element.fields
    elif isinstance(type_value, str):
        field_type, is_array = _parse_type_tag(type_value, path)
    else:
        raise SchemaDefinitionError(f"Field '{path}': type must be a string")

    required = raw.get("required", False)
    if not isinstance(required, bool):
        raise SchemaDefinitionError(f"Field '{path}': required must be true or false")

    data: dict[str, Any] = {
        "type": field_type,
        "required": required,
        "is_array": is_array,
    }
    if nested is not None:
        data["fields"] = nested
    for key in ("default", "enum", "ref"):
        if key in raw:
            data[key] = raw[key]
    return _build(data, path)
