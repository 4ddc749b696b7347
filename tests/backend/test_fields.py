"""
Tests for field descriptor parsing.

These tests cover:
- Accepted descriptor shapes (tags, mappings, arrays, nested objects)
- Consistency checks (enum, ref, default)
- Malformed descriptors and field names
"""

import pytest


# =============================================================================
# Accepted shapes
# =============================================================================

class TestParseFieldShapes:
    """Each accepted JSON shape parses to the expected descriptor."""

    def test_bare_type_tag(self):
        from lifeline.models.fields import FieldType, parse_field

        field = parse_field("title", "String")

        assert field.type == FieldType.STRING
        assert field.required is False
        assert field.is_array is False
        assert field.has_default is False

    @pytest.mark.parametrize("tag, expected", [
        ("string", "String"),
        ("Number", "Number"),
        ("int", "Number"),
        ("bool", "Boolean"),
        ("datetime", "Date"),
        ("ObjectId", "ObjectId"),
        ("ref", "ObjectId"),
        ("Mixed", "Mixed"),
        ("object", "Mixed"),
    ])
    def test_type_aliases(self, tag, expected):
        from lifeline.models.fields import parse_field

        assert parse_field("f", tag).type.value == expected

    def test_descriptor_mapping(self):
        from lifeline.models.fields import FieldType, parse_field

        field = parse_field("status", {
            "type": "String",
            "required": True,
            "enum": ["open", "closed"],
            "default": "open",
        })

        assert field.type == FieldType.STRING
        assert field.required is True
        assert field.enum == ["open", "closed"]
        assert field.default == "open"
        assert field.has_default is True

    def test_reference_field(self):
        from lifeline.models.fields import FieldType, parse_field

        field = parse_field("owner", {"type": "ObjectId", "ref": "User"})

        assert field.type == FieldType.OBJECT_ID
        assert field.ref == "User"

    @pytest.mark.parametrize("raw", [
        ["String"],
        "[String]",
        {"type": "[String]"},
        {"type": ["String"]},
    ])
    def test_array_shapes(self, raw):
        """All array spellings produce an array of strings."""
        from lifeline.models.fields import FieldType, parse_field

        field = parse_field("tags", raw)

        assert field.type == FieldType.STRING
        assert field.is_array is True

    def test_empty_list_is_mixed_array(self):
        from lifeline.models.fields import FieldType, parse_field

        field = parse_field("anything", [])

        assert field.type == FieldType.MIXED
        assert field.is_array is True

    def test_nested_object(self):
        from lifeline.models.fields import FieldType, parse_field

        field = parse_field("address", {"city": "String", "zip": {"type": "String", "required": True}})

        assert field.type == FieldType.OBJECT
        assert list(field.fields) == ["city", "zip"]
        assert field.fields["zip"].required is True

    def test_array_of_nested_objects(self):
        from lifeline.models.fields import FieldType, parse_field

        field = parse_field("contacts", [{"phone": "String"}])

        assert field.type == FieldType.OBJECT
        assert field.is_array is True
        assert list(field.fields) == ["phone"]

    def test_field_named_type_inside_nested_object(self):
        """A nested key called "type" holding a mapping is a field, not a tag."""
        from lifeline.models.fields import FieldType, parse_field

        field = parse_field("payment", {"type": {"type": "String"}, "amount": "Number"})

        assert field.type == FieldType.OBJECT
        assert field.fields["type"].type == FieldType.STRING

    def test_parse_fields_keeps_order(self):
        from lifeline.models.fields import parse_fields

        fields = parse_fields({"b": "String", "a": "Number", "c": "Boolean"})

        assert list(fields) == ["b", "a", "c"]


# =============================================================================
# Consistency checks
# =============================================================================

class TestDescriptorConsistency:
    """Descriptors that parse but make no sense are rejected."""

    @pytest.mark.parametrize("raw, fragment", [
        ({"type": "Boolean", "enum": [True]}, "enum is not supported"),
        ({"type": "String", "enum": []}, "at least one value"),
        ({"type": "String", "enum": ["a", 1]}, "not a valid String"),
        ({"type": "String", "ref": "User"}, "ref is only allowed"),
        ({"type": "Number", "default": "zero"}, "not a valid Number"),
        ({"type": "Boolean", "default": 1}, "not a valid Boolean"),
        ({"type": "String", "enum": ["a", "b"], "default": "c"}, "not one of"),
        ({"type": "String", "required": True, "default": None}, "cannot default to null"),
        ({"type": "Date", "default": "yesterday"}, "not a valid Date"),
        ({"type": "ObjectId", "default": "xyz"}, "not a valid ObjectId"),
        ({"type": "[String]", "default": "a"}, "must be a list"),
    ])
    def test_inconsistent_descriptor_rejected(self, raw, fragment):
        from lifeline.models.fields import SchemaDefinitionError, parse_field

        with pytest.raises(SchemaDefinitionError) as exc_info:
            parse_field("f", raw)

        assert fragment in str(exc_info.value)
        assert "Field 'f'" in str(exc_info.value)

    @pytest.mark.parametrize("default", ["now", "2024-01-01T00:00:00"])
    def test_date_defaults_accepted(self, default):
        from lifeline.models.fields import parse_field

        field = parse_field("when", {"type": "Date", "default": default})

        assert field.default == default

    def test_array_default_list(self):
        from lifeline.models.fields import parse_field

        field = parse_field("tags", {"type": "[String]", "default": ["a", "b"]})

        assert field.default == ["a", "b"]


# =============================================================================
# Malformed input
# =============================================================================

class TestMalformedDescriptors:
    """Shapes that cannot be parsed at all."""

    @pytest.mark.parametrize("raw, fragment", [
        ("Text", "unknown type 'Text'"),
        (42, "descriptor must be a type name, list or object"),
        (["String", "Number"], "exactly one element type"),
        ([["String"]], "nested arrays are not supported"),
        ({}, "empty descriptor"),
        ({"type": "String", "unique": True}, "unknown descriptor keys ['unique']"),
        ({"type": "String", "required": "yes"}, "required must be true or false"),
        ({"type": 5}, "type must be a string"),
    ])
    def test_malformed_descriptor(self, raw, fragment):
        from lifeline.models.fields import SchemaDefinitionError, parse_field

        with pytest.raises(SchemaDefinitionError) as exc_info:
            parse_field("f", raw)

        assert fragment in str(exc_info.value)

    def test_error_names_nested_path(self):
        from lifeline.models.fields import SchemaDefinitionError, parse_fields

        with pytest.raises(SchemaDefinitionError) as exc_info:
            parse_fields({"address": {"city": "Town"}})

        assert "Field 'address.city'" in str(exc_info.value)

    @pytest.mark.parametrize("name", ["", "$where", "a.b", "_id"])
    def test_bad_field_names(self, name):
        from lifeline.models.fields import SchemaDefinitionError, parse_fields

        with pytest.raises(SchemaDefinitionError):
            parse_fields({name: "String"})

    def test_definition_must_be_mapping(self):
        from lifeline.models.fields import SchemaDefinitionError, parse_fields

        with pytest.raises(SchemaDefinitionError):
            parse_fields(["title"])

    def test_schema_definition_error_is_value_error(self):
        from lifeline.models.fields import SchemaDefinitionError

        assert issubclass(SchemaDefinitionError, ValueError)
