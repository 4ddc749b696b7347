"""
Tests for collection name validation.

These tests cover:
- Accepted names
- Each naming rule and its message
- Rule ordering when several rules are violated
"""

import pytest


class TestValidNames:
    """Names MongoDB accepts."""

    @pytest.mark.parametrize("name", [
        "users",
        "bloodrequests",
        "donor_blood",
        "system.audit",
        "a" * 120,
        "名前",
    ])
    def test_valid_name_passes(self, name):
        """Ordinary names should be valid with no rule or message."""
        from lifeline.database.naming import validate_collection_name

        result = validate_collection_name(name)

        assert result.valid is True
        assert result.rule is None
        assert result.message is None


class TestNamingRules:
    """Each rule rejects the names it describes."""

    @pytest.mark.parametrize("name, rule, message", [
        (None, "not_a_string", "Collection name must be a non-empty string"),
        (42, "not_a_string", "Collection name must be a non-empty string"),
        ("", "empty", "Collection name cannot be empty"),
        ("a" * 121, "too_long", "Collection name cannot exceed 120 characters"),
        ("$cmd", "leading_dollar", "Collection name cannot start with $"),
        ("a..b", "double_dot", "Collection name cannot contain .."),
        ("bad\0name", "null_character", "Collection name cannot contain null character"),
        ("bad/name", "reserved_character", "Collection name contains invalid characters"),
        ("what?", "reserved_character", "Collection name contains invalid characters"),
        (" padded", "surrounding_whitespace", "Collection name cannot have leading/trailing spaces"),
        ("padded ", "surrounding_whitespace", "Collection name cannot have leading/trailing spaces"),
    ])
    def test_rule_violation_reported(self, name, rule, message):
        """A violating name should report its rule and message."""
        from lifeline.database.naming import validate_collection_name

        result = validate_collection_name(name)

        assert result.valid is False
        assert result.rule.value == rule
        assert result.message == message

    def test_whitespace_only_is_not_empty(self):
        """A single space is a surrounding-whitespace violation, not empty."""
        from lifeline.database.naming import NameRule, validate_collection_name

        result = validate_collection_name(" ")

        assert result.rule == NameRule.SURROUNDING_WHITESPACE


class TestRuleOrder:
    """The first violated rule wins."""

    def test_too_long_reported_before_leading_dollar(self):
        """An over-long name starting with $ reports TOO_LONG."""
        from lifeline.database.naming import NameRule, validate_collection_name

        result = validate_collection_name("$" + "a" * 130)

        assert result.rule == NameRule.TOO_LONG

    def test_leading_dollar_reported_before_reserved_character(self):
        from lifeline.database.naming import NameRule, validate_collection_name

        result = validate_collection_name("$a/b")

        assert result.rule == NameRule.LEADING_DOLLAR

    def test_reserved_character_reported_before_whitespace(self):
        from lifeline.database.naming import NameRule, validate_collection_name

        result = validate_collection_name(" a*b ")

        assert result.rule == NameRule.RESERVED_CHARACTER
