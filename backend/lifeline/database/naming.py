"""
Collection name validation.

MongoDB rejects a handful of collection names outright; checking them up
front lets callers get a precise reason without a round-trip to the server.
"""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

MAX_COLLECTION_NAME_LENGTH = 120
RESERVED_CHARACTERS = frozenset('<>:"/\\|?*')


class NameRule(str, Enum):
    """Naming rules, listed in the order they are checked."""
    NOT_A_STRING = "not_a_string"
    EMPTY = "empty"
    TOO_LONG = "too_long"
    LEADING_DOLLAR = "leading_dollar"
    DOUBLE_DOT = "double_dot"
    NULL_CHARACTER = "null_character"
    RESERVED_CHARACTER = "reserved_character"
    SURROUNDING_WHITESPACE = "surrounding_whitespace"


RULE_MESSAGES = {
    NameRule.NOT_A_STRING: "Collection name must be a non-empty string",
    NameRule.EMPTY: "Collection name cannot be empty",
    NameRule.TOO_LONG: (
        f"Collection name cannot exceed {MAX_COLLECTION_NAME_LENGTH} characters"
    ),
    NameRule.LEADING_DOLLAR: "Collection name cannot start with $",
    NameRule.DOUBLE_DOT: "Collection name cannot contain ..",
    NameRule.NULL_CHARACTER: "Collection name cannot contain null character",
    NameRule.RESERVED_CHARACTER: "Collection name contains invalid characters",
    NameRule.SURROUNDING_WHITESPACE: (
        "Collection name cannot have leading/trailing spaces"
    ),
}


class NameValidation(BaseModel):
    """Outcome of a name check. `rule` is the first rule that failed."""
    valid: bool
    rule: Optional[NameRule] = None
    message: Optional[str] = None

    @classmethod
    def failed(cls, rule: NameRule) -> "NameValidation":
        return cls(valid=False, rule=rule, message=RULE_MESSAGES[rule])


def _first_violation(name: str) -> Optional[NameRule]:
    if len(name) == 0:
        return NameRule.EMPTY
    if len(name) > MAX_COLLECTION_NAME_LENGTH:
        return NameRule.TOO_LONG
    if name.startswith("$"):
        return NameRule.LEADING_DOLLAR
    if ".." in name:
        return NameRule.DOUBLE_DOT
    if "\0" in name:
        return NameRule.NULL_CHARACTER
    if any(ch in RESERVED_CHARACTERS for ch in name):
        return NameRule.RESERVED_CHARACTER
    if name.strip() != name:
        return NameRule.SURROUNDING_WHITESPACE
    return None


def validate_collection_name(name: Any) -> NameValidation:
    """
    Validate a candidate collection name.

    Pure function, no I/O. Rules are checked in a fixed order and the
    first violation is reported, so an over-long name that also starts
    with `$` always reports TOO_LONG.

    Args:
        name: Candidate collection name

    Returns:
        NameValidation with `valid=True`, or the violated rule and message
    """
    if not isinstance(name, str):
        return NameValidation.failed(NameRule.NOT_A_STRING)

    rule = _first_violation(name)
    if rule is not None:
        return NameValidation.failed(rule)
    return NameValidation(valid=True)
