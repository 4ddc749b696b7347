"""
Named model templates.

Each template is a base field map that callers extend with their own
fields; on a name clash the caller's field wins.
"""
from typing import Any, Optional

TEMPLATES: dict[str, dict[str, Any]] = {
    "simple": {
        "description": "Basic model with name, description, and isActive fields",
        "fields": {
            "name": {"type": "String", "required": True},
            "description": {"type": "String"},
            "isActive": {"type": "Boolean", "default": True},
        },
    },
    "userRelated": {
        "description": "Model with user references and audit fields",
        "fields": {
            "userId": {"type": "ObjectId", "ref": "User", "required": True},
            "createdBy": {"type": "ObjectId", "ref": "User"},
            "updatedBy": {"type": "ObjectId", "ref": "User"},
        },
    },
    "content": {
        "description": "Content model for posts, articles, etc.",
        "fields": {
            "title": {"type": "String", "required": True},
            "content": {"type": "String", "required": True},
            "author": {"type": "ObjectId", "ref": "User", "required": True},
            "tags": {"type": "[String]"},
            "isPublished": {"type": "Boolean", "default": False},
            "views": {"type": "Number", "default": 0},
            "likes": {"type": "Number", "default": 0},
        },
    },
    "transaction": {
        "description": "Transaction/audit model",
        "fields": {
            "type": {"type": "String", "required": True},
            "amount": {"type": "Number"},
            "currency": {"type": "String", "default": "USD"},
            "fromUser": {"type": "ObjectId", "ref": "User"},
            "toUser": {"type": "ObjectId", "ref": "User"},
            "status": {
                "type": "String",
                "enum": ["pending", "completed", "failed", "cancelled"],
                "default": "pending",
            },
            "reference": {"type": "String"},
            "metadata": {"type": "Mixed"},
        },
    },
}


class UnknownTemplateError(KeyError):
    """No template with that name."""


def template_fields(template: str, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Merge a template's base fields with caller overrides."""
    try:
        base = TEMPLATES[template]["fields"]
    except KeyError:
        raise UnknownTemplateError(template) from None
    return {**base, **(overrides or {})}
