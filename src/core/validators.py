"""
Input Validators - Schema checks and message sanitization.

This module provides the validation that runs before anything reaches
the AI service:
- Form schema validation (field name -> declared type tag)
- Chat message sanitization
"""
from collections.abc import Mapping
from typing import Any

from src.core.logging_config import get_logger

logger = get_logger(__name__)

# Type tags a form field may declare
ALLOWED_FIELD_TYPES = frozenset({
    "string",
    "number",
    "boolean",
    "date",
    "email",
    "phone",
    "url",
})


def validate_schema(schema: Any) -> bool:
    """
    Check that a proposed form schema is well formed.

    A valid schema is a non-empty mapping whose every value is one of
    ALLOWED_FIELD_TYPES, compared case-insensitively. Lists, strings,
    None and other non-mapping values are rejected.

    Args:
        schema: Candidate schema, usually decoded JSON

    Returns:
        True if the schema can be attached to a session
    """
    if not isinstance(schema, Mapping):
        return False

    if len(schema) == 0:
        return False

    for field_name, field_type in schema.items():
        if not isinstance(field_type, str):
            return False
        if field_type.lower() not in ALLOWED_FIELD_TYPES:
            logger.debug(f"Rejected schema field {field_name!r} with type {field_type!r}")
            return False

    return True


def sanitize_message(message: str) -> str:
    """
    Sanitize a user message.

    - Removes null bytes
    - Strips leading/trailing whitespace

    Args:
        message: Raw user message

    Returns:
        Sanitized message ("" for empty input)
    """
    if not message:
        return ""

    return message.replace("\x00", "").strip()
