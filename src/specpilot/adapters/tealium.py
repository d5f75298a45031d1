"""Tealium event-specification adapter.

The flattest destination: attributes are a list rather than a map and there
is no governance output at all.
"""

from __future__ import annotations

from typing import Any

from specpilot.adapters.base import exact_table
from specpilot.models.canonical import CanonicalProperty, CanonicalSpec

DEFAULT_ACCOUNT = "default_account"
DEFAULT_PROFILE = "main"

# Tealium has no integer or datetime attribute types
TEALIUM_TYPES = exact_table(
    {
        "string": "string",
        "number": "number",
        "boolean": "boolean",
        "object": "object",
        "array": "array_of_strings",
        "integer": "number",
    },
    default="string",
)


def map_tealium_type(type_name: str | None) -> str:
    return TEALIUM_TYPES.resolve(type_name)


def _attribute(prop: CanonicalProperty) -> dict:
    attr: dict[str, Any] = {
        "name": prop.name,
        "type": map_tealium_type(prop.type),
        "required": bool(prop.required),
        "description": prop.description or "",
    }
    if prop.example is not None:
        attr["example"] = prop.example
    if prop.format:
        attr["format"] = prop.format
    if prop.enum:
        attr["allowed_values"] = list(prop.enum)
    if prop.min is not None:
        attr["min_value"] = prop.min
    if prop.max is not None:
        attr["max_value"] = prop.max
    return attr


def transform_to_tealium(canonical: CanonicalSpec | dict) -> dict:
    """Transform a canonical spec into a Tealium event specification."""
    spec = CanonicalSpec.coerce(canonical)
    return {
        "account": DEFAULT_ACCOUNT,
        "profile": DEFAULT_PROFILE,
        "events": [
            {
                "event_name": event.name,
                "event_type": "event",
                "attributes": [_attribute(prop) for prop in event.properties],
            }
            for event in spec.events
        ],
    }
