"""Segment Protocols tracking-plan adapter.

Renders a canonical spec as a Segment tracking plan: one draft-07 JSON Schema
per event plus the constant ``global`` / ``identify`` / ``group`` scaffolding
Segment expects. ``transform_to_segment_simple`` keeps the older reduced shape
for callers that still consume it.
"""

from __future__ import annotations

from typing import Any

from specpilot.adapters.base import exact_table, snake_case, title_case, underscore_whitespace, utc_now_iso
from specpilot.models.canonical import CanonicalEvent, CanonicalProperty, CanonicalSpec

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"
DEFAULT_PLAN_NAME = "SpecPilot Tracking Plan"
ISO_8601_PREFIX = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"

SEGMENT_TYPES = exact_table(
    {
        "string": "string",
        "number": "number",
        "boolean": "boolean",
        "integer": "integer",
        "array": "array",
        "object": "object",
        "datetime": "string",
        "any": ["string", "number", "boolean", "object", "array"],
    },
    default="string",
)

# The legacy shape never knew about datetime / any
SEGMENT_SIMPLE_TYPES = exact_table(
    {
        "string": "string",
        "number": "number",
        "boolean": "boolean",
        "object": "object",
        "array": "array",
        "integer": "integer",
    },
    default="string",
)

GLOBAL_PROPERTIES: dict[str, dict[str, str]] = {
    "anonymousId": {"description": "Anonymous identifier for the user", "type": "string"},
    "userId": {"description": "Unique identifier for a logged-in user", "type": "string"},
    "messageId": {"description": "Unique identifier for this message", "type": "string"},
    "sentAt": {"description": "Timestamp when the message was sent from the client", "type": "string"},
    "receivedAt": {"description": "Timestamp when Segment received the message", "type": "string"},
}

IDENTIFY_TRAITS: dict[str, dict[str, str]] = {
    "email": {"description": "User's email address", "type": "string"},
    "name": {"description": "User's full name", "type": "string"},
    "created_at": {"description": "When the user account was created", "type": "string"},
}


def map_segment_type(type_name: str | None) -> str | list[str]:
    return SEGMENT_TYPES.resolve(type_name)


def _event_properties(event: CanonicalEvent) -> tuple[dict[str, dict], list[str]]:
    properties: dict[str, dict[str, Any]] = {
        "context": {
            "description": "Segment context object with device, app, and session info",
            "type": "object",
        },
    }
    required: list[str] = []

    for prop in event.properties:
        key = snake_case(prop.name)
        schema: dict[str, Any] = {
            "description": prop.description or f"{prop.name} property",
            "type": map_segment_type(prop.type),
        }
        if prop.enum:
            schema["enum"] = list(prop.enum)
        properties[key] = schema
        if prop.required and key not in required:
            required.append(key)

    if "timestamp" not in properties:
        properties["timestamp"] = {
            "description": "ISO 8601 timestamp when the event occurred",
            "type": "string",
            "pattern": ISO_8601_PREFIX,
        }

    return properties, required


def _segment_event(event: CanonicalEvent) -> dict:
    properties, required = _event_properties(event)
    return {
        "name": title_case(event.name),
        "description": event.description or f"Tracks when {event.name.lower()} occurs",
        "rules": {
            "$schema": JSON_SCHEMA_DRAFT,
            "type": "object",
            "properties": properties,
            "required": required,
        },
        "version": 1,
    }


def transform_to_segment(
    canonical: CanonicalSpec | dict,
    *,
    generated_at: str | None = None,
) -> dict:
    """Transform a canonical spec into a Segment tracking plan."""
    spec = CanonicalSpec.coerce(canonical)
    plan_name = spec.metadata.title or DEFAULT_PLAN_NAME

    return {
        "display_name": plan_name,
        "name": underscore_whitespace(plan_name),
        "type": "TRACKING_PLAN",
        "rules": {
            "events": [_segment_event(event) for event in spec.events],
            "global": {
                "$schema": JSON_SCHEMA_DRAFT,
                "type": "object",
                "properties": {k: dict(v) for k, v in GLOBAL_PROPERTIES.items()},
                "required": [],
            },
            "identify": {
                "$schema": JSON_SCHEMA_DRAFT,
                "type": "object",
                "properties": {
                    "traits": {
                        "type": "object",
                        "properties": {k: dict(v) for k, v in IDENTIFY_TRAITS.items()},
                    },
                },
            },
            "group": {
                "$schema": JSON_SCHEMA_DRAFT,
                "type": "object",
                "properties": {
                    "groupId": {"description": "Unique identifier for the group", "type": "string"},
                    "traits": {"description": "Group traits", "type": "object"},
                },
            },
        },
        "_metadata": {
            "generatedBy": "SpecPilot Segment Adapter",
            "generatedAt": generated_at or utc_now_iso(),
            "sourceSpec": spec.metadata.title or "Unknown",
        },
    }


# --- Legacy reduced shape ---------------------------------------------------


def _simple_property(prop: CanonicalProperty) -> dict:
    schema: dict[str, Any] = {
        "type": SEGMENT_SIMPLE_TYPES.resolve(prop.type),
        "description": prop.description or "",
    }
    if prop.example is not None:
        schema["example"] = prop.example
    if prop.format:
        schema["format"] = prop.format
    if prop.enum:
        schema["enum"] = list(prop.enum)
    if prop.min is not None:
        schema["minimum"] = prop.min
    if prop.max is not None:
        schema["maximum"] = prop.max
    return schema


def transform_to_segment_simple(canonical: CanonicalSpec | dict) -> dict:
    """Deprecated reduced Segment shape: raw names, no scaffolding."""
    spec = CanonicalSpec.coerce(canonical)
    events = []
    for event in spec.events:
        properties = {prop.name: _simple_property(prop) for prop in event.properties}
        events.append(
            {
                "name": event.name,
                "description": event.description or "",
                "rules": {
                    "properties": {
                        "properties": properties,
                        "required": [prop.name for prop in event.properties if prop.required],
                    },
                },
            }
        )
    return {
        "display_name": spec.metadata.title or "Tracking Plan",
        "rules": {"events": events},
    }
