"""mParticle data-plan adapter."""

from __future__ import annotations

from typing import Any

from specpilot.adapters.base import exact_table, slugify
from specpilot.models.canonical import CanonicalEvent, CanonicalProperty, CanonicalSpec

DATA_PLAN_VERSION = 1

MPARTICLE_TYPES = exact_table(
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


def map_mparticle_type(type_name: str | None) -> str:
    return MPARTICLE_TYPES.resolve(type_name)


def data_plan_id(title: str | None) -> str:
    """Stable data plan id derived from the spec title."""
    return slugify(title or "tracking_plan")


def _attribute(prop: CanonicalProperty) -> dict:
    schema: dict[str, Any] = {
        "type": map_mparticle_type(prop.type),
        "description": prop.description or "",
    }
    if prop.example is not None:
        schema["examples"] = [prop.example]
    if prop.format:
        schema["format"] = prop.format
    if prop.enum:
        schema["enum"] = list(prop.enum)
    if prop.min is not None:
        schema["minimum"] = prop.min
    if prop.max is not None:
        schema["maximum"] = prop.max
    return schema


def _data_point(event: CanonicalEvent) -> dict:
    properties = {prop.name: _attribute(prop) for prop in event.properties}
    required = [prop.name for prop in event.properties if prop.required]
    return {
        "match": {
            "type": "custom_event",
            "criteria": {"event_name": event.name},
        },
        "validator": {
            "type": "json_schema",
            "definition": {
                "properties": {
                    "data": {
                        "properties": {
                            "custom_attributes": {
                                "properties": properties,
                                "required": required,
                            },
                        },
                    },
                },
            },
        },
    }


def transform_to_mparticle(canonical: CanonicalSpec | dict) -> dict:
    """Transform a canonical spec into an mParticle data plan (version 1 only)."""
    spec = CanonicalSpec.coerce(canonical)
    plan_id = data_plan_id(spec.metadata.title)
    return {
        "data_plan_id": plan_id,
        "data_plan_name": spec.metadata.title or "Tracking Plan",
        "data_plan_versions": [
            {
                "version": DATA_PLAN_VERSION,
                "data_plan_id": plan_id,
                "version_document": {
                    "data_points": [_data_point(event) for event in spec.events],
                },
            },
        ],
    }
