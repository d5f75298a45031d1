"""Enterprise / homegrown CDP adapter with strict field-level governance.

Every field carries a PII classification and the governance derived from it:

    ======  =========  ==========  ============  ===================================
    PII     retention  encryption  masking       consent types
    ======  =========  ==========  ============  ===================================
    HIGH    30 days    yes         FULL_MASK     EXPLICIT_CONSENT, DATA_PROCESSING
    MEDIUM  90 days    yes         PARTIAL_MASK  IMPLIED_CONSENT
    LOW     365 days   no          HASH_SHA256   none
    NONE    365 days   no          none          none
    ======  =========  ==========  ============  ===================================

Event categories come from a keyword cascade checked in source order
(commerce, authentication, engagement, discovery), so a name matching two
categories lands in whichever is listed first.
"""

from __future__ import annotations

import re

from specpilot.adapters.base import (
    contains_any,
    exact_table,
    keyword_cascade,
    screaming_snake_case,
    snake_case,
    utc_now_iso,
)
from specpilot.models.canonical import CanonicalEvent, CanonicalProperty, CanonicalSpec
from specpilot.models.enums import PiiClassification

SPEC_VERSION = "2.0"
SCHEMA_VERSION = "1.0.0"
DEFAULT_PRIMARY_KEY = "user_id"
DEFAULT_SECONDARY_KEYS = ["email", "device_id"]
STRING_MAX_LENGTH = 255

ENTERPRISE_TYPES = exact_table(
    {
        "string": "VARCHAR(255)",
        "number": "DECIMAL(18,4)",
        "boolean": "BOOLEAN",
        "integer": "BIGINT",
        "array": "ARRAY<STRING>",
        "object": "JSON",
        "datetime": "TIMESTAMP_NTZ",
    },
    default="VARCHAR(255)",
)

PII_CLASSIFICATIONS = exact_table(
    {
        PiiClassification.HIGH: "HIGH",
        PiiClassification.MEDIUM: "MEDIUM",
        PiiClassification.LOW: "LOW",
    },
    default="NONE",
)

RETENTION_DAYS = exact_table({"HIGH": 30, "MEDIUM": 90}, default=365)

ENCRYPTION_REQUIRED = exact_table({"HIGH": True, "MEDIUM": True}, default=False)

MASKING_RULES = exact_table(
    {"HIGH": "FULL_MASK", "MEDIUM": "PARTIAL_MASK", "LOW": "HASH_SHA256"},
    default=None,
)

CONSENT_TYPES = exact_table(
    {
        "HIGH": ["EXPLICIT_CONSENT", "DATA_PROCESSING"],
        "MEDIUM": ["IMPLIED_CONSENT"],
    },
    default=[],
)

EVENT_CATEGORIES = keyword_cascade(
    [
        (contains_any("cart", "checkout", "purchase", "order"), "COMMERCE"),
        (contains_any("login", "signup", "register"), "AUTHENTICATION"),
        (contains_any("click", "view", "page"), "ENGAGEMENT"),
        (contains_any("search", "filter"), "DISCOVERY"),
    ],
    default="GENERAL",
)

DESTINATION_TYPES = keyword_cascade(
    [
        (contains_any("segment"), "CDP"),
        (contains_any("adobe"), "ANALYTICS"),
        (contains_any("salesforce"), "CRM"),
    ],
    default="DATA_WAREHOUSE",
)

PII_NAMESPACE_HINTS = ("email", "phone", "name")


def map_enterprise_type(type_name: str | None) -> str:
    return ENTERPRISE_TYPES.resolve(type_name)


def map_pii_classification(pii: PiiClassification | str | None) -> str:
    return PII_CLASSIFICATIONS.resolve(pii)


def categorize_event(name: str) -> str:
    return EVENT_CATEGORIES.resolve(name)


def classify_destination(name: str) -> str:
    return DESTINATION_TYPES.resolve(name)


def data_governance(pii_level: str) -> dict:
    return {
        "retention_days": RETENTION_DAYS.resolve(pii_level),
        "encryption_required": ENCRYPTION_REQUIRED.resolve(pii_level),
        "masking_rule": MASKING_RULES.resolve(pii_level),
    }


def consent_requirements(pii_level: str) -> dict:
    consent_types = CONSENT_TYPES.resolve(pii_level)
    return {"required": bool(consent_types), "consent_types": consent_types}


def _standard_fields() -> list[dict]:
    return [
        {
            "field_name": "event_id",
            "field_type": "VARCHAR(36)",
            "nullable": False,
            "pii_classification": "NONE",
            "data_governance": data_governance("NONE"),
            "consent_requirements": consent_requirements("NONE"),
            "validation": {"pattern": "^[a-f0-9-]{36}$"},
        },
        {
            "field_name": "event_timestamp",
            "field_type": "TIMESTAMP_NTZ",
            "nullable": False,
            "pii_classification": "NONE",
            "data_governance": data_governance("NONE"),
            "consent_requirements": consent_requirements("NONE"),
            "validation": {},
        },
        {
            # Session ids are pseudonymous: hashed, kept 90 days, no consent
            "field_name": "session_id",
            "field_type": "VARCHAR(64)",
            "nullable": True,
            "pii_classification": "LOW",
            "data_governance": {
                "retention_days": 90,
                "encryption_required": False,
                "masking_rule": "HASH_SHA256",
            },
            "consent_requirements": {"required": False, "consent_types": []},
            "validation": {},
        },
    ]


def _field(prop: CanonicalProperty) -> dict:
    pii_level = map_pii_classification(prop.pii_level)
    field_type = map_enterprise_type(prop.type)
    validation = {"max_length": STRING_MAX_LENGTH} if field_type == "VARCHAR(255)" else {}
    return {
        "field_name": snake_case(prop.name),
        "field_type": field_type,
        "nullable": not prop.required,
        "pii_classification": pii_level,
        "data_governance": data_governance(pii_level),
        "consent_requirements": consent_requirements(pii_level),
        "validation": validation,
    }


def _secondary_keys(event: CanonicalEvent) -> list[str]:
    identity = event.identity
    if identity is None or "secondary" not in identity.model_fields_set:
        return list(DEFAULT_SECONDARY_KEYS)
    return list(identity.secondary)


def _enterprise_event(event: CanonicalEvent) -> dict:
    category = categorize_event(event.name)
    fields = _standard_fields() + [_field(prop) for prop in event.properties]

    return {
        "event_code": screaming_snake_case(event.name),
        "event_name": event.name,
        "event_category": category,
        "description": event.description or "",
        "trigger_condition": event.trigger or "User action",
        "schema": {
            "namespace": f"com.enterprise.events.{category.lower()}",
            "version": SCHEMA_VERSION,
            "fields": fields,
        },
        "identity_resolution": {
            "primary_key": event.identity_or_empty.primary or DEFAULT_PRIMARY_KEY,
            "secondary_keys": _secondary_keys(event),
            "stitching_strategy": "DETERMINISTIC_FIRST",
        },
        "data_quality": {
            "required_fields": [f["field_name"] for f in fields if not f["nullable"]],
            "business_rules": list(event.business_rules),
            "technical_validations": list(event.technical_rules),
        },
        "lineage": {
            "source_system": "WEB_APP",
            "data_steward": "cdp-team@enterprise.com",
            "classification": "INTERNAL",
        },
    }


def _namespace_display_name(namespace: str) -> str:
    """``device_id`` -> ``Device Id``."""
    return re.sub(r"\b\w", lambda m: m.group().upper(), namespace.replace("_", " "))


def _identity_graph(spec: CanonicalSpec) -> dict:
    namespaces: list[str] = []
    for event in spec.events:
        identity = event.identity_or_empty
        for ns in ([identity.primary] if identity.primary else []) + identity.secondary:
            if ns and ns not in namespaces:
                namespaces.append(ns)
    if not namespaces:
        namespaces.append(DEFAULT_PRIMARY_KEY)

    return {
        "primary_namespace": "USER_ID",
        "supported_namespaces": [
            {
                "code": ns.upper(),
                "display_name": _namespace_display_name(ns),
                "priority": i + 1,
                "is_pii": any(hint in ns.lower() for hint in PII_NAMESPACE_HINTS),
            }
            for i, ns in enumerate(namespaces)
        ],
        "resolution_rules": {
            "strategy": "DETERMINISTIC",
            "deterministic_keys": ["user_id", "email"],
            "probabilistic_enabled": False,
        },
    }


def transform_to_enterprise(
    canonical: CanonicalSpec | dict,
    *,
    generated_at: str | None = None,
) -> dict:
    """Transform a canonical spec into the enterprise CDP schema."""
    spec = CanonicalSpec.coerce(canonical)

    destinations = [
        {
            "id": f"dest_{i + 1}",
            "name": dest.name,
            "type": classify_destination(dest.name),
            "enabled": True,
            "sync_mode": "STREAMING",
            "filter_rules": list(dest.requirements),
        }
        for i, dest in enumerate(spec.destinations)
    ]

    return {
        "spec_version": SPEC_VERSION,
        "organization": {
            "id": "ORG_001",
            "name": "Enterprise Corp",
            "environment": "PRODUCTION",
        },
        "governance": {
            "data_classification": "CONFIDENTIAL",
            "compliance_frameworks": ["GDPR", "CCPA", "SOC2"],
            "consent_management": {
                "enabled": True,
                "default_policy": "OPT_IN_REQUIRED",
            },
            "retention_policy": {
                "default_days": RETENTION_DAYS.default,
                "pii_days": RETENTION_DAYS.resolve("HIGH"),
            },
        },
        "events": [_enterprise_event(event) for event in spec.events],
        "identity_graph": _identity_graph(spec),
        "destinations": destinations,
        "_audit": {
            "generated_by": "SpecPilot Enterprise Adapter",
            "generated_at": generated_at or utc_now_iso(),
            "approval_status": (spec.metadata.status or "draft").upper(),
            "last_modified_by": "system",
        },
    }
