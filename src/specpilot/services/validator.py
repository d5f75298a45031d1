"""Deterministic governance checks for canonical specs.

Only actual problems are reported; an event with no findings scores 100.
Deductions per finding: naming 10, fields 5, identity 20, consent 15,
governance 5, clamped to 0..100.
"""

from __future__ import annotations

import re

from specpilot.models.canonical import CanonicalEvent, CanonicalSpec, EventValidation
from specpilot.models.enums import PiiClassification

_SNAKE_CASE = re.compile(r"^[a-z][a-z0-9_]*$")
_UPPER = re.compile(r"([A-Z])")

SMALL_WORDS = frozenset(
    {"a", "an", "the", "and", "but", "or", "for", "nor", "on", "at", "to", "by", "of", "in", "with"}
)
NUMERIC_HINTS = ("price", "cost", "total", "amount", "quantity", "count")
MONETARY_HINTS = ("price", "cost", "total", "amount", "value")
PII_FIELD_NAMES = (
    "email",
    "phone",
    "address",
    "ssn",
    "dob",
    "birth",
    "first_name",
    "last_name",
    "full_name",
    "user_name",
    "customer_name",
)

DEDUCTIONS = {
    "naming": 10,
    "fields": 5,
    "identity": 20,
    "consent": 15,
    "governance": 5,
}


def is_snake_case(name: str) -> bool:
    return bool(_SNAKE_CASE.match(name or ""))


def is_title_case(name: str) -> bool:
    """First word capitalized; later words capitalized or a small connective."""
    words = (name or "").split(" ")
    if not words or not words[0][:1].isupper():
        return False
    return all(w.lower() in SMALL_WORDS or w[:1].isupper() for w in words[1:])


def suggest_snake_case(name: str) -> str:
    return _UPPER.sub(r"_\1", name).lower().lstrip("_")


def _is_pii_field(name: str) -> bool:
    lowered = name.lower()
    return any(
        lowered == pii or lowered.endswith("_" + pii) or lowered.startswith(pii + "_")
        for pii in PII_FIELD_NAMES
    )


def validate_event(event: CanonicalEvent) -> EventValidation:
    naming: list[str] = []
    fields: list[str] = []
    identity: list[str] = []
    consent: list[str] = []
    governance: list[str] = []

    if not is_title_case(event.name):
        naming.append(f"Event name '{event.name}' should be Title Case (e.g., 'Cart Abandoned')")

    for prop in event.properties:
        if not is_snake_case(prop.name):
            naming.append(
                f"Property '{prop.name}' should be snake_case (e.g., '{suggest_snake_case(prop.name)}')"
            )
        lowered = prop.name.lower()
        if any(hint in lowered for hint in NUMERIC_HINTS) and (prop.type or "").lower() != "number":
            fields.append(f"Property '{prop.name}' should have type 'number', not '{prop.type}'")

    if not event.identity_or_empty.primary:
        identity.append("Missing primary identity - add user_id, anonymous_id, or email")

    for prop in event.properties:
        if not _is_pii_field(prop.name):
            continue
        if prop.pii_level != PiiClassification.HIGH:
            consent.append(f"Property '{prop.name}' contains PII and should have pii.classification = 'high'")
        if not prop.consent.required:
            consent.append(f"PII field '{prop.name}' should have consent.required = true")

    names = [prop.name.lower() for prop in event.properties]
    has_monetary = any(hint in name for name in names for hint in MONETARY_HINTS)
    if has_monetary and not any("currency" in name for name in names):
        governance.append('Monetary fields detected but no currency field - add currency (e.g., "USD")')

    findings = {
        "naming": naming,
        "fields": fields,
        "identity": identity,
        "consent": consent,
        "governance": governance,
    }
    score = 100 - sum(DEDUCTIONS[key] * len(items) for key, items in findings.items())
    return EventValidation(**findings, overall_score=max(0, min(100, score)))


def validate_spec(canonical: CanonicalSpec | dict) -> CanonicalSpec:
    """Return a copy of the spec with every event's ``validation`` populated."""
    spec = CanonicalSpec.coerce(canonical).model_copy(deep=True)
    for event in spec.events:
        event.validation = validate_event(event)
    return spec


def overall_score(spec: CanonicalSpec) -> int:
    """Mean event score, 100 for a spec without events."""
    scores = [
        (event.validation or validate_event(event)).overall_score for event in spec.events
    ]
    if not scores:
        return 100
    return round(sum(scores) / len(scores))
