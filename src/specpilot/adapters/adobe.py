"""Adobe Experience Platform (Real-Time CDP) XDM adapter.

Each canonical event becomes an XDM ExperienceEvent with its own schema and
dataset. Document-level blocks (identity graph, data governance) are pure
aggregates of the per-event output:

* ``xdm:identityGraph`` holds every identity namespace used by any event; a
  namespace is primary if any event marks it primary.
* ``xdm:dataGovernance`` unions the DULE labels of every property and
  requires consent when any property is medium or high PII. That single flag
  also selects the retention window and the allowed marketing actions.
"""

from __future__ import annotations

import re

from specpilot.adapters.base import (
    contains_all,
    contains_any,
    exact_table,
    keyword_cascade,
    slugify,
    strip_whitespace,
    utc_now_iso,
)
from specpilot.models.canonical import CanonicalEvent, CanonicalProperty, CanonicalSpec
from specpilot.models.enums import PiiClassification

SANDBOX_ID = "prod"
TENANT_ID = "_experienceplatform"
ORG_ID = "EXAMPLE_ORG@AdobeOrg"
ECID_NAMESPACE = "ECID"
SCHEMA_CONTENT_TYPE = "application/vnd.adobe.xed-full+json;version=1"

CONSENT_RETENTION_DAYS = 30
DEFAULT_RETENTION_DAYS = 90

XDM_TYPES = exact_table(
    {
        "string": "xdm:string",
        "number": "xdm:number",
        "boolean": "xdm:boolean",
        "integer": "xdm:int",
        "array": "xdm:array",
        "object": "xdm:object",
        "datetime": "xdm:dateTime",
    },
    default="xdm:string",
)

# None means the field carries no sensitivity label at all
SENSITIVITY_LABELS = exact_table(
    {
        PiiClassification.HIGH: "S1",
        PiiClassification.MEDIUM: "S2",
        PiiClassification.LOW: "S3",
    },
    default=None,
)

GOVERNANCE_LABELS = exact_table(
    {
        PiiClassification.HIGH: ["C2", "C5", "I1", "S1", "P1"],
        PiiClassification.MEDIUM: ["C3", "I1", "P2"],
        PiiClassification.LOW: ["C1"],
    },
    default=[],
)

CONSENT_LEVELS = frozenset({PiiClassification.HIGH, PiiClassification.MEDIUM})

XDM_EVENT_TYPES = keyword_cascade(
    [
        (contains_any("purchase", "order"), "commerce.purchases"),
        (contains_all("cart", "add"), "commerce.productListAdds"),
        (contains_all("cart", "remove"), "commerce.productListRemovals"),
        (contains_any("checkout"), "commerce.checkouts"),
        (contains_any("view", "page"), "web.webpagedetails.pageViews"),
        (contains_any("click"), "web.webinteraction.linkClicks"),
        (contains_any("search"), "search.searchRequest"),
        (contains_any("login", "signup"), "userAccount.login"),
    ],
    default="experienceEvent.custom",
)

CONSENT_MARKETING_ACTIONS = ["marketing:email", "marketing:push", "personalization:web"]
DEFAULT_MARKETING_ACTIONS = ["analytics:web"]


def map_xdm_type(type_name: str | None) -> str:
    return XDM_TYPES.resolve(type_name)


def sensitivity_label(pii: PiiClassification | str | None) -> str | None:
    return SENSITIVITY_LABELS.resolve(pii)


def governance_labels(pii: PiiClassification | str | None) -> list[str]:
    return GOVERNANCE_LABELS.resolve(pii)


def xdm_event_type(event_name: str) -> str:
    return XDM_EVENT_TYPES.resolve(event_name)


def namespace_code(field_name: str) -> str:
    """``user_id`` -> ``USERID``."""
    return field_name.upper().replace("_", "")


def is_identity_field(field_name: str) -> bool:
    lowered = field_name.lower()
    return "id" in lowered or "email" in lowered


def namespace_display_name(code: str) -> str:
    """``USERID`` -> ``User ID``."""
    return code[:1] + re.sub(r"id$", " ID", code[1:].lower(), flags=re.IGNORECASE)


def _standard_fields() -> list[dict]:
    return [
        {
            "@type": "xdm:property",
            "xdm:name": "_id",
            "xdm:dataType": "xdm:string",
            "xdm:required": True,
            "xdm:description": "Unique identifier for the experience event",
            "meta:xdmField": f"{TENANT_ID}._id",
        },
        {
            "@type": "xdm:property",
            "xdm:name": "timestamp",
            "xdm:dataType": "xdm:dateTime",
            "xdm:required": True,
            "xdm:description": "Time when the event occurred",
            "meta:xdmField": "xdm:timestamp",
        },
    ]


def _xdm_field(event: CanonicalEvent, prop: CanonicalProperty) -> dict:
    field: dict = {
        "@type": "xdm:property",
        "xdm:name": prop.name,
        "xdm:dataType": map_xdm_type(prop.type),
        "xdm:required": bool(prop.required),
        "xdm:description": prop.description or "",
        "meta:xdmField": f"{TENANT_ID}.{strip_whitespace(event.name)}.{prop.name}",
    }
    if is_identity_field(prop.name):
        field["xdm:identityNamespace"] = namespace_code(prop.name)
    field["xdm:isPrimary"] = prop.name == event.identity_or_empty.primary
    label = sensitivity_label(prop.pii_level)
    if label is not None:
        field["xdm:sensitivityLabel"] = label
    return field


def _identity_map(event: CanonicalEvent) -> dict[str, list[dict]]:
    identity = event.identity_or_empty
    identity_map: dict[str, list[dict]] = {}

    if identity.primary:
        identity_map[namespace_code(identity.primary)] = [
            {
                "xdm:id": f"{{{identity.primary}}}",
                "xdm:primary": True,
                "xdm:authenticatedState": "authenticated",
            }
        ]

    for secondary in identity.secondary:
        code = namespace_code(secondary)
        if code in identity_map:
            continue
        identity_map[code] = [
            {
                "xdm:id": f"{{{secondary}}}",
                "xdm:primary": False,
                "xdm:authenticatedState": "ambiguous",
            }
        ]

    if not identity_map:
        identity_map[ECID_NAMESPACE] = [
            {
                "xdm:id": "{ecid}",
                "xdm:primary": True,
                "xdm:authenticatedState": "ambiguous",
            }
        ]

    return identity_map


def _experience_event(event: CanonicalEvent, index: int) -> dict:
    event_id = f"event_{slugify(event.name)}_{index}"
    schema_id = f"https://ns.adobe.com/{ORG_ID}/schemas/{event_id}"
    fields = _standard_fields() + [_xdm_field(event, prop) for prop in event.properties]

    return {
        "@id": schema_id,
        "@type": "xdm:ExperienceEvent",
        "xdm:name": event_id,
        "xdm:displayName": event.name,
        "xdm:description": event.description or "",
        "xdm:schemaRef": {
            "@id": schema_id,
            "contentType": SCHEMA_CONTENT_TYPE,
        },
        "xdm:fields": fields,
        "xdm:identityMap": _identity_map(event),
        "xdm:timestamp": "{timestamp}",
        "xdm:eventType": xdm_event_type(event.name),
    }


def _identity_namespaces(experience_events: list[dict]) -> list[dict]:
    primary_by_code: dict[str, bool] = {}
    for xdm_event in experience_events:
        for code, ids in xdm_event["xdm:identityMap"].items():
            is_primary = any(entry["xdm:primary"] for entry in ids)
            primary_by_code[code] = primary_by_code.get(code, False) or is_primary

    return [
        {
            "xdm:code": code,
            "xdm:displayName": namespace_display_name(code),
            "xdm:idType": "COOKIE" if code == ECID_NAMESPACE else "CROSS_DEVICE",
            "xdm:primary": is_primary,
        }
        for code, is_primary in primary_by_code.items()
    ]


def _data_governance(spec: CanonicalSpec) -> dict:
    labels: list[str] = []
    consent_required = False
    for event in spec.events:
        for prop in event.properties:
            level = prop.pii_level
            consent_required = consent_required or level in CONSENT_LEVELS
            for label in governance_labels(level):
                if label not in labels:
                    labels.append(label)

    return {
        "xdm:consentRequired": consent_required,
        "xdm:labels": labels,
        "xdm:retentionPolicy": {
            "xdm:days": CONSENT_RETENTION_DAYS if consent_required else DEFAULT_RETENTION_DAYS,
            "xdm:action": "DELETE",
        },
        "xdm:marketingActions": list(
            CONSENT_MARKETING_ACTIONS if consent_required else DEFAULT_MARKETING_ACTIONS
        ),
    }


def transform_to_adobe(
    canonical: CanonicalSpec | dict,
    *,
    generated_at: str | None = None,
) -> dict:
    """Transform a canonical spec into an Adobe RTCDP XDM document."""
    spec = CanonicalSpec.coerce(canonical)
    experience_events = [_experience_event(event, idx) for idx, event in enumerate(spec.events)]

    schemas = [
        {
            "@id": xdm_event["@id"],
            "@type": "xdm:Schema",
            "xdm:version": "1.0",
            "xdm:title": xdm_event["xdm:displayName"],
            "xdm:description": xdm_event["xdm:description"],
        }
        for xdm_event in experience_events
    ]

    datasets = [
        {
            "@id": f"ds_{xdm_event['xdm:name']}",
            "xdm:name": f"{xdm_event['xdm:displayName']} Dataset",
            "xdm:schemaRef": xdm_event["@id"],
            "xdm:tags": ["web", "behavioral", spec.metadata.title or "specpilot"],
            "xdm:enabledForProfile": True,
            "xdm:enabledForIdentity": True,
        }
        for xdm_event in experience_events
    ]

    return {
        "@context": {
            "@vocab": "https://ns.adobe.com/xdm/context/",
            "xdm": "https://ns.adobe.com/xdm/",
            "meta": "https://ns.adobe.com/meta/",
        },
        "@type": "xdm:ExperienceEventSchema",
        "meta:class": "https://ns.adobe.com/xdm/context/experienceevent",
        "meta:resourceType": "schema",
        "meta:sandboxId": SANDBOX_ID,
        "meta:sandboxType": "production",
        "xdm:tenant": TENANT_ID,
        "xdm:schemas": schemas,
        "xdm:experienceEvents": experience_events,
        "xdm:datasets": datasets,
        "xdm:identityGraph": {
            "xdm:namespaces": _identity_namespaces(experience_events),
            "xdm:linkingRules": {
                "xdm:strategy": "DETERMINISTIC",
                "xdm:deterministicFirst": True,
            },
        },
        "xdm:dataGovernance": _data_governance(spec),
        "_metadata": {
            "generatedBy": "SpecPilot Adobe RTCDP Adapter",
            "generatedAt": generated_at or utc_now_iso(),
            "note": (
                "This is a representation of the Adobe Experience Platform XDM format. "
                "Actual implementation may vary."
            ),
        },
    }
