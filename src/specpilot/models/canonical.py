"""Pydantic models for the canonical tracking-plan specification.

The canonical spec is the destination-neutral representation every adapter
consumes. Only the top-level shape is enforced: ``metadata`` must be an
object, ``events`` a list of objects and ``destinations`` a list. Everything
inside an event is parsed leniently so adapters stay total: optional lists
accept ``null``, badly typed hints are dropped, scalar names become strings
and type / PII strings are stored verbatim for each adapter's own
case-insensitive lookup.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from specpilot.models.enums import PiiClassification


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return value if isinstance(value, str) else str(value)


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _number_or_none(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _list_or_none(value: Any) -> Any:
    return value if isinstance(value, list) else None


def _string_list(value: Any) -> list[str]:
    """Free-text lists: a lone string is wrapped, nulls and nested values dropped."""
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        return []
    return [_text(item) for item in value if item is not None and not isinstance(item, (dict, list))]


def _object_list(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, (dict, BaseModel))]


def _object(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else {}


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return False


class _CanonicalModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class PiiInfo(_CanonicalModel):
    classification: str | None = None
    reason: str | None = None

    strings_only = field_validator("classification", mode="before")(_string_or_none)
    optional_text = field_validator("reason", mode="before")(_optional_text)

    @property
    def level(self) -> PiiClassification:
        """Normalized classification; absent or unknown values mean ``none``."""
        try:
            return PiiClassification((self.classification or "none").lower())
        except ValueError:
            return PiiClassification.NONE


class ConsentInfo(_CanonicalModel):
    required: bool = False
    policy_group: str | None = None

    flags = field_validator("required", mode="before")(_flag)
    optional_text = field_validator("policy_group", mode="before")(_optional_text)


class CanonicalProperty(_CanonicalModel):
    name: str = ""
    type: str | None = None
    required: bool = False
    description: str = ""
    pii: PiiInfo = Field(default_factory=PiiInfo)
    consent: ConsentInfo = Field(default_factory=ConsentInfo)

    # Optional constraint hints, carried by the JSON-schema style adapters
    example: Any = None
    format: str | None = None
    enum: list[Any] | None = None
    min: float | None = None
    max: float | None = None

    objects = field_validator("pii", "consent", mode="before")(_object)
    text = field_validator("name", "description", mode="before")(_text)
    flags = field_validator("required", mode="before")(_flag)
    numbers_only = field_validator("min", "max", mode="before")(_number_or_none)
    lists_only = field_validator("enum", mode="before")(_list_or_none)

    @field_validator("type", "format", mode="before")
    @classmethod
    def _non_string_hint(cls, value: Any) -> Any:
        # Union types such as ["string", "null"] fall back like unknown types
        return _string_or_none(value)

    @property
    def pii_level(self) -> PiiClassification:
        return self.pii.level


class CanonicalIdentity(_CanonicalModel):
    primary: str | None = None
    secondary: list[str] = Field(default_factory=list)
    stitching_assumptions: str = ""

    optional_text = field_validator("primary", mode="before")(_optional_text)
    string_lists = field_validator("secondary", mode="before")(_string_list)
    text = field_validator("stitching_assumptions", mode="before")(_text)

    @model_validator(mode="before")
    @classmethod
    def _null_secondary_is_absent(cls, data: Any) -> Any:
        # An explicit null leaves secondary unset so adapter defaults apply
        if isinstance(data, dict) and "secondary" in data and data["secondary"] is None:
            data = {k: v for k, v in data.items() if k != "secondary"}
        return data

    @property
    def is_empty(self) -> bool:
        return not self.primary and not self.secondary


class EventValidation(_CanonicalModel):
    naming: list[str] = Field(default_factory=list)
    fields: list[str] = Field(default_factory=list)
    identity: list[str] = Field(default_factory=list)
    consent: list[str] = Field(default_factory=list)
    governance: list[str] = Field(default_factory=list)
    overall_score: int = 100

    string_lists = field_validator(
        "naming", "fields", "identity", "consent", "governance", mode="before"
    )(_string_list)

    @field_validator("overall_score", mode="before")
    @classmethod
    def _integer_score(cls, value: Any) -> Any:
        return value if isinstance(value, int) and not isinstance(value, bool) else 100


class CanonicalEvent(_CanonicalModel):
    name: str = ""
    description: str = ""
    trigger: str = ""
    properties: list[CanonicalProperty] = Field(default_factory=list)
    # None means the event declared no identity block at all
    identity: CanonicalIdentity | None = None
    business_rules: list[str] = Field(default_factory=list)
    technical_rules: list[str] = Field(default_factory=list)
    validation: EventValidation | None = None

    object_lists = field_validator("properties", mode="before")(_object_list)
    string_lists = field_validator("business_rules", "technical_rules", mode="before")(_string_list)
    text = field_validator("name", "description", "trigger", mode="before")(_text)

    @field_validator("identity", "validation", mode="before")
    @classmethod
    def _objects_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, BaseModel)) else None

    @property
    def identity_or_empty(self) -> CanonicalIdentity:
        return self.identity or CanonicalIdentity()


class CanonicalDestination(_CanonicalModel):
    name: str = ""
    requirements: list[str] = Field(default_factory=list)
    notes: str = ""

    string_lists = field_validator("requirements", mode="before")(_string_list)
    text = field_validator("name", "notes", mode="before")(_text)


class CanonicalMetadata(_CanonicalModel):
    title: str = ""
    summary: str = Field("", validation_alias=AliasChoices("summary", "description"))
    version: str = "1.0"
    submitted_at: str | None = Field(
        None, validation_alias=AliasChoices("submitted_at", "created_at")
    )
    status: str = "draft"
    requestor: str | None = None

    text = field_validator("title", "summary", mode="before")(_text)
    optional_text = field_validator("submitted_at", "requestor", mode="before")(_optional_text)

    @field_validator("version", mode="before")
    @classmethod
    def _blank_to_default_version(cls, value: Any) -> Any:
        return _text(value) or "1.0"

    @field_validator("status", mode="before")
    @classmethod
    def _none_to_draft(cls, value: Any) -> Any:
        return _text(value) or "draft"


class CanonicalSpec(_CanonicalModel):
    """The single destination-neutral tracking plan."""

    metadata: CanonicalMetadata = Field(default_factory=CanonicalMetadata)
    events: list[CanonicalEvent] = Field(default_factory=list)
    destinations: list[CanonicalDestination] = Field(default_factory=list)
    acceptance_criteria: list[str] = Field(default_factory=list)
    open_questions: list[str] = Field(default_factory=list)

    none_lists_to_empty = field_validator("events", mode="before")(_none_to_list)
    string_lists = field_validator("acceptance_criteria", "open_questions", mode="before")(_string_list)

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("destinations", mode="before")
    @classmethod
    def _named_destinations(cls, value: Any) -> Any:
        # "Segment" is shorthand for {"name": "Segment"}
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        return [{"name": item} if isinstance(item, str) else item for item in value]

    @classmethod
    def coerce(cls, value: CanonicalSpec | dict) -> CanonicalSpec:
        """Accept either a parsed spec or its raw JSON-compatible dict.

        Raises ``pydantic.ValidationError`` only when the top-level shape is
        wrong, e.g. ``events`` is not a list of objects.
        """
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)

    @property
    def title(self) -> str:
        return self.metadata.title
