"""Pydantic models for persisted specs, review comments and spec requests."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from specpilot.models.canonical import CanonicalSpec
from specpilot.models.enums import ReviewStatus, UserRole


class ReviewComment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., pattern=r"^cmt_[A-Za-z0-9_-]+$")
    author: str
    text: str = Field(..., min_length=1)
    created_at: datetime


class StoredSpec(BaseModel):
    """A canonical spec saved for review."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., pattern=r"^spec_[A-Za-z0-9_-]+$")
    canonical_spec: dict[str, Any]
    markdown_spec: str | None = None
    status: ReviewStatus = ReviewStatus.DRAFT
    title: str = "Untitled Spec"
    created_by: str = "Unknown"
    comments: list[ReviewComment] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @property
    def summary(self) -> str:
        metadata = self.canonical_spec.get("metadata") or {}
        return metadata.get("summary") or metadata.get("description") or ""

    @property
    def event_count(self) -> int:
        return len(self.canonical_spec.get("events") or [])


class SpecSummary(BaseModel):
    """List view of a stored spec."""

    id: str
    status: ReviewStatus
    title: str
    summary: str
    updated_at: datetime


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class _Request(BaseModel):
    # Accept both snake_case and the camelCase keys the web client sends
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IntakeRequest(_Request):
    input: str = Field(..., min_length=1)

    @field_validator("input")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("input must not be blank")
        return value


class CanonicalRequest(_Request):
    canonical_spec: CanonicalSpec = Field(
        ..., validation_alias=AliasChoices("canonical_spec", "canonicalSpec")
    )


class AdaptersFromCanonicalRequest(CanonicalRequest):
    destinations: list[str] | None = None


class SaveSpecRequest(CanonicalRequest):
    status: ReviewStatus = ReviewStatus.DRAFT
    comment_text: str | None = Field(None, validation_alias=AliasChoices("comment_text", "commentText"))
    author: str | None = None
    markdown_spec: str | None = Field(None, validation_alias=AliasChoices("markdown_spec", "markdownSpec"))
    title: str | None = None
    created_by: str | None = Field(None, validation_alias=AliasChoices("created_by", "createdBy"))


class UpdateSpecRequest(CanonicalRequest):
    markdown_spec: str | None = Field(None, validation_alias=AliasChoices("markdown_spec", "markdownSpec"))


class ReviewUpdateRequest(_Request):
    id: str = Field(..., min_length=1)
    status: ReviewStatus
    comment_text: str | None = Field(None, validation_alias=AliasChoices("comment_text", "commentText"))
    author: str | None = None
    user_role: UserRole | None = Field(None, validation_alias=AliasChoices("user_role", "userRole"))


class SlackShareRequest(_Request):
    spec_id: str = Field(..., min_length=1, validation_alias=AliasChoices("spec_id", "specId"))
    title: str | None = None
    summary: str | None = None
    status: str | None = None
    event_count: int | None = Field(None, validation_alias=AliasChoices("event_count", "eventCount"))
    validation_score: int | None = Field(
        None, validation_alias=AliasChoices("validation_score", "validationScore")
    )
