"""Review workflow for saved specs.

Status changes are last-write-wins: any status may follow any other, except
that only approvers may move a spec to ``validated`` or ``approved``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from specpilot.errors.exceptions import NotFoundError, PermissionDeniedError
from specpilot.models.canonical import CanonicalSpec
from specpilot.models.enums import APPROVER_ONLY_STATUSES, ReviewStatus, UserRole
from specpilot.models.review import ReviewComment, SpecSummary, StoredSpec
from specpilot.services.id_generator import generate_id
from specpilot.stores.base import KeyValueStore

logger = logging.getLogger(__name__)

SPECS_NAMESPACE = "specs"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _comment(text: str | None, author: str, at: datetime) -> ReviewComment | None:
    if not text or not text.strip():
        return None
    return ReviewComment(id=generate_id("cmt_"), author=author, text=text.strip(), created_at=at)


def stored_canonical(canonical_spec: CanonicalSpec | dict) -> dict:
    """Normalized JSON form of a canonical spec; keys the caller never sent stay absent.

    Raises ``pydantic.ValidationError`` when the top-level shape is wrong, so
    nothing unreadable is ever persisted.
    """
    return CanonicalSpec.coerce(canonical_spec).model_dump(mode="json", exclude_unset=True)


def can_set_status(status: ReviewStatus, role: UserRole | str | None) -> bool:
    """Whether a caller with ``role`` may move a spec to ``status``."""
    return status not in APPROVER_ONLY_STATUSES or role == UserRole.APPROVER


class SpecReviewService:
    def __init__(self, store: KeyValueStore):
        self.store = store

    async def _put(self, spec: StoredSpec) -> StoredSpec:
        await self.store.set(SPECS_NAMESPACE, spec.id, spec.model_dump(mode="json"))
        return spec

    async def save_spec(
        self,
        canonical_spec: CanonicalSpec | dict,
        *,
        status: ReviewStatus = ReviewStatus.DRAFT,
        comment_text: str | None = None,
        author: str | None = None,
        markdown_spec: str | None = None,
        title: str | None = None,
        created_by: str | None = None,
    ) -> StoredSpec:
        """Persist a new spec with an optional first comment."""
        canonical_spec = stored_canonical(canonical_spec)
        now = _now()
        author = author or "system"
        metadata = canonical_spec.get("metadata") or {}
        comment = _comment(comment_text, author, now)

        spec = StoredSpec(
            id=generate_id("spec_"),
            canonical_spec=canonical_spec,
            markdown_spec=markdown_spec,
            status=status,
            title=title or metadata.get("title") or "Untitled Spec",
            created_by=created_by or author or "Unknown",
            comments=[comment] if comment else [],
            created_at=now,
            updated_at=now,
        )
        await self._put(spec)
        logger.info("Saved spec %s (%s)", spec.id, spec.title)
        return spec

    async def get_spec(self, spec_id: str) -> StoredSpec:
        raw = await self.store.get(SPECS_NAMESPACE, spec_id)
        if raw is None:
            raise NotFoundError("Spec", spec_id)
        return StoredSpec.model_validate(raw)

    async def update_review(
        self,
        spec_id: str,
        status: ReviewStatus,
        *,
        comment_text: str | None = None,
        author: str | None = None,
        user_role: UserRole | str | None = None,
    ) -> StoredSpec:
        """Change status and append an optional comment."""
        if not can_set_status(status, user_role):
            raise PermissionDeniedError()

        spec = await self.get_spec(spec_id)
        now = _now()
        spec.status = status
        spec.updated_at = now
        comment = _comment(comment_text, author or "reviewer", now)
        if comment:
            spec.comments.append(comment)

        await self._put(spec)
        logger.info("Spec %s moved to %s", spec_id, status)
        return spec

    async def update_spec(
        self,
        spec_id: str,
        canonical_spec: CanonicalSpec | dict,
        markdown_spec: str | None = None,
    ) -> StoredSpec:
        """Replace the canonical spec; markdown is only replaced when given."""
        canonical_spec = stored_canonical(canonical_spec)
        spec = await self.get_spec(spec_id)
        spec.canonical_spec = canonical_spec
        if markdown_spec is not None:
            spec.markdown_spec = markdown_spec
        spec.updated_at = _now()
        return await self._put(spec)

    async def list_specs(self) -> list[StoredSpec]:
        """All stored specs, most recently updated first."""
        specs = [StoredSpec.model_validate(raw) for raw in await self.store.list(SPECS_NAMESPACE)]
        specs.sort(key=lambda s: s.updated_at, reverse=True)
        return specs

    async def list_summaries(self) -> list[SpecSummary]:
        return [
            SpecSummary(
                id=spec.id,
                status=spec.status,
                title=(spec.canonical_spec.get("metadata") or {}).get("title") or spec.title or "Untitled",
                summary=spec.summary,
                updated_at=spec.updated_at,
            )
            for spec in await self.list_specs()
        ]

    async def delete_spec(self, spec_id: str) -> None:
        if not await self.store.delete(SPECS_NAMESPACE, spec_id):
            raise NotFoundError("Spec", spec_id)
        logger.info("Deleted spec %s", spec_id)
