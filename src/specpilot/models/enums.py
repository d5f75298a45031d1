"""String enums for canonical specs, the review workflow and destinations."""

from enum import StrEnum


class PiiClassification(StrEnum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReviewStatus(StrEnum):
    """Status of a persisted spec in the review workflow."""

    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    CHANGES_REQUESTED = "changes_requested"
    VALIDATED = "validated"
    APPROVED = "approved"


# Statuses that only an approver may set
APPROVER_ONLY_STATUSES = frozenset({ReviewStatus.VALIDATED, ReviewStatus.APPROVED})


class UserRole(StrEnum):
    REQUESTER = "requester"
    REVIEWER = "reviewer"
    APPROVER = "approver"


class Destination(StrEnum):
    SEGMENT = "segment"
    TEALIUM = "tealium"
    MPARTICLE = "mparticle"
    ADOBE = "adobe"
    ENTERPRISE = "enterprise"
