"""Enums for the CrowdFrame domain model."""

from enum import Enum


class AssignmentStatus(str, Enum):
    """Lifecycle states of an assignment as reported by the service."""

    APPROVED = "Approved"
    REJECTED = "Rejected"
    SUBMITTED = "Submitted"

    def __str__(self) -> str:
        """Return the string value of the enum."""
        return self.value


class ReviewLevel(str, Enum):
    """Subject level of a review policy report."""

    ASSIGNMENT = "Assignment"
    HIT = "HIT"

    def __str__(self) -> str:
        return self.value


ALL_ASSIGNMENT_STATUSES = (
    AssignmentStatus.APPROVED,
    AssignmentStatus.REJECTED,
    AssignmentStatus.SUBMITTED,
)
