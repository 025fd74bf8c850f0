"""Domain records and enums for CrowdFrame."""

from crowdframe.domain.enums import ALL_ASSIGNMENT_STATUSES, AssignmentStatus, ReviewLevel
from crowdframe.domain.records import (
    HIT,
    Answer,
    Assignment,
    BonusPayment,
    Qualification,
    QualificationRequest,
    QualificationRequirement,
    QualificationType,
    ReviewAction,
    ReviewableHIT,
    ReviewResult,
    WorkerBlock,
    columns_for,
)

__all__ = [
    "ALL_ASSIGNMENT_STATUSES",
    "AssignmentStatus",
    "ReviewLevel",
    "HIT",
    "Answer",
    "Assignment",
    "BonusPayment",
    "Qualification",
    "QualificationRequest",
    "QualificationRequirement",
    "QualificationType",
    "ReviewAction",
    "ReviewableHIT",
    "ReviewResult",
    "WorkerBlock",
    "columns_for",
]
