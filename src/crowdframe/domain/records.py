"""Flat record types produced from the service's nested responses.

Each record is a frozen dataclass whose field order is the column order of
the table it belongs to. The column name of every field is the service's own
field name, stored in the field metadata, so tables from different entity
families join on identical keys.

Every ``from_response`` mapper reads the fields it knows about one by one and
treats each of them as optional: a missing field becomes ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from crowdframe.domain import coerce


def column(name: str) -> Any:
    """Declare a nullable record field stored under column ``name``."""

    return field(default=None, metadata={"column": name})


def columns_for(record_type: type) -> List[str]:
    """Return the ordered column names declared by ``record_type``."""

    return [f.metadata["column"] for f in fields(record_type)]


def record_values(record: Any) -> Dict[str, Any]:
    """Return ``record`` as an ordered ``{column: value}`` mapping."""

    return {f.metadata["column"]: getattr(record, f.name) for f in fields(record)}


@dataclass(frozen=True)
class HIT:
    """A HIT as returned by ``get_hit`` or ``list_hits``."""

    hit_id: Optional[str] = column("HITId")
    hit_type_id: Optional[str] = column("HITTypeId")
    hit_group_id: Optional[str] = column("HITGroupId")
    creation_time: Any = column("CreationTime")
    title: Optional[str] = column("Title")
    description: Optional[str] = column("Description")
    keywords: Optional[str] = column("Keywords")
    hit_status: Optional[str] = column("HITStatus")
    max_assignments: Optional[int] = column("MaxAssignments")
    amount: Optional[float] = column("Amount")
    auto_approval_delay: Optional[int] = column("AutoApprovalDelayInSeconds")
    expiration: Any = column("Expiration")
    assignment_duration: Optional[int] = column("AssignmentDurationInSeconds")
    hit_review_status: Optional[str] = column("HITReviewStatus")
    requester_annotation: Optional[str] = column("RequesterAnnotation")
    assignments_pending: Optional[int] = column("NumberOfAssignmentsPending")
    assignments_available: Optional[int] = column("NumberOfAssignmentsAvailable")
    assignments_completed: Optional[int] = column("NumberOfAssignmentsCompleted")
    question: Optional[str] = column("Question")

    @classmethod
    def from_response(cls, hit: Mapping[str, Any]) -> "HIT":
        return cls(
            hit_id=coerce.text(hit.get("HITId")),
            hit_type_id=coerce.text(hit.get("HITTypeId")),
            hit_group_id=coerce.text(hit.get("HITGroupId")),
            creation_time=coerce.instant(hit.get("CreationTime")),
            title=coerce.text(hit.get("Title")),
            description=coerce.text(hit.get("Description")),
            keywords=coerce.text(hit.get("Keywords")),
            hit_status=coerce.text(hit.get("HITStatus")),
            max_assignments=coerce.integer(hit.get("MaxAssignments")),
            amount=coerce.number(hit.get("Reward")),
            auto_approval_delay=coerce.integer(hit.get("AutoApprovalDelayInSeconds")),
            expiration=coerce.instant(hit.get("Expiration")),
            assignment_duration=coerce.integer(hit.get("AssignmentDurationInSeconds")),
            hit_review_status=coerce.text(hit.get("HITReviewStatus")),
            requester_annotation=coerce.text(hit.get("RequesterAnnotation")),
            assignments_pending=coerce.integer(hit.get("NumberOfAssignmentsPending")),
            assignments_available=coerce.integer(hit.get("NumberOfAssignmentsAvailable")),
            assignments_completed=coerce.integer(hit.get("NumberOfAssignmentsCompleted")),
            question=coerce.text(hit.get("Question")),
        )


@dataclass(frozen=True)
class ReviewableHIT:
    hit_id: Optional[str] = column("HITId")
    requester_annotation: Optional[str] = column("RequesterAnnotation")

    @classmethod
    def from_response(cls, hit: Mapping[str, Any]) -> "ReviewableHIT":
        return cls(
            hit_id=coerce.text(hit.get("HITId")),
            requester_annotation=coerce.text(hit.get("RequesterAnnotation")),
        )


@dataclass(frozen=True)
class QualificationRequirement:
    """One qualification requirement attached to a HIT.

    A HIT without requirements is represented by a single sentinel row that
    only carries the ``HITId`` so joins against the HIT table keep one row per
    HIT.
    """

    hit_id: Optional[str] = column("HITId")
    qualification_type_id: Optional[str] = column("QualificationTypeId")
    comparator: Optional[str] = column("Comparator")
    value: Optional[str] = column("Value")
    required_to_preview: Optional[bool] = column("RequiredToPreview")
    actions_guarded: Optional[str] = column("ActionsGuarded")

    @classmethod
    def sentinel(cls, hit_id: Optional[str]) -> "QualificationRequirement":
        return cls(hit_id=hit_id)

    @classmethod
    def from_response(
        cls, hit_id: Optional[str], requirement: Mapping[str, Any]
    ) -> "QualificationRequirement":
        return cls(
            hit_id=hit_id,
            qualification_type_id=coerce.text(requirement.get("QualificationTypeId")),
            comparator=coerce.text(requirement.get("Comparator")),
            value=_requirement_value(requirement),
            required_to_preview=coerce.flag(requirement.get("RequiredToPreview")),
            actions_guarded=coerce.text(requirement.get("ActionsGuarded")),
        )


@dataclass(frozen=True)
class Assignment:
    """One worker's attempt at a HIT.

    ``answer`` holds the raw answer document while the answer table is being
    built; public entry points drop that column before returning.
    """

    ANSWER_COLUMN: ClassVar[str] = "Answer"

    assignment_id: Optional[str] = column("AssignmentId")
    worker_id: Optional[str] = column("WorkerId")
    hit_id: Optional[str] = column("HITId")
    assignment_status: Optional[str] = column("AssignmentStatus")
    auto_approval_time: Any = column("AutoApprovalTime")
    accept_time: Any = column("AcceptTime")
    submit_time: Any = column("SubmitTime")
    approval_time: Any = column("ApprovalTime")
    rejection_time: Any = column("RejectionTime")
    requester_feedback: Optional[str] = column("RequesterFeedback")
    answer: Optional[str] = column("Answer")

    @classmethod
    def from_response(cls, assignment: Mapping[str, Any]) -> "Assignment":
        return cls(
            assignment_id=coerce.text(assignment.get("AssignmentId")),
            worker_id=coerce.text(assignment.get("WorkerId")),
            hit_id=coerce.text(assignment.get("HITId")),
            assignment_status=coerce.text(assignment.get("AssignmentStatus")),
            auto_approval_time=coerce.instant(assignment.get("AutoApprovalTime")),
            accept_time=coerce.instant(assignment.get("AcceptTime")),
            submit_time=coerce.instant(assignment.get("SubmitTime")),
            approval_time=coerce.instant(assignment.get("ApprovalTime")),
            rejection_time=coerce.instant(assignment.get("RejectionTime")),
            requester_feedback=coerce.text(assignment.get("RequesterFeedback")),
            answer=coerce.text(assignment.get("Answer")),
        )


@dataclass(frozen=True)
class Answer:
    """The answer to one question of an assignment's answer document.

    At most one of the value groups (free text, selection, uploaded file) is
    populated, depending on the question type.
    """

    assignment_id: Optional[str] = column("AssignmentId")
    worker_id: Optional[str] = column("WorkerId")
    hit_id: Optional[str] = column("HITId")
    question_identifier: Optional[str] = column("QuestionIdentifier")
    free_text: Optional[str] = column("FreeText")
    selection_identifier: Optional[str] = column("SelectionIdentifier")
    other_selection_field: Optional[str] = column("OtherSelectionField")
    uploaded_file_key: Optional[str] = column("UploadedFileKey")
    uploaded_file_size: Optional[int] = column("UploadedFileSizeInBytes")


@dataclass(frozen=True)
class WorkerBlock:
    worker_id: Optional[str] = column("WorkerId")
    reason: Optional[str] = column("Reason")

    @classmethod
    def from_response(cls, block: Mapping[str, Any]) -> "WorkerBlock":
        return cls(
            worker_id=coerce.text(block.get("WorkerId")),
            reason=coerce.text(block.get("Reason")),
        )


@dataclass(frozen=True)
class BonusPayment:
    assignment_id: Optional[str] = column("AssignmentId")
    worker_id: Optional[str] = column("WorkerId")
    bonus_amount: Optional[float] = column("BonusAmount")
    reason: Optional[str] = column("Reason")
    grant_time: Any = column("GrantTime")

    @classmethod
    def from_response(cls, bonus: Mapping[str, Any]) -> "BonusPayment":
        return cls(
            assignment_id=coerce.text(bonus.get("AssignmentId")),
            worker_id=coerce.text(bonus.get("WorkerId")),
            bonus_amount=coerce.number(bonus.get("BonusAmount")),
            reason=coerce.text(bonus.get("Reason")),
            grant_time=coerce.instant(bonus.get("GrantTime")),
        )


@dataclass(frozen=True)
class QualificationRequest:
    qualification_request_id: Optional[str] = column("QualificationRequestId")
    qualification_type_id: Optional[str] = column("QualificationTypeId")
    worker_id: Optional[str] = column("WorkerId")
    test: Optional[str] = column("Test")
    answer: Optional[str] = column("Answer")
    submit_time: Any = column("SubmitTime")

    @classmethod
    def from_response(cls, request: Mapping[str, Any]) -> "QualificationRequest":
        return cls(
            qualification_request_id=coerce.text(request.get("QualificationRequestId")),
            qualification_type_id=coerce.text(request.get("QualificationTypeId")),
            worker_id=coerce.text(request.get("WorkerId")),
            test=coerce.text(request.get("Test")),
            answer=coerce.text(request.get("Answer")),
            submit_time=coerce.instant(request.get("SubmitTime")),
        )


@dataclass(frozen=True)
class Qualification:
    """A qualification held by a worker."""

    qualification_type_id: Optional[str] = column("QualificationTypeId")
    worker_id: Optional[str] = column("WorkerId")
    grant_time: Any = column("GrantTime")
    value: Optional[str] = column("Value")
    status: Optional[str] = column("Status")

    @classmethod
    def from_response(cls, qualification: Mapping[str, Any]) -> "Qualification":
        value = coerce.integer(qualification.get("IntegerValue"))
        if value is not None:
            value_text: Optional[str] = str(value)
        else:
            value_text = _locale_text(qualification.get("LocaleValue"))
        return cls(
            qualification_type_id=coerce.text(qualification.get("QualificationTypeId")),
            worker_id=coerce.text(qualification.get("WorkerId")),
            grant_time=coerce.instant(qualification.get("GrantTime")),
            value=value_text,
            status=coerce.text(qualification.get("Status")),
        )


@dataclass(frozen=True)
class QualificationType:
    """An entry of the qualification type catalogue."""

    qualification_type_id: Optional[str] = column("QualificationTypeId")
    creation_time: Any = column("CreationTime")
    name: Optional[str] = column("Name")
    description: Optional[str] = column("Description")
    keywords: Optional[str] = column("Keywords")
    status: Optional[str] = column("QualificationTypeStatus")
    retry_delay: Optional[int] = column("RetryDelayInSeconds")
    is_requestable: Optional[bool] = column("IsRequestable")
    auto_granted: Optional[bool] = column("AutoGranted")

    @classmethod
    def from_response(cls, qualification_type: Mapping[str, Any]) -> "QualificationType":
        return cls(
            qualification_type_id=coerce.text(qualification_type.get("QualificationTypeId")),
            creation_time=coerce.instant(qualification_type.get("CreationTime")),
            name=coerce.text(qualification_type.get("Name")),
            description=coerce.text(qualification_type.get("Description")),
            keywords=coerce.text(qualification_type.get("Keywords")),
            status=coerce.text(qualification_type.get("QualificationTypeStatus")),
            retry_delay=coerce.integer(qualification_type.get("RetryDelayInSeconds")),
            is_requestable=coerce.flag(qualification_type.get("IsRequestable")),
            auto_granted=coerce.flag(qualification_type.get("AutoGranted")),
        )


@dataclass(frozen=True)
class ReviewResult:
    """One result entry of a review report.

    ``policy_name`` is stored under ``ReviewPolicy``; converters rename the
    column to ``AssignmentReviewPolicy`` or ``HITReviewPolicy``.
    """

    hit_id: Optional[str] = column("HITId")
    policy_name: Optional[str] = column("ReviewPolicy")
    action_id: Optional[str] = column("ActionId")
    subject_id: Optional[str] = column("SubjectId")
    subject_type: Optional[str] = column("SubjectType")
    question_id: Optional[str] = column("QuestionId")
    key: Optional[str] = column("Key")
    value: Optional[str] = column("Value")

    @classmethod
    def from_response(
        cls,
        hit_id: Optional[str],
        policy_name: Optional[str],
        result: Mapping[str, Any],
    ) -> "ReviewResult":
        return cls(
            hit_id=hit_id,
            policy_name=policy_name,
            action_id=coerce.text(result.get("ActionId")),
            subject_id=coerce.text(result.get("SubjectId")),
            subject_type=coerce.text(result.get("SubjectType")),
            question_id=coerce.text(result.get("QuestionId")),
            key=coerce.text(result.get("Key")),
            value=coerce.text(result.get("Value")),
        )


@dataclass(frozen=True)
class ReviewAction:
    hit_id: Optional[str] = column("HITId")
    policy_name: Optional[str] = column("ReviewPolicy")
    action_id: Optional[str] = column("ActionId")
    action_name: Optional[str] = column("ActionName")
    target_id: Optional[str] = column("TargetId")
    target_type: Optional[str] = column("TargetType")
    status: Optional[str] = column("Status")
    result: Optional[str] = column("Result")

    @classmethod
    def from_response(
        cls,
        hit_id: Optional[str],
        policy_name: Optional[str],
        action: Mapping[str, Any],
    ) -> "ReviewAction":
        return cls(
            hit_id=hit_id,
            policy_name=policy_name,
            action_id=coerce.text(action.get("ActionId")),
            action_name=coerce.text(action.get("ActionName")),
            target_id=coerce.text(action.get("TargetId")),
            target_type=coerce.text(action.get("TargetType")),
            status=coerce.text(action.get("Status")),
            result=coerce.text(action.get("Result")),
        )


REVIEW_POLICY_COLUMN = "ReviewPolicy"

RECORD_TYPES: Tuple[type, ...] = (
    HIT,
    ReviewableHIT,
    QualificationRequirement,
    Assignment,
    Answer,
    WorkerBlock,
    BonusPayment,
    QualificationRequest,
    Qualification,
    QualificationType,
    ReviewResult,
    ReviewAction,
)


def _requirement_value(requirement: Mapping[str, Any]) -> Optional[str]:
    integer_values = requirement.get("IntegerValues")
    if integer_values:
        return coerce.joined(coerce.integer(value) for value in coerce.as_list(integer_values))

    locale_values = requirement.get("LocaleValues")
    if locale_values:
        return coerce.joined(_locale_text(locale) for locale in coerce.as_list(locale_values))

    return None


def _locale_text(locale: Any) -> Optional[str]:
    country = coerce.text(coerce.lookup(locale, "Country"))
    if country is None:
        return None
    subdivision = coerce.text(coerce.lookup(locale, "Subdivision"))
    return f"{country}-{subdivision}" if subdivision else country
