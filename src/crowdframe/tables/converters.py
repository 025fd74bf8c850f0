"""Convert nested service responses into flat tables.

Every converter accepts a single response object or a sequence of them and
returns rows in input order. A converter always returns its declared
columns, whichever optional fields were present in the input.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Union

import pandas as pd

from crowdframe.domain import coerce
from crowdframe.domain.enums import ReviewLevel
from crowdframe.domain.records import (
    HIT,
    REVIEW_POLICY_COLUMN,
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
from crowdframe.errors import AnswerParseError
from crowdframe.tables.answers import parse_answer_records
from crowdframe.tables.frame import records_to_table


logger = logging.getLogger(__name__)

Responses = Union[None, Mapping[str, Any], Sequence[Mapping[str, Any]]]


class AssignmentTables(NamedTuple):
    """Assignment rows together with the answers parsed from them."""

    assignments: pd.DataFrame
    answers: pd.DataFrame


class ReviewTables(NamedTuple):
    """Results and actions of assignment-level and HIT-level review reports."""

    assignment_results: pd.DataFrame
    assignment_actions: pd.DataFrame
    hit_results: pd.DataFrame
    hit_actions: pd.DataFrame

    def as_dict(self) -> dict:
        """Return the tables keyed the way the service names the reports."""

        return {
            "AssignmentReviewResult": self.assignment_results,
            "AssignmentReviewAction": self.assignment_actions,
            "HITReviewResult": self.hit_results,
            "HITReviewAction": self.hit_actions,
        }


def hits_to_table(hits: Responses) -> pd.DataFrame:
    records = [HIT.from_response(hit) for hit in coerce.as_list(hits)]
    return records_to_table(records, HIT)


def reviewable_hits_to_table(hits: Responses) -> pd.DataFrame:
    records = [ReviewableHIT.from_response(hit) for hit in coerce.as_list(hits)]
    return records_to_table(records, ReviewableHIT)


def qualification_requirements_to_table(hits: Responses) -> pd.DataFrame:
    """Expand the ``QualificationRequirements`` of each HIT into rows.

    A HIT without requirements contributes one row holding only its HITId.
    """

    records: List[QualificationRequirement] = []
    for hit in coerce.as_list(hits):
        hit_id = coerce.text(hit.get("HITId"))
        requirements = coerce.as_list(hit.get("QualificationRequirements"))
        if not requirements:
            records.append(QualificationRequirement.sentinel(hit_id))
            continue
        records.extend(
            QualificationRequirement.from_response(hit_id, requirement)
            for requirement in requirements
        )
    return records_to_table(records, QualificationRequirement)


def assignment_to_tables(assignment: Mapping[str, Any]) -> AssignmentTables:
    """Convert one assignment; its answer document becomes answer rows.

    Raises:
        AnswerParseError: If the embedded answer document is malformed
    """

    record = Assignment.from_response(assignment)
    answers = parse_answer_records(
        record.answer,
        assignment_id=record.assignment_id,
        worker_id=record.worker_id,
        hit_id=record.hit_id,
    )
    return AssignmentTables(
        assignments=records_to_table([record], Assignment),
        answers=records_to_table(answers, Answer),
    )


def assignments_to_tables(assignments: Responses) -> AssignmentTables:
    """Convert many assignments into an assignment table and an answer table.

    An assignment whose answer document cannot be parsed keeps its
    assignment row but contributes no answers; the failure is logged.
    """

    records: List[Assignment] = []
    answers: List[Answer] = []
    for assignment in coerce.as_list(assignments):
        record = Assignment.from_response(assignment)
        records.append(record)
        try:
            answers.extend(
                parse_answer_records(
                    record.answer,
                    assignment_id=record.assignment_id,
                    worker_id=record.worker_id,
                    hit_id=record.hit_id,
                )
            )
        except AnswerParseError as exc:
            logger.warning("Skipping answers of assignment %s: %s", record.assignment_id, exc)

    return AssignmentTables(
        assignments=records_to_table(records, Assignment),
        answers=records_to_table(answers, Answer),
    )


def question_form_answers_to_table(
    assignment: Mapping[str, Any], document: Optional[str] = None
) -> pd.DataFrame:
    """Parse the answers of ``assignment`` into an answer table.

    ``document`` overrides the assignment's own ``Answer`` field.
    """

    record = Assignment.from_response(assignment)
    answers = parse_answer_records(
        document if document is not None else record.answer,
        assignment_id=record.assignment_id,
        worker_id=record.worker_id,
        hit_id=record.hit_id,
    )
    return records_to_table(answers, Answer)


def worker_blocks_to_table(blocks: Responses) -> pd.DataFrame:
    records = [WorkerBlock.from_response(block) for block in coerce.as_list(blocks)]
    return records_to_table(records, WorkerBlock)


def bonus_payments_to_table(bonuses: Responses) -> pd.DataFrame:
    records = [BonusPayment.from_response(bonus) for bonus in coerce.as_list(bonuses)]
    return records_to_table(records, BonusPayment)


def qualification_requests_to_table(requests: Responses) -> pd.DataFrame:
    records = [QualificationRequest.from_response(request) for request in coerce.as_list(requests)]
    return records_to_table(records, QualificationRequest)


def qualifications_to_table(qualifications: Responses) -> pd.DataFrame:
    records = [Qualification.from_response(qual) for qual in coerce.as_list(qualifications)]
    return records_to_table(records, Qualification)


def qualification_types_to_table(qualification_types: Responses) -> pd.DataFrame:
    records = [
        QualificationType.from_response(qualification_type)
        for qualification_type in coerce.as_list(qualification_types)
    ]
    return records_to_table(records, QualificationType)


def review_results_to_tables(reports: Responses) -> ReviewTables:
    """Flatten review policy results for one or more HITs.

    ``reports`` are ``list_review_policy_results_for_hit`` responses. Each
    result or action becomes one row carrying the HITId and policy name.
    Levels without a report yield empty tables with the declared columns.
    """

    results = {level: [] for level in ReviewLevel}
    actions = {level: [] for level in ReviewLevel}

    for report in coerce.as_list(reports):
        hit_id = coerce.text(report.get("HITId"))
        for level in ReviewLevel:
            body = report.get(f"{level.value}ReviewReport")
            if not body:
                continue
            policy_name = coerce.text(coerce.lookup(report, f"{level.value}ReviewPolicy", "PolicyName"))
            results[level].extend(
                ReviewResult.from_response(hit_id, policy_name, result)
                for result in coerce.as_list(body.get("ReviewResults"))
            )
            actions[level].extend(
                ReviewAction.from_response(hit_id, policy_name, action)
                for action in coerce.as_list(body.get("ReviewActions"))
            )

    return ReviewTables(
        assignment_results=_review_table(results[ReviewLevel.ASSIGNMENT], ReviewResult, ReviewLevel.ASSIGNMENT),
        assignment_actions=_review_table(actions[ReviewLevel.ASSIGNMENT], ReviewAction, ReviewLevel.ASSIGNMENT),
        hit_results=_review_table(results[ReviewLevel.HIT], ReviewResult, ReviewLevel.HIT),
        hit_actions=_review_table(actions[ReviewLevel.HIT], ReviewAction, ReviewLevel.HIT),
    )


def strip_answer_column(table: pd.DataFrame) -> pd.DataFrame:
    """Drop the raw answer document column from an assignment table."""

    return table.drop(columns=[Assignment.ANSWER_COLUMN], errors="ignore")


def _review_table(records: Iterable[Any], record_type: type, level: ReviewLevel) -> pd.DataFrame:
    return records_to_table(
        list(records),
        record_type,
        rename={REVIEW_POLICY_COLUMN: f"{level.value}ReviewPolicy"},
    )
