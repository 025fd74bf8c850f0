"""Table construction and response converters."""

from crowdframe.tables.answers import parse_answer_records, parse_question_form_answers
from crowdframe.tables.converters import (
    AssignmentTables,
    ReviewTables,
    assignment_to_tables,
    assignments_to_tables,
    bonus_payments_to_table,
    hits_to_table,
    qualification_requests_to_table,
    qualification_requirements_to_table,
    qualification_types_to_table,
    qualifications_to_table,
    question_form_answers_to_table,
    review_results_to_tables,
    reviewable_hits_to_table,
    strip_answer_column,
    worker_blocks_to_table,
)
from crowdframe.tables.frame import append_tables, make_table, records_to_table

__all__ = [
    "AssignmentTables",
    "ReviewTables",
    "append_tables",
    "assignment_to_tables",
    "assignments_to_tables",
    "bonus_payments_to_table",
    "hits_to_table",
    "make_table",
    "parse_answer_records",
    "parse_question_form_answers",
    "qualification_requests_to_table",
    "qualification_requirements_to_table",
    "qualification_types_to_table",
    "qualifications_to_table",
    "question_form_answers_to_table",
    "records_to_table",
    "review_results_to_tables",
    "reviewable_hits_to_table",
    "strip_answer_column",
    "worker_blocks_to_table",
]
