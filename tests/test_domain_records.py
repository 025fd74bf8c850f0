"""Tests for record mappers and value coercion."""

from datetime import datetime

import pytest

from crowdframe.domain import coerce
from crowdframe.domain.enums import AssignmentStatus
from crowdframe.domain.records import (
    HIT,
    Assignment,
    Qualification,
    QualificationRequirement,
    QualificationType,
    RECORD_TYPES,
    columns_for,
)


@pytest.mark.parametrize(
    "value, expected",
    [(None, None), (5, 5), ("5", 5), (" 12 ", 12), (3.0, 3), ("3.0", 3), (2.5, None), ("abc", None), ("", None), (True, None)],
)
def test_integer_coercion(value, expected):
    assert coerce.integer(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(None, None), ("0.50", 0.5), (1, 1.0), ("n/a", None), (float("nan"), None)],
)
def test_number_coercion(value, expected):
    assert coerce.number(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), ("true", True), ("False", False), (0, False), ("maybe", None), (None, None)],
)
def test_flag_coercion(value, expected):
    assert coerce.flag(value) is expected


def test_instant_passes_timestamps_through_and_blanks_to_none():
    moment = datetime(2024, 5, 1, 10, 30)

    assert coerce.instant(moment) is moment
    assert coerce.instant("") is None
    assert coerce.instant(float("nan")) is None
    assert coerce.instant(None) is None


def test_lookup_tolerates_missing_levels():
    source = {"Policy": {"PolicyName": "ScoreMyKnownAnswers/2011-09-01"}}

    assert coerce.lookup(source, "Policy", "PolicyName") == "ScoreMyKnownAnswers/2011-09-01"
    assert coerce.lookup(source, "Missing", "PolicyName") is None
    assert coerce.lookup(None, "Policy") is None


def test_every_record_type_declares_unique_columns():
    for record_type in RECORD_TYPES:
        columns = columns_for(record_type)
        assert columns
        assert len(columns) == len(set(columns)), record_type.__name__


def test_hit_mapper_coerces_numbers_and_takes_amount_from_reward():
    hit = HIT.from_response({"HITId": "H1", "Reward": "1.25", "MaxAssignments": "9"})

    assert hit.amount == 1.25
    assert hit.max_assignments == 9
    assert hit.title is None
    assert hit.expiration is None


def test_assignment_mapper_keeps_absent_transitions_null():
    record = Assignment.from_response(
        {"AssignmentId": "A1", "AssignmentStatus": AssignmentStatus.SUBMITTED.value}
    )

    assert record.assignment_status == "Submitted"
    assert record.approval_time is None
    assert record.rejection_time is None
    assert record.accept_time is None


def test_requirement_value_joins_integer_values():
    record = QualificationRequirement.from_response(
        "H1",
        {"QualificationTypeId": "000000000000000000L0", "Comparator": "In", "IntegerValues": [95, 97, 99]},
    )

    assert record.value == "95, 97, 99"
    assert record.hit_id == "H1"


def test_requirement_value_joins_locales_with_subdivisions():
    record = QualificationRequirement.from_response(
        "H1",
        {
            "QualificationTypeId": "00000000000000000071",
            "Comparator": "In",
            "LocaleValues": [{"Country": "US", "Subdivision": "NY"}, {"Country": "CA"}],
            "RequiredToPreview": True,
        },
    )

    assert record.value == "US-NY, CA"
    assert record.required_to_preview is True


def test_requirement_without_values_has_null_value():
    record = QualificationRequirement.from_response(
        "H1", {"QualificationTypeId": "00000000000000000040", "Comparator": "Exists"}
    )

    assert record.value is None
    assert record.comparator == "Exists"


def test_qualification_value_prefers_integer_then_locale():
    assert Qualification.from_response({"IntegerValue": 80}).value == "80"
    assert Qualification.from_response({"LocaleValue": {"Country": "DE"}}).value == "DE"
    assert Qualification.from_response({}).value is None


def test_qualification_type_flags_are_booleans():
    record = QualificationType.from_response(
        {"QualificationTypeId": "Q1", "IsRequestable": True, "AutoGranted": "false", "RetryDelayInSeconds": "60"}
    )

    assert record.is_requestable is True
    assert record.auto_granted is False
    assert record.retry_delay == 60
    assert record.keywords is None


def test_assignment_status_string_value():
    assert str(AssignmentStatus.APPROVED) == "Approved"
