"""Tests for the HIT, bonus, worker, qualification and review entry points."""

import pytest

from crowdframe import (
    get_blocked_workers,
    get_bonuses,
    get_hit,
    get_qualification_requests,
    get_qualification_score,
    get_qualification_type,
    get_qualifications,
    get_review_results,
    get_reviewable_hits,
    search_hits,
    search_qualification_types,
)
from crowdframe.domain.records import HIT, QualificationRequirement, columns_for
from crowdframe.errors import HITLookupError, InputError

from fakes import FakeClient, make_hit, paged


def test_get_hit_returns_hits_and_requirements():
    hits = {
        "H1": make_hit("H1", QualificationRequirements=[{"QualificationTypeId": "Q1", "Comparator": "Exists"}]),
        "H2": make_hit("H2"),
    }
    client = FakeClient({"get_hit": lambda params: {"HIT": hits[params["HITId"]]}})

    tables = get_hit(client, ["H1", "H2"])

    assert list(tables.hits.columns) == columns_for(HIT)
    assert list(tables.hits["HITId"]) == ["H1", "H2"]
    assert list(tables.qualification_requirements.columns) == columns_for(QualificationRequirement)
    assert list(tables.qualification_requirements["HITId"]) == ["H1", "H2"]
    assert tables.qualification_requirements.at[1, "QualificationTypeId"] is None


def test_search_hits_pages_through_results():
    hits = [make_hit(f"H{i}") for i in range(7)]
    client = FakeClient({"list_hits": paged({None: hits}, "HITId", "HITs")})

    tables = search_hits(client, page_size=3)

    assert list(tables.hits["HITId"]) == [f"H{i}" for i in range(7)]
    assert len(client.calls) == 3


def test_search_hits_honours_results():
    hits = [make_hit(f"H{i}") for i in range(7)]
    client = FakeClient({"list_hits": paged({None: hits}, "HITId", "HITs")})

    tables = search_hits(client, results=5, page_size=3)

    assert len(tables.hits.index) == 5


def test_bonuses_by_assignment():
    bonuses = {
        "A1": [{"AssignmentId": "A1", "WorkerId": "W1", "BonusAmount": "1.00", "Reason": "great"}],
        "A2": [],
    }
    client = FakeClient({"list_bonus_payments": paged(bonuses, "AssignmentId", "BonusPayments")})

    table = get_bonuses(client, assignment=["A1", "A2"])

    assert list(table["AssignmentId"]) == ["A1"]
    assert table.at[0, "BonusAmount"] == pytest.approx(1.0)
    assert [params["AssignmentId"] for params in client.calls_to("list_bonus_payments")] == ["A1", "A2"]


def test_bonuses_by_hit_type():
    bonuses = {"H2": [{"AssignmentId": "A5", "WorkerId": "W1", "BonusAmount": "0.10"}]}
    client = FakeClient(
        {
            "list_hits": [{"HITs": [make_hit("H1", "T1"), make_hit("H2", "T2")]}],
            "list_bonus_payments": paged(bonuses, "HITId", "BonusPayments"),
        }
    )

    table = get_bonuses(client, hit_type="T2")

    assert list(table["AssignmentId"]) == ["A5"]
    assert client.calls_to("list_bonus_payments")[0]["HITId"] == "H2"


def test_bonuses_require_single_selector():
    with pytest.raises(InputError):
        get_bonuses(FakeClient({}), assignment="A1", hit="H1")


def test_bonuses_unknown_hit_type():
    client = FakeClient({"list_hits": [{"HITs": [make_hit("H1", "T1")]}]})

    with pytest.raises(HITLookupError):
        get_bonuses(client, hit_type="T9")


def test_blocked_workers():
    blocks = [{"WorkerId": "W1", "Reason": "spam"}, {"WorkerId": "W2"}]
    client = FakeClient({"list_worker_blocks": paged({None: blocks}, "WorkerId", "WorkerBlocks")})

    table = get_blocked_workers(client)

    assert list(table.columns) == ["WorkerId", "Reason"]
    assert list(table["WorkerId"]) == ["W1", "W2"]
    assert table.at[1, "Reason"] is None


def test_qualification_type_lookup():
    client = FakeClient(
        {
            "get_qualification_type": lambda params: {
                "QualificationType": {"QualificationTypeId": params["QualificationTypeId"], "Name": "Skill", "AutoGranted": "false"}
            }
        }
    )

    table = get_qualification_type(client, "Q1")

    assert table.at[0, "QualificationTypeId"] == "Q1"
    assert table.at[0, "AutoGranted"] is not None
    assert not table.at[0, "AutoGranted"]


def test_search_qualification_types_sends_query():
    client = FakeClient({"list_qualification_types": [{"QualificationTypes": [{"QualificationTypeId": "Q1"}]}]})

    table = search_qualification_types(client, "skill", must_be_requestable=True)

    params = client.calls[0][1]
    assert params["Query"] == "skill"
    assert params["MustBeRequestable"] is True
    assert params["MustBeOwnedByCaller"] is True
    assert list(table["QualificationTypeId"]) == ["Q1"]


def test_qualifications_for_type_with_status():
    quals = {"Q1": [{"QualificationTypeId": "Q1", "WorkerId": "W1", "IntegerValue": 80, "Status": "Granted"}]}
    client = FakeClient({"list_workers_with_qualification_type": paged(quals, "QualificationTypeId", "Qualifications")})

    table = get_qualifications(client, "Q1", status="Granted")

    assert table.at[0, "Value"] == "80"
    assert client.calls[0][1]["Status"] == "Granted"


def test_qualifications_reject_unknown_status():
    with pytest.raises(InputError):
        get_qualifications(FakeClient({}), "Q1", status="Pending")


def test_qualification_score_per_worker():
    client = FakeClient(
        {
            "get_qualification_score": lambda params: {
                "Qualification": {
                    "QualificationTypeId": params["QualificationTypeId"],
                    "WorkerId": params["WorkerId"],
                    "LocaleValue": {"Country": "US", "Subdivision": "WA"},
                }
            }
        }
    )

    table = get_qualification_score(client, "Q1", ["W1", "W2"])

    assert list(table["WorkerId"]) == ["W1", "W2"]
    assert table.at[0, "Value"] == "US-WA"


def test_qualification_score_requires_single_type():
    with pytest.raises(InputError):
        get_qualification_score(FakeClient({}), ["Q1", "Q2"], "W1")


def test_qualification_requests_without_type():
    client = FakeClient(
        {"list_qualification_requests": [{"QualificationRequests": [{"QualificationRequestId": "R1", "WorkerId": "W1"}]}]}
    )

    table = get_qualification_requests(client)

    assert list(table["QualificationRequestId"]) == ["R1"]
    assert "QualificationTypeId" not in client.calls[0][1]


def test_reviewable_hits():
    client = FakeClient({"list_reviewable_hits": [{"HITs": [{"HITId": "H1"}, {"HITId": "H2"}]}]})

    table = get_reviewable_hits(client, "T1", status="Reviewing")

    assert list(table["HITId"]) == ["H1", "H2"]
    assert client.calls[0][1]["HITTypeId"] == "T1"
    assert client.calls[0][1]["Status"] == "Reviewing"


def test_reviewable_hits_reject_unknown_status():
    with pytest.raises(InputError):
        get_reviewable_hits(FakeClient({}), status="Assignable")


def _review_page(hit_id, value, token=None):
    page = {
        "HITId": hit_id,
        "AssignmentReviewPolicy": {"PolicyName": "ScoreMyKnownAnswers/2011-09-01"},
        "AssignmentReviewReport": {
            "ReviewResults": [{"ActionId": f"X{value}", "SubjectId": "A1", "Key": "Score", "Value": str(value)}],
            "ReviewActions": [],
        },
    }
    if token:
        page["NextToken"] = token
    return page


def test_review_results_follow_tokens_for_each_hit():
    client = FakeClient(
        {
            "list_review_policy_results_for_hit": [
                _review_page("H1", 1, token="next"),
                _review_page("H1", 2),
                _review_page("H2", 3),
            ]
        }
    )

    tables = get_review_results(client, ["H1", "H2"], policy_level="Assignment")

    assert list(tables.assignment_results["Value"]) == ["1", "2", "3"]
    assert list(tables.assignment_results["HITId"]) == ["H1", "H1", "H2"]
    assert tables.hit_results.empty
    calls = client.calls_to("list_review_policy_results_for_hit")
    assert [params.get("NextToken") for params in calls] == [None, "next", None]
    assert calls[0]["PolicyLevels"] == ["Assignment"]


def test_review_results_reject_unknown_level():
    with pytest.raises(InputError):
        get_review_results(FakeClient({}), "H1", policy_level="Worker")
