"""Tests for the QuestionFormAnswers parser."""

import pytest

from crowdframe.domain.records import Answer, columns_for
from crowdframe.errors import AnswerParseError, ParseError
from crowdframe.tables.answers import parse_answer_records, parse_question_form_answers

from fakes import answer_document


def test_free_text_answer_leaves_other_fields_null():
    document = answer_document([("QuestionIdentifier", "comment"), ("FreeText", "Looks fine")])

    table = parse_question_form_answers(document, assignment_id="A1", worker_id="W1", hit_id="H1")

    assert list(table.columns) == columns_for(Answer)
    assert len(table.index) == 1
    row = table.iloc[0]
    assert row["QuestionIdentifier"] == "comment"
    assert row["FreeText"] == "Looks fine"
    for name in ("SelectionIdentifier", "OtherSelectionField", "UploadedFileKey", "UploadedFileSizeInBytes"):
        assert row[name] is None


def test_answers_follow_document_order():
    document = answer_document(
        [("QuestionIdentifier", "q3"), ("FreeText", "c")],
        [("QuestionIdentifier", "q1"), ("FreeText", "a")],
        [("QuestionIdentifier", "q2"), ("FreeText", "b")],
    )

    records = parse_answer_records(document)

    assert [record.question_identifier for record in records] == ["q3", "q1", "q2"]


def test_selection_and_other_selection_field():
    document = answer_document(
        [("QuestionIdentifier", "color"), ("SelectionIdentifier", "other"), ("OtherSelectionField", "teal")]
    )

    record = parse_answer_records(document)[0]

    assert record.selection_identifier == "other"
    assert record.other_selection_field == "teal"
    assert record.free_text is None


def test_multiple_selections_are_joined():
    document = answer_document(
        [("QuestionIdentifier", "tags"), ("SelectionIdentifier", "cat"), ("SelectionIdentifier", "dog")]
    )

    assert parse_answer_records(document)[0].selection_identifier == "cat|dog"


def test_uploaded_file_answer_has_integer_size():
    document = answer_document(
        [("QuestionIdentifier", "photo"), ("UploadedFileKey", "uploads/abc.jpg"), ("UploadedFileSizeInBytes", "20480")]
    )

    record = parse_answer_records(document)[0]

    assert record.uploaded_file_key == "uploads/abc.jpg"
    assert record.uploaded_file_size == 20480


def test_document_without_namespace_is_parsed():
    document = (
        "<QuestionFormAnswers><Answer><QuestionIdentifier>q</QuestionIdentifier>"
        "<FreeText>plain</FreeText></Answer></QuestionFormAnswers>"
    )

    assert parse_answer_records(document)[0].free_text == "plain"


def test_unknown_elements_are_ignored():
    document = answer_document([("QuestionIdentifier", "q"), ("Unexpected", "x")])

    record = parse_answer_records(document)[0]

    assert record.question_identifier == "q"
    assert record.free_text is None


def test_document_without_answers_yields_empty_table():
    table = parse_question_form_answers(answer_document())

    assert table.empty
    assert list(table.columns) == columns_for(Answer)


def test_none_document_yields_no_rows():
    assert parse_answer_records(None) == []


@pytest.mark.parametrize(
    "document",
    ["", "<QuestionFormAnswers><Answer></QuestionFormAnswers>", "plain text", "<a><b></a>"],
)
def test_malformed_documents_raise_parse_error(document):
    with pytest.raises(ParseError):
        parse_question_form_answers(document, assignment_id="A1")


def test_parse_error_names_the_assignment():
    with pytest.raises(AnswerParseError) as excinfo:
        parse_answer_records("<broken", assignment_id="A42")

    assert excinfo.value.assignment_id == "A42"
    assert "A42" in str(excinfo.value)


def test_answer_without_question_identifier_is_rejected():
    document = answer_document([("FreeText", "orphan")])

    with pytest.raises(AnswerParseError):
        parse_answer_records(document)


@pytest.mark.parametrize("tag", ["FreeText", "SelectionIdentifier", "UploadedFileKey"])
def test_empty_value_elements_are_null(tag):
    document = answer_document([("QuestionIdentifier", "q"), (tag, "")])

    table = parse_question_form_answers(document)

    assert table.iloc[0].drop("QuestionIdentifier").isna().all()


def test_self_closing_value_element_is_null():
    document = (
        "<QuestionFormAnswers><Answer><QuestionIdentifier>q</QuestionIdentifier>"
        "<FreeText/></Answer></QuestionFormAnswers>"
    )

    assert parse_answer_records(document)[0].free_text is None


def test_empty_question_identifier_is_rejected():
    document = answer_document([("QuestionIdentifier", ""), ("FreeText", "orphan")])

    with pytest.raises(AnswerParseError):
        parse_answer_records(document)
