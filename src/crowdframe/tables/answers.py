"""Parse QuestionFormAnswers documents into answer rows.

Every submitted assignment carries its answers as an XML document::

    <QuestionFormAnswers xmlns="http://mechanicalturk.amazonaws.com/...">
      <Answer>
        <QuestionIdentifier>color</QuestionIdentifier>
        <SelectionIdentifier>blue</SelectionIdentifier>
      </Answer>
      ...
    </QuestionFormAnswers>

Each ``Answer`` element becomes one row. Which value columns are filled
depends on the question type; the others stay null.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

import pandas as pd

from crowdframe.domain import coerce
from crowdframe.domain.records import Answer
from crowdframe.errors import AnswerParseError
from crowdframe.tables.frame import records_to_table


logger = logging.getLogger(__name__)

# Separator used when a multiple-choice question has several selections.
SELECTION_SEPARATOR = "|"


def parse_answer_records(
    document: Optional[str],
    *,
    assignment_id: Optional[str] = None,
    worker_id: Optional[str] = None,
    hit_id: Optional[str] = None,
) -> List[Answer]:
    """Return one :class:`Answer` per ``Answer`` element of ``document``.

    Rows follow document order. ``None`` yields no rows.

    Raises:
        AnswerParseError: If the document is not well-formed XML or an
            ``Answer`` element has no (or an empty) ``QuestionIdentifier``
    """
    if document is None:
        return []

    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise AnswerParseError(f"Malformed answer document: {exc}", assignment_id) from exc

    namespace = _namespace_of(root.tag)

    def qualify(name: str) -> str:
        return f"{{{namespace}}}{name}" if namespace else name

    answers: List[Answer] = []
    for element in root.iter(qualify("Answer")):
        question = _element_text(element.find(qualify("QuestionIdentifier")))
        if question is None:
            raise AnswerParseError("Answer element without QuestionIdentifier", assignment_id)

        selections = [_element_text(node) for node in element.findall(qualify("SelectionIdentifier"))]
        answers.append(
            Answer(
                assignment_id=assignment_id,
                worker_id=worker_id,
                hit_id=hit_id,
                question_identifier=question,
                free_text=_element_text(element.find(qualify("FreeText"))),
                selection_identifier=coerce.joined(selections, SELECTION_SEPARATOR),
                other_selection_field=_element_text(element.find(qualify("OtherSelectionField"))),
                uploaded_file_key=_element_text(element.find(qualify("UploadedFileKey"))),
                uploaded_file_size=coerce.integer(
                    _element_text(element.find(qualify("UploadedFileSizeInBytes")))
                ),
            )
        )

    logger.debug("Parsed %d answers for assignment %s", len(answers), assignment_id)
    return answers


def parse_question_form_answers(
    document: Optional[str],
    *,
    assignment_id: Optional[str] = None,
    worker_id: Optional[str] = None,
    hit_id: Optional[str] = None,
) -> pd.DataFrame:
    """Parse ``document`` into an answer table (see :class:`Answer`)."""

    records = parse_answer_records(
        document,
        assignment_id=assignment_id,
        worker_id=worker_id,
        hit_id=hit_id,
    )
    return records_to_table(records, Answer)


def _namespace_of(tag: str) -> Optional[str]:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def _element_text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None:
        return None
    return "".join(element.itertext()) or None
