"""Argument validation and HIT resolution shared by the public entry points."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

from crowdframe.domain.enums import ALL_ASSIGNMENT_STATUSES, AssignmentStatus
from crowdframe.errors import HITLookupError, InputError


logger = logging.getLogger(__name__)


def require_one_selector(**selectors: Any) -> str:
    """Return the name of the single selector that was supplied.

    Raises:
        InputError: If none or more than one of ``selectors`` is set
    """

    supplied = [name for name, value in selectors.items() if value is not None]
    names = " xor ".join(f"'{name}'" for name in selectors)
    if len(supplied) != 1:
        raise InputError(f"Must provide {names} (got {len(supplied)})")
    return supplied[0]


def id_list(value: Any, name: str) -> List[str]:
    """Normalise a single identifier or a collection of them into a list.

    Accepts strings, lists, tuples and pandas Series / Index objects.
    """

    if isinstance(value, str):
        values: Iterable[Any] = [value]
    elif isinstance(value, (pd.Series, pd.Index)):
        values = value.tolist()
    else:
        try:
            values = list(value)
        except TypeError:
            values = [value]

    ids = [str(item) for item in values if not _is_missing(item) and str(item).strip()]
    if not ids:
        raise InputError(f"'{name}' must contain at least one identifier")
    return ids


def assignment_statuses(status: Any) -> List[str]:
    """Validate an assignment status filter.

    ``None`` selects every status. An explicit filter must be a non-empty
    subset of Approved, Rejected and Submitted.
    """

    if status is None:
        return [s.value for s in ALL_ASSIGNMENT_STATUSES]

    values = [status] if isinstance(status, str) else list(status)
    allowed = {s.value for s in AssignmentStatus}
    invalid = [value for value in values if str(value) not in allowed]
    if not values or invalid:
        raise InputError(
            "Status must contain one or more of: 'Approved', 'Rejected', 'Submitted'"
            + (f" (invalid: {invalid!r})" if invalid else "")
        )

    statuses: List[str] = []
    for value in values:
        if str(value) not in statuses:
            statuses.append(str(value))
    return statuses


def annotation_pattern(annotation: Any) -> "re.Pattern[str]":
    """Compile an annotation selector into a regular expression."""

    if _is_missing(annotation) or not str(annotation):
        raise InputError("Annotation is NA")
    try:
        return re.compile(str(annotation))
    except re.error as exc:
        raise InputError(f"Invalid annotation pattern {annotation!r}: {exc}") from exc


def hits_matching_type(hits: pd.DataFrame, hit_types: List[str]) -> List[str]:
    """Return the HITIds of ``hits`` whose HITTypeId is one of ``hit_types``.

    Raises:
        HITLookupError: If no HIT matches
    """

    wanted = set(hit_types)
    matches = [
        row["HITId"]
        for _, row in hits.iterrows()
        if row["HITId"] is not None and row["HITTypeId"] in wanted
    ]
    if not matches:
        raise HITLookupError(f"No HITs found matching HITTypeId {', '.join(hit_types)}")
    logger.info("Resolved %d HITs for HITTypeId %s", len(matches), ", ".join(hit_types))
    return matches


def hits_matching_annotation(hits: pd.DataFrame, pattern: "re.Pattern[str]") -> List[str]:
    """Return the HITIds of ``hits`` whose RequesterAnnotation matches ``pattern``.

    Raises:
        HITLookupError: If no HIT matches
    """

    matches = [
        row["HITId"]
        for _, row in hits.iterrows()
        if row["HITId"] is not None
        and row["RequesterAnnotation"] is not None
        and pattern.search(str(row["RequesterAnnotation"]))
    ]
    if not matches:
        raise HITLookupError(f"No HITs found matching Annotation {pattern.pattern!r}")
    logger.info("Resolved %d HITs for annotation %r", len(matches), pattern.pattern)
    return matches


def optional_params(**params: Any) -> Mapping[str, Any]:
    """Return ``params`` without the entries that are ``None``."""

    return {key: value for key, value in params.items() if value is not None}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)
