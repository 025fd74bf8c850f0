"""Assignment retrieval.

Assignments can be fetched by AssignmentId, or collected for a set of HITs
given directly, by HITTypeId, or by a pattern matched against the HITs'
RequesterAnnotation (for instance ``"BatchId:78382;"`` for a batch created
in the requester web interface).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import pandas as pd

from crowdframe.api.hits import resolve_hit_ids
from crowdframe.api.selectors import assignment_statuses, id_list, require_one_selector
from crowdframe.collect.paginator import (
    MAX_PAGE_SIZE,
    PaginatedCollector,
    validate_page_size,
    validate_results,
)
from crowdframe.collect.retry import RetryPolicy
from crowdframe.remote.client import RemoteClient
from crowdframe.tables.converters import (
    AssignmentTables,
    assignments_to_tables,
    strip_answer_column,
)
from crowdframe.tables.frame import append_tables


logger = logging.getLogger(__name__)


def _assignment_page(items: List[Mapping[str, Any]]) -> Dict[str, pd.DataFrame]:
    tables = assignments_to_tables(items)
    return {"assignments": tables.assignments, "answers": tables.answers}


def get_assignment(
    client: RemoteClient,
    assignment: Any = None,
    hit: Any = None,
    hit_type: Any = None,
    annotation: Any = None,
    *,
    status: Any = None,
    results: Optional[int] = None,
    page_size: int = MAX_PAGE_SIZE,
    get_answers: bool = False,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> Union[pd.DataFrame, AssignmentTables]:
    """Get one or more assignments as a table.

    Exactly one of ``assignment``, ``hit``, ``hit_type`` and ``annotation``
    must be given. For the HIT based selectors every page of every HIT is
    fetched until the HITs are exhausted or ``results`` assignments have
    been collected.

    Args:
        client: Remote client used for every call
        assignment: AssignmentId, or a collection of them
        hit: HITId, or a collection of them
        hit_type: HITTypeId, or a collection of them
        annotation: Regular expression searched in RequesterAnnotation
        status: Assignment statuses to include (default: all of them);
            only used with the HIT based selectors
        results: Maximum number of assignments to return
        page_size: Assignments requested per call, 1 to 100
        get_answers: Also return the parsed answers
        persist_on_error: Retry transient failures (up to the retry
            policy's attempts) instead of failing on the first one
        retry: Retry policy, defaults to 5 attempts 5 seconds apart

    Returns:
        The assignment table, or an :class:`AssignmentTables` pair when
        ``get_answers`` is true. The raw ``Answer`` column is dropped.

    Raises:
        InputError: If the arguments are invalid
        HITLookupError: If a hit_type or annotation selector matches no HIT
        RemoteError: If a remote call fails
    """
    page_size = validate_page_size(page_size)
    results = validate_results(results)
    selector = require_one_selector(
        assignment=assignment, hit=hit, hit_type=hit_type, annotation=annotation
    )
    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)

    if selector == "assignment":
        tables = _assignments_by_id(collector, id_list(assignment, "assignment"))
    else:
        statuses = assignment_statuses(status)
        hit_ids = resolve_hit_ids(collector, hit=hit, hit_type=hit_type, annotation=annotation)
        logger.info("Collecting assignments for %d HITs", len(hit_ids))
        tables = collector.collect(
            "list_assignments_for_hit",
            hit_ids,
            items_key="Assignments",
            convert=_assignment_page,
            parent_param="HITId",
            results=results,
            page_size=page_size,
            params={"AssignmentStatuses": statuses},
        )

    assignments = strip_answer_column(tables["assignments"])
    logger.info("%d Assignments Retrieved", len(assignments.index))
    if get_answers:
        return AssignmentTables(assignments=assignments, answers=tables["answers"])
    return assignments


def _assignments_by_id(
    collector: PaginatedCollector, assignment_ids: List[str]
) -> Dict[str, pd.DataFrame]:
    pages = []
    for assignment_id in assignment_ids:
        response = collector.call(
            "get_assignment", {"AssignmentId": assignment_id}, parent_id=assignment_id
        )
        pages.append(_assignment_page([response.get("Assignment") or {"AssignmentId": assignment_id}]))
        logger.debug("Assignment %s Retrieved", assignment_id)

    empty = _assignment_page([])
    return {
        name: append_tables((page[name] for page in pages), list(empty[name].columns))
        for name in empty
    }
