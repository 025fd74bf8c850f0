"""Bonus payment retrieval."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from crowdframe.api.hits import resolve_hit_ids
from crowdframe.api.selectors import id_list, require_one_selector
from crowdframe.collect.paginator import (
    MAX_PAGE_SIZE,
    PaginatedCollector,
    validate_page_size,
    validate_results,
)
from crowdframe.collect.retry import RetryPolicy
from crowdframe.remote.client import RemoteClient
from crowdframe.tables.converters import bonus_payments_to_table


logger = logging.getLogger(__name__)


def _bonus_page(items: List[Mapping[str, Any]]) -> Dict[str, pd.DataFrame]:
    return {"bonuses": bonus_payments_to_table(items)}


def get_bonuses(
    client: RemoteClient,
    assignment: Any = None,
    hit: Any = None,
    hit_type: Any = None,
    annotation: Any = None,
    *,
    results: Optional[int] = None,
    page_size: int = MAX_PAGE_SIZE,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> pd.DataFrame:
    """Get the bonuses paid for assignments or for every assignment of HITs.

    Exactly one of ``assignment``, ``hit``, ``hit_type`` and ``annotation``
    must be given; the HIT selectors behave as in
    :func:`crowdframe.api.assignments.get_assignment`.
    """

    page_size = validate_page_size(page_size)
    results = validate_results(results)
    selector = require_one_selector(
        assignment=assignment, hit=hit, hit_type=hit_type, annotation=annotation
    )
    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)

    if selector == "assignment":
        parents = id_list(assignment, "assignment")
        parent_param = "AssignmentId"
    else:
        parents = resolve_hit_ids(collector, hit=hit, hit_type=hit_type, annotation=annotation)
        parent_param = "HITId"

    tables = collector.collect(
        "list_bonus_payments",
        parents,
        items_key="BonusPayments",
        convert=_bonus_page,
        parent_param=parent_param,
        results=results,
        page_size=page_size,
    )
    logger.info("%d Bonuses Retrieved", len(tables["bonuses"].index))
    return tables["bonuses"]
