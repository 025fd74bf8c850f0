"""Reviewable HITs and review policy results."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from crowdframe.api.selectors import id_list, optional_params
from crowdframe.collect.paginator import MAX_PAGE_SIZE, PaginatedCollector, validate_page_size
from crowdframe.collect.retry import RetryPolicy
from crowdframe.domain.enums import ReviewLevel
from crowdframe.errors import InputError
from crowdframe.remote.client import RemoteClient
from crowdframe.tables.converters import (
    ReviewTables,
    review_results_to_tables,
    reviewable_hits_to_table,
)
from crowdframe.tables.frame import append_tables


logger = logging.getLogger(__name__)

REVIEWABLE_STATUSES = ("Reviewable", "Reviewing")


def _reviewable_page(items: List[Mapping[str, Any]]) -> Dict[str, pd.DataFrame]:
    return {"hits": reviewable_hits_to_table(items)}


def get_reviewable_hits(
    client: RemoteClient,
    hit_type: Optional[str] = None,
    *,
    status: str = "Reviewable",
    results: Optional[int] = None,
    page_size: int = MAX_PAGE_SIZE,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> pd.DataFrame:
    """List HITs that are ready for review (or being reviewed)."""

    if status not in REVIEWABLE_STATUSES:
        raise InputError("Status must be one of: 'Reviewable', 'Reviewing'")

    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)
    tables = collector.collect(
        "list_reviewable_hits",
        [None],
        items_key="HITs",
        convert=_reviewable_page,
        results=results,
        page_size=page_size,
        params=optional_params(HITTypeId=hit_type, Status=status),
    )
    logger.info("%d Reviewable HITs Retrieved", len(tables["hits"].index))
    return tables["hits"]


def get_review_results(
    client: RemoteClient,
    hit: Any,
    *,
    policy_level: Any = None,
    retrieve_actions: bool = True,
    retrieve_results: bool = True,
    page_size: int = MAX_PAGE_SIZE,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> ReviewTables:
    """Get the review policy results and actions for one or more HITs.

    ``policy_level`` limits the reports to ``"Assignment"`` or ``"HIT"``
    (both by default). Every page of every HIT's report is fetched.
    """

    page_size = validate_page_size(page_size)
    hit_ids = id_list(hit, "hit")
    levels = _policy_levels(policy_level)
    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)

    pages: List[ReviewTables] = []
    for hit_id in hit_ids:
        token: Optional[str] = None
        while True:
            response = collector.call(
                "list_review_policy_results_for_hit",
                optional_params(
                    HITId=hit_id,
                    PolicyLevels=levels,
                    RetrieveActions=bool(retrieve_actions),
                    RetrieveResults=bool(retrieve_results),
                    MaxResults=page_size,
                    NextToken=token,
                ),
                parent_id=hit_id,
            )
            pages.append(review_results_to_tables(response))
            token = response.get("NextToken")
            if not token:
                break
        logger.debug("Review results for HIT %s retrieved", hit_id)

    empty = review_results_to_tables([])
    return ReviewTables(
        *(
            append_tables((page[index] for page in pages), list(empty[index].columns))
            for index in range(len(empty))
        )
    )


def _policy_levels(policy_level: Any) -> List[str]:
    if policy_level is None:
        return [level.value for level in ReviewLevel]
    values = [policy_level] if isinstance(policy_level, str) else list(policy_level)
    allowed = {level.value for level in ReviewLevel}
    if not values or any(str(value) not in allowed for value in values):
        raise InputError("policy_level must contain 'Assignment' and/or 'HIT'")
    return [str(value) for value in values]
