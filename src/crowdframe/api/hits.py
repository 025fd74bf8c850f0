"""HIT lookup and search."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

import pandas as pd

from crowdframe.api.selectors import (
    annotation_pattern,
    hits_matching_annotation,
    hits_matching_type,
    id_list,
)
from crowdframe.collect.paginator import MAX_PAGE_SIZE, PaginatedCollector
from crowdframe.collect.retry import RetryPolicy
from crowdframe.remote.client import RemoteClient
from crowdframe.tables.converters import hits_to_table, qualification_requirements_to_table
from crowdframe.tables.frame import append_tables


logger = logging.getLogger(__name__)


class HITTables(NamedTuple):
    """HIT rows and the qualification requirements attached to them."""

    hits: pd.DataFrame
    qualification_requirements: pd.DataFrame


def _hit_page(items: List[Mapping[str, Any]]) -> Dict[str, pd.DataFrame]:
    return {
        "hits": hits_to_table(items),
        "qualification_requirements": qualification_requirements_to_table(items),
    }


def get_hit(
    client: RemoteClient,
    hit: Any,
    *,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> HITTables:
    """Fetch one HIT, or several when ``hit`` is a collection of HITIds."""

    hit_ids = id_list(hit, "hit")
    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)

    hits: List[pd.DataFrame] = []
    requirements: List[pd.DataFrame] = []
    for hit_id in hit_ids:
        response = collector.call("get_hit", {"HITId": hit_id}, parent_id=hit_id)
        tables = _hit_page([response.get("HIT") or {"HITId": hit_id}])
        hits.append(tables["hits"])
        requirements.append(tables["qualification_requirements"])
        logger.debug("HIT %s retrieved", hit_id)

    empty = _hit_page([])
    return HITTables(
        hits=append_tables(hits, list(empty["hits"].columns)),
        qualification_requirements=append_tables(
            requirements, list(empty["qualification_requirements"].columns)
        ),
    )


def search_hits(
    client: RemoteClient,
    *,
    results: Optional[int] = None,
    page_size: int = MAX_PAGE_SIZE,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
    collector: Optional[PaginatedCollector] = None,
) -> HITTables:
    """List the requester's HITs page by page."""

    collector = collector or PaginatedCollector(
        client, persist_on_error=persist_on_error, retry=retry
    )
    tables = collector.collect(
        "list_hits",
        [None],
        items_key="HITs",
        convert=_hit_page,
        results=results,
        page_size=page_size,
    )
    logger.info("%d HITs retrieved", len(tables["hits"].index))
    return HITTables(
        hits=tables["hits"],
        qualification_requirements=tables["qualification_requirements"],
    )


def resolve_hit_ids(
    collector: PaginatedCollector,
    *,
    hit: Any = None,
    hit_type: Any = None,
    annotation: Any = None,
) -> List[str]:
    """Turn exactly one HIT selector into the list of HITIds it denotes.

    ``hit`` is taken as given. ``hit_type`` and ``annotation`` are matched
    against the requester's HITs (``annotation`` as a regular expression
    searched in ``RequesterAnnotation``).

    Raises:
        InputError: If the selector value is unusable
        HITLookupError: If the selector matches no HIT
    """

    if hit is not None:
        return id_list(hit, "hit")

    if hit_type is not None:
        hit_types = id_list(hit_type, "hit_type")
        hits = search_hits(collector.client, collector=collector).hits
        return hits_matching_type(hits, hit_types)

    pattern = annotation_pattern(annotation)
    hits = search_hits(collector.client, collector=collector).hits
    return hits_matching_annotation(hits, pattern)
