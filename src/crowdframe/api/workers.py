"""Blocked worker retrieval."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from crowdframe.collect.paginator import MAX_PAGE_SIZE, PaginatedCollector
from crowdframe.collect.retry import RetryPolicy
from crowdframe.remote.client import RemoteClient
from crowdframe.tables.converters import worker_blocks_to_table


logger = logging.getLogger(__name__)


def _block_page(items: List[Mapping[str, Any]]) -> Dict[str, pd.DataFrame]:
    return {"blocks": worker_blocks_to_table(items)}


def get_blocked_workers(
    client: RemoteClient,
    *,
    results: Optional[int] = None,
    page_size: int = MAX_PAGE_SIZE,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> pd.DataFrame:
    """List the workers blocked by the requester, with the reason given."""

    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)
    tables = collector.collect(
        "list_worker_blocks",
        [None],
        items_key="WorkerBlocks",
        convert=_block_page,
        results=results,
        page_size=page_size,
    )
    logger.info("%d Blocked Workers Retrieved", len(tables["blocks"].index))
    return tables["blocks"]
