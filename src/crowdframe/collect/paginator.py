"""Paginated collection of list operations across several parents."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from crowdframe.collect.retry import RemoteCall, RetryPolicy
from crowdframe.errors import InputError
from crowdframe.remote.client import RemoteClient
from crowdframe.tables.frame import append_tables


logger = logging.getLogger(__name__)

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# Turns the items of one page into named tables. Called with an empty list,
# it must return empty tables with the declared columns.
PageConverter = Callable[[List[Mapping[str, Any]]], Mapping[str, pd.DataFrame]]


def validate_page_size(page_size: Any) -> int:
    """Return ``page_size`` as an int, raising :class:`InputError` if out of range."""

    if isinstance(page_size, bool):
        raise InputError(f"page size must be an integer, got {page_size!r}")
    try:
        value = int(page_size)
    except (TypeError, ValueError) as exc:
        raise InputError(f"page size must be an integer, got {page_size!r}") from exc
    if value != page_size or not MIN_PAGE_SIZE <= value <= MAX_PAGE_SIZE:
        raise InputError(
            f"page size must be in range ({MIN_PAGE_SIZE} to {MAX_PAGE_SIZE}), got {page_size!r}"
        )
    return value


def validate_results(results: Any) -> Optional[int]:
    """Return the row ceiling as an int (``None`` means unbounded)."""

    if results is None:
        return None
    if isinstance(results, bool):
        raise InputError(f"results must be an integer, got {results!r}")
    try:
        value = int(results)
    except (TypeError, ValueError) as exc:
        raise InputError(f"results must be an integer, got {results!r}") from exc
    if value != results or value < 1:
        raise InputError(f"results must be a positive integer, got {results!r}")
    return value


class PaginatedCollector:
    """Drive a list operation page by page for each parent identifier.

    Calls are issued one at a time. Rows are appended in the order the
    parents were given and the order the service returned them.
    """

    def __init__(
        self,
        client: RemoteClient,
        *,
        persist_on_error: bool = False,
        retry: Optional[RetryPolicy] = None,
    ) -> None:
        self.client = client
        self.persist_on_error = persist_on_error
        self.retry = retry or RetryPolicy()
        self.calls = 0

    def call(
        self,
        operation: str,
        params: Mapping[str, Any],
        *,
        parent_id: Optional[str] = None,
    ) -> Mapping[str, Any]:
        """Issue one remote call under this collector's retry settings."""

        remote_call = RemoteCall(
            self.client,
            operation,
            params,
            parent_id=parent_id,
            persist_on_error=self.persist_on_error,
            policy=self.retry,
        )
        self.calls += 1
        return remote_call.run()

    def collect(
        self,
        operation: str,
        parents: Iterable[Optional[str]],
        *,
        items_key: str,
        convert: PageConverter,
        parent_param: Optional[str] = None,
        results: Optional[int] = None,
        page_size: int = MAX_PAGE_SIZE,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, pd.DataFrame]:
        """Collect every page of ``operation`` for each parent in ``parents``.

        Args:
            operation: Remote list operation, e.g. ``list_assignments_for_hit``
            parents: Parent identifiers in the order to visit them; use
                ``[None]`` for operations without a parent
            items_key: Response field holding the page's items
            convert: Page converter producing the named tables
            parent_param: Request field that receives the parent identifier
            results: Ceiling on the number of items collected overall
            page_size: Items requested per page, 1 to 100
            params: Extra request fields sent with every call

        Returns:
            Mapping of table name to the accumulated table

        Raises:
            InputError: If ``page_size`` or ``results`` is invalid
            RemoteError: If a call fails and is not (or no longer) retried
        """

        page_size = validate_page_size(page_size)
        results = validate_results(results)
        empty = convert([])
        pages: Dict[str, List[pd.DataFrame]] = {name: [] for name in empty}
        total = 0

        for parent in parents:
            if results is not None and total >= results:
                logger.info("Reached %d results; not fetching %s", results, parent)
                break
            fetched = self._collect_parent(
                operation,
                parent,
                pages,
                items_key=items_key,
                convert=convert,
                parent_param=parent_param,
                remaining=None if results is None else results - total,
                page_size=page_size,
                params=params or {},
            )
            total += fetched
            logger.info("Retrieved %d items from %s for %s", fetched, operation, parent)

        logger.info("%s: %d items retrieved in %d calls", operation, total, self.calls)
        return {
            name: append_tables(frames, list(empty[name].columns))
            for name, frames in pages.items()
        }

    def _collect_parent(
        self,
        operation: str,
        parent: Optional[str],
        pages: Dict[str, List[pd.DataFrame]],
        *,
        items_key: str,
        convert: PageConverter,
        parent_param: Optional[str],
        remaining: Optional[int],
        page_size: int,
        params: Mapping[str, Any],
    ) -> int:
        fetched = 0
        token: Optional[str] = None
        while remaining is None or fetched < remaining:
            request: Dict[str, Any] = dict(params)
            if parent_param is not None:
                request[parent_param] = parent
            request["MaxResults"] = (
                page_size if remaining is None else min(page_size, remaining - fetched)
            )
            if token:
                request["NextToken"] = token

            response = self.call(operation, request, parent_id=parent)
            items: Sequence[Mapping[str, Any]] = list(response.get(items_key) or [])
            if remaining is not None:
                items = items[: remaining - fetched]
            if items:
                for name, table in convert(list(items)).items():
                    pages[name].append(table)
                fetched += len(items)
                logger.debug("Page of %d items from %s for %s", len(items), operation, parent)

            token = response.get("NextToken")
            if not token or not items:
                break
        return fetched
