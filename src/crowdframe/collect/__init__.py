"""Remote call retry and paginated collection."""

from crowdframe.collect.paginator import (
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    PaginatedCollector,
    validate_page_size,
    validate_results,
)
from crowdframe.collect.retry import CallState, RemoteCall, RetryPolicy

__all__ = [
    "CallState",
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "PaginatedCollector",
    "RemoteCall",
    "RetryPolicy",
    "validate_page_size",
    "validate_results",
]
