"""Public entry points, one module per entity family."""

from crowdframe.api.assignments import get_assignment
from crowdframe.api.bonuses import get_bonuses
from crowdframe.api.hits import HITTables, get_hit, resolve_hit_ids, search_hits
from crowdframe.api.qualifications import (
    get_qualification_requests,
    get_qualification_score,
    get_qualification_type,
    get_qualifications,
    search_qualification_types,
)
from crowdframe.api.reviews import get_review_results, get_reviewable_hits
from crowdframe.api.workers import get_blocked_workers

__all__ = [
    "HITTables",
    "get_assignment",
    "get_blocked_workers",
    "get_bonuses",
    "get_hit",
    "get_qualification_requests",
    "get_qualification_score",
    "get_qualification_type",
    "get_qualifications",
    "get_review_results",
    "get_reviewable_hits",
    "resolve_hit_ids",
    "search_hits",
    "search_qualification_types",
]
