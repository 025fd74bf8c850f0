"""CrowdFrame - flat tables from crowdsourcing task service responses.

A Python library that turns the paginated, nested responses of a HIT
marketplace API into pandas tables ready for filtering, joining and
aggregation.
"""

__version__ = "0.1.0"
__author__ = "CrowdFrame Contributors"

from crowdframe.api import (
    get_assignment,
    get_blocked_workers,
    get_bonuses,
    get_hit,
    get_qualification_requests,
    get_qualification_score,
    get_qualification_type,
    get_qualifications,
    get_review_results,
    get_reviewable_hits,
    search_hits,
    search_qualification_types,
)
from crowdframe.collect import PaginatedCollector, RetryPolicy
from crowdframe.errors import (
    AnswerParseError,
    CrowdFrameError,
    HITLookupError,
    InputError,
    ParseError,
    RemoteCallFailed,
    RemoteError,
    TransientRemoteError,
)
from crowdframe.remote import Boto3RemoteClient, RemoteClient

__all__ = [
    "AnswerParseError",
    "Boto3RemoteClient",
    "CrowdFrameError",
    "HITLookupError",
    "InputError",
    "PaginatedCollector",
    "ParseError",
    "RemoteCallFailed",
    "RemoteClient",
    "RemoteError",
    "RetryPolicy",
    "TransientRemoteError",
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
    "search_hits",
    "search_qualification_types",
]
