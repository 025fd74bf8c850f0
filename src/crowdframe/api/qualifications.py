"""Qualification types, held qualifications and qualification requests."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from crowdframe.api.selectors import id_list, optional_params
from crowdframe.collect.paginator import MAX_PAGE_SIZE, PaginatedCollector
from crowdframe.collect.retry import RetryPolicy
from crowdframe.errors import InputError
from crowdframe.remote.client import RemoteClient
from crowdframe.tables.converters import (
    qualification_requests_to_table,
    qualification_types_to_table,
    qualifications_to_table,
)
from crowdframe.tables.frame import append_tables


logger = logging.getLogger(__name__)

QUALIFICATION_STATUSES = ("Granted", "Revoked")


def _qualification_page(items: List[Mapping[str, Any]]) -> Dict[str, pd.DataFrame]:
    return {"qualifications": qualifications_to_table(items)}


def _request_page(items: List[Mapping[str, Any]]) -> Dict[str, pd.DataFrame]:
    return {"requests": qualification_requests_to_table(items)}


def _type_page(items: List[Mapping[str, Any]]) -> Dict[str, pd.DataFrame]:
    return {"types": qualification_types_to_table(items)}


def get_qualification_type(
    client: RemoteClient,
    qual: Any,
    *,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> pd.DataFrame:
    """Fetch one qualification type, or several for a collection of ids."""

    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)
    tables = []
    for qual_id in id_list(qual, "qual"):
        response = collector.call(
            "get_qualification_type", {"QualificationTypeId": qual_id}, parent_id=qual_id
        )
        tables.append(qualification_types_to_table(response.get("QualificationType") or []))
    return append_tables(tables, list(qualification_types_to_table([]).columns))


def search_qualification_types(
    client: RemoteClient,
    query: Optional[str] = None,
    *,
    must_be_requestable: bool = False,
    must_be_owned_by_caller: bool = True,
    results: Optional[int] = None,
    page_size: int = MAX_PAGE_SIZE,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> pd.DataFrame:
    """Search the qualification type catalogue."""

    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)
    tables = collector.collect(
        "list_qualification_types",
        [None],
        items_key="QualificationTypes",
        convert=_type_page,
        results=results,
        page_size=page_size,
        params=optional_params(
            Query=query,
            MustBeRequestable=bool(must_be_requestable),
            MustBeOwnedByCaller=bool(must_be_owned_by_caller),
        ),
    )
    logger.info("%d Qualification Types Retrieved", len(tables["types"].index))
    return tables["types"]


def get_qualifications(
    client: RemoteClient,
    qual: Any,
    *,
    status: Optional[str] = None,
    results: Optional[int] = None,
    page_size: int = MAX_PAGE_SIZE,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> pd.DataFrame:
    """List the workers holding one or more qualification types.

    ``status`` restricts the list to ``"Granted"`` or ``"Revoked"``
    qualifications.
    """

    qual_ids = id_list(qual, "qual")
    if status is not None and status not in QUALIFICATION_STATUSES:
        raise InputError("Status must be one of: 'Granted', 'Revoked'")

    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)
    tables = collector.collect(
        "list_workers_with_qualification_type",
        qual_ids,
        items_key="Qualifications",
        convert=_qualification_page,
        parent_param="QualificationTypeId",
        results=results,
        page_size=page_size,
        params=optional_params(Status=status),
    )
    logger.info("%d Qualifications Retrieved", len(tables["qualifications"].index))
    return tables["qualifications"]


def get_qualification_score(
    client: RemoteClient,
    qual: str,
    worker: Any,
    *,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> pd.DataFrame:
    """Fetch the qualification ``qual`` held by one or more workers."""

    qual_id = id_list(qual, "qual")
    if len(qual_id) != 1:
        raise InputError("'qual' must be a single QualificationTypeId")

    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)
    tables = []
    for worker_id in id_list(worker, "worker"):
        response = collector.call(
            "get_qualification_score",
            {"QualificationTypeId": qual_id[0], "WorkerId": worker_id},
            parent_id=worker_id,
        )
        tables.append(qualifications_to_table(response.get("Qualification") or []))
    return append_tables(tables, list(qualifications_to_table([]).columns))


def get_qualification_requests(
    client: RemoteClient,
    qual: Optional[str] = None,
    *,
    results: Optional[int] = None,
    page_size: int = MAX_PAGE_SIZE,
    persist_on_error: bool = False,
    retry: Optional[RetryPolicy] = None,
) -> pd.DataFrame:
    """List pending qualification requests, optionally for one type only."""

    parents = id_list(qual, "qual") if qual is not None else [None]
    collector = PaginatedCollector(client, persist_on_error=persist_on_error, retry=retry)
    tables = collector.collect(
        "list_qualification_requests",
        parents,
        items_key="QualificationRequests",
        convert=_request_page,
        parent_param="QualificationTypeId" if qual is not None else None,
        results=results,
        page_size=page_size,
    )
    logger.info("%d Qualification Requests Retrieved", len(tables["requests"].index))
    return tables["requests"]
