"""The narrow call interface CrowdFrame uses to reach the remote service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from crowdframe.config.schema import ClientConfig
from crowdframe.errors import RemoteError, TransientRemoteError


logger = logging.getLogger(__name__)

# Error codes reported by the service that are worth retrying.
TRANSIENT_ERROR_CODES = frozenset(
    {
        "ServiceUnavailable",
        "ServiceFault",
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "RequestTimeout",
        "RequestTimeoutException",
        "InternalFailure",
    }
)

# Connection level exception class names raised by botocore.
TRANSIENT_EXCEPTION_NAMES = frozenset(
    {
        "EndpointConnectionError",
        "ConnectionClosedError",
        "ConnectTimeoutError",
        "ReadTimeoutError",
        "ConnectionError",
        "TimeoutError",
    }
)


class RemoteClient(Protocol):
    """Anything that can invoke a named service operation.

    Inputs:
        operation: snake_case operation name, e.g. ``list_assignments_for_hit``
        params: request parameters using the service's field names
    Outputs:
        Mapping mirroring the documented response shape

    Raises:
        TransientRemoteError: for failures that may succeed when retried
        RemoteError: for every other failure
    """

    def invoke(self, operation: str, params: Mapping[str, Any]) -> Mapping[str, Any]:  # pragma: no cover - interface
        ...


class Boto3RemoteClient:
    """:class:`RemoteClient` backed by a boto3 ``mturk`` client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Boto3RemoteClient":
        """Create the underlying boto3 client from ``config``."""

        try:
            import boto3  # type: ignore[import-not-found]
        except ModuleNotFoundError as exc:  # pragma: no cover - import guard
            message = (
                "boto3 is required to talk to the remote service. "
                "Install it with `pip install crowdframe[mturk]` or pass your own "
                "object implementing `invoke(operation, params)`."
            )
            raise ModuleNotFoundError(message) from exc

        session = boto3.Session(profile_name=config.profile_name)
        endpoint = config.endpoint()
        logger.info("Connecting to %s (region %s)", endpoint or "default endpoint", config.region_name)
        client = session.client(
            "mturk",
            region_name=config.region_name,
            endpoint_url=endpoint,
        )
        return cls(client)

    def invoke(self, operation: str, params: Mapping[str, Any]) -> Mapping[str, Any]:
        method = getattr(self._client, operation, None)
        if method is None:
            raise RemoteError(f"Unknown operation: {operation}", operation=operation)

        request: Dict[str, Any] = {key: value for key, value in params.items() if value is not None}
        logger.debug("Calling %s with %s", operation, request)
        try:
            return method(**request)
        except Exception as exc:
            raise classify_error(operation, exc) from exc


def classify_error(operation: str, exc: BaseException) -> RemoteError:
    """Translate an exception raised by the service client into our taxonomy."""

    code = _error_code(exc)
    names = {klass.__name__ for klass in type(exc).__mro__}
    message = f"{operation} failed: {exc}"
    if (code and code in TRANSIENT_ERROR_CODES) or names & TRANSIENT_EXCEPTION_NAMES:
        return TransientRemoteError(message, operation=operation)
    return RemoteError(message, operation=operation)


def _error_code(exc: BaseException) -> Optional[str]:
    response = getattr(exc, "response", None)
    if not isinstance(response, Mapping):
        return None
    error = response.get("Error")
    if not isinstance(error, Mapping):
        return None
    code = error.get("Code")
    return str(code) if code else None
