"""Bounded retry of single remote calls.

A call moves through the states of :class:`CallState`::

    ATTEMPTING -> SUCCEEDED
    ATTEMPTING -> RETRY_PENDING -> ATTEMPTING ...   (transient failure, persisting)
    ATTEMPTING -> FAILED                            (budget spent, or not persisting)

Only :class:`~crowdframe.errors.TransientRemoteError` is retried, and only
when the caller asked to persist on errors.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from crowdframe.config.schema import CollectionConfig
from crowdframe.errors import RemoteCallFailed, RemoteError, TransientRemoteError
from crowdframe.remote.client import RemoteClient


logger = logging.getLogger(__name__)


class CallState(str, Enum):
    ATTEMPTING = "Attempting"
    SUCCEEDED = "Succeeded"
    RETRY_PENDING = "RetryPending"
    FAILED = "Failed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently a failing call is retried.

    Attributes:
        max_attempts: Total attempts, the first one included
        backoff_seconds: Fixed pause between attempts
        sleep: Function used to pause; tests pass a no-op
    """

    max_attempts: int = 5
    backoff_seconds: float = 5.0
    sleep: Callable[[float], None] = time.sleep

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must be non-negative")

    @classmethod
    def from_config(cls, config: CollectionConfig) -> "RetryPolicy":
        return cls(max_attempts=config.max_attempts, backoff_seconds=config.backoff_seconds)


class RemoteCall:
    """A single remote call together with its retry bookkeeping."""

    def __init__(
        self,
        client: RemoteClient,
        operation: str,
        params: Mapping[str, Any],
        *,
        parent_id: Optional[str] = None,
        persist_on_error: bool = False,
        policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._client = client
        self.operation = operation
        self.params = dict(params)
        self.parent_id = parent_id
        self.persist_on_error = persist_on_error
        self.policy = policy or RetryPolicy()
        self.state = CallState.ATTEMPTING
        self.attempts = 0

    def run(self) -> Mapping[str, Any]:
        """Issue the call, retrying as configured, and return the response.

        Raises:
            RemoteCallFailed: If every attempt failed with a transient error
            RemoteError: If the call failed and is not to be retried
        """

        if not self.persist_on_error:
            return self._attempt()

        retrying = Retrying(
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=wait_fixed(self.policy.backoff_seconds),
            retry=retry_if_exception_type(TransientRemoteError),
            sleep=self.policy.sleep,
            before_sleep=self._before_sleep,
        )
        try:
            for attempt in retrying:
                with attempt:
                    response = self._attempt()
        except RetryError as exc:
            self.state = CallState.FAILED
            logger.error(
                "Giving up on %s for %s after %d attempts",
                self.operation,
                self.parent_id,
                self.attempts,
            )
            raise RemoteCallFailed(self.operation, self.parent_id, self.attempts) from exc.last_attempt.exception()

        return response

    def _attempt(self) -> Mapping[str, Any]:
        self.state = CallState.ATTEMPTING
        self.attempts += 1
        try:
            response = self._client.invoke(self.operation, self.params)
        except RemoteError:
            self.state = CallState.FAILED
            raise
        self.state = CallState.SUCCEEDED
        return response

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        self.state = CallState.RETRY_PENDING
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None else None
        logger.warning(
            "Error calling %s for %s (attempt %d of %d): %s; retrying in %.1fs",
            self.operation,
            self.parent_id,
            retry_state.attempt_number,
            self.policy.max_attempts,
            error,
            self.policy.backoff_seconds,
        )
