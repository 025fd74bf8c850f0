"""Error taxonomy for CrowdFrame.

Input and lookup problems are raised before any remote call is issued.
Remote failures are split into transient ones, which the collector may
retry, and everything else, which is surfaced immediately.
"""

from __future__ import annotations

from typing import Optional


class CrowdFrameError(Exception):
    """Base class for all errors raised by this package."""


class InputError(CrowdFrameError, ValueError):
    """Invalid or ambiguous arguments supplied by the caller."""


class HITLookupError(CrowdFrameError, LookupError):
    """A selector resolved to zero HITs."""


class RemoteError(CrowdFrameError):
    """A remote call was rejected or failed in a non-retryable way."""

    def __init__(self, message: str, *, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.operation = operation


class TransientRemoteError(RemoteError):
    """A remote call failed in a way that may succeed when retried."""


class RemoteCallFailed(RemoteError):
    """A remote call kept failing until the retry budget was exhausted."""

    def __init__(
        self,
        operation: str,
        parent_id: Optional[str],
        attempts: int,
    ) -> None:
        target = f" for {parent_id}" if parent_id is not None else ""
        super().__init__(
            f"Failed after {attempts} attempts to call {operation}{target}",
            operation=operation,
        )
        self.parent_id = parent_id
        self.attempts = attempts


class ParseError(CrowdFrameError, ValueError):
    """A payload returned by the remote service could not be parsed."""


class AnswerParseError(ParseError):
    """An assignment's answer document is not well-formed XML."""

    def __init__(self, message: str, assignment_id: Optional[str] = None) -> None:
        if assignment_id:
            message = f"{message} (assignment {assignment_id})"
        super().__init__(message)
        self.assignment_id = assignment_id
