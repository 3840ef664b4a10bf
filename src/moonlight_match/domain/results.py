"""Typed outcomes for client operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")

_CREDENTIAL_STATUSES = {400, 401, 403, 404}
_HTTP_CONFLICT = 409


class FailureReason(Enum):
    """Why a client operation did not succeed."""

    INVALID_CREDENTIALS = "invalid_credentials"
    NETWORK_UNAVAILABLE = "network_unavailable"
    SERVER_ERROR = "server_error"
    MALFORMED_RESPONSE = "malformed_response"
    CONFLICT = "conflict"
    PRECONDITION_FAILED = "precondition_failed"
    STORAGE_ERROR = "storage_error"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success value or categorized failure.

    Truthiness follows ``ok`` so callers that only care about the coarse
    outcome can write ``if await store.login(...):``.
    """

    ok: bool
    value: T | None = None
    reason: FailureReason | None = None
    message: str | None = None
    status_code: int | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        """Build a successful result."""
        return cls(ok=True, value=value)

    @classmethod
    def failure(
        cls,
        reason: FailureReason,
        message: str | None = None,
        status_code: int | None = None,
    ) -> "Result[T]":
        """Build a failed result."""
        return cls(ok=False, reason=reason, message=message, status_code=status_code)

    def failed_as(self) -> "Result":
        """Re-type a failure so it can be returned from another operation."""
        if self.ok:
            raise ValueError("failed_as called on a successful result")
        return Result.failure(self.reason, self.message, self.status_code)


def reason_for_status(status_code: int, *, credentials: bool = False) -> FailureReason:
    """Map a non-success HTTP status to a failure reason."""
    if status_code == _HTTP_CONFLICT:
        return FailureReason.CONFLICT
    if credentials and status_code in _CREDENTIAL_STATUSES:
        return FailureReason.INVALID_CREDENTIALS
    return FailureReason.SERVER_ERROR
