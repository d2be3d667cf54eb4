"""Exception hierarchy and HTTP error mapping for gdriveorg."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveOrgError(Exception):
    """
    Base exception for gdriveorg.

    Attributes:
        details: Optional structured information (e.g., HTTP status, file id).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


# ----------------------------
# Remote store (HTTP-mapped)
# ----------------------------
class AuthError(GDriveOrgError):
    """Raised when authentication fails (HTTP 401, OAuth load/refresh failures)."""


class PermissionError(GDriveOrgError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(GDriveOrgError):
    """Raised when request arguments are invalid (HTTP 400, bad caller input)."""


class NotFoundError(GDriveOrgError):
    """Raised when a Drive resource or a session record is not found."""


class ConflictError(GDriveOrgError):
    """Raised when a conflict occurs (HTTP 409/412)."""


class RateLimitError(GDriveOrgError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(GDriveOrgError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(GDriveOrgError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(GDriveOrgError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


# ----------------------------
# Organizer domain
# ----------------------------
class InvalidStateError(GDriveOrgError):
    """Raised when a component is used in an invalid state (e.g., sync already running)."""


class GatewayError(GDriveOrgError):
    """
    Raised when a classification batch fails as a whole.

    details["reason"] is one of:
        missing_credential, auth, remote, empty_response, malformed
    """


class PathResolutionError(GDriveOrgError):
    """Raised when a logical folder path cannot be resolved or created."""


class MutationError(GDriveOrgError):
    """Raised when a rename/reparent request fails for a file."""


class InvalidTransitionError(GDriveOrgError):
    """Raised when a record status change is not allowed from its current status."""


class MissingAnalysisError(GDriveOrgError):
    """Raised when an operation needs an AnalysisResult the record does not have."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdriveorg exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDriveOrgError:
    """
    Map an HTTP error to a gdriveorg exception.

    Policy:
        - 401 -> AuthError
        - 403 -> PermissionError (default), but QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - 400 -> InvalidArgumentError
        - 5xx and everything else -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)


def is_auth_failure(exc: Optional[BaseException]) -> bool:
    """
    Return True if exc, or any error on its cause chain, is an AuthError.

    Path-resolution and mutation errors wrap the store error that caused them,
    so a 401 deep inside a sync step is still visible to the caller.
    """
    seen: set[int] = set()
    cur = exc
    while cur is not None and id(cur) not in seen:
        if isinstance(cur, AuthError):
            return True
        seen.add(id(cur))
        nxt = getattr(cur, "cause", None)
        cur = nxt if nxt is not None else cur.__cause__
    return False
