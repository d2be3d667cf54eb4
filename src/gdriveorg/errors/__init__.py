"""Public error exports for gdriveorg."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    GatewayError,
    GDriveOrgError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    InvalidTransitionError,
    MissingAnalysisError,
    MutationError,
    NetworkError,
    NotFoundError,
    PathResolutionError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    is_auth_failure,
    map_http_error,
)

__all__ = [
    "GDriveOrgError",
    "InvalidStateError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "GatewayError",
    "PathResolutionError",
    "MutationError",
    "InvalidTransitionError",
    "MissingAnalysisError",
    "HttpErrorInfo",
    "map_http_error",
    "is_auth_failure",
]
