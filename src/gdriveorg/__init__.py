"""gdriveorg public API."""

from __future__ import annotations

import logging

from gdriveorg.auth import AuthInfo, OAuthClient
from gdriveorg.classify import ClassificationGateway
from gdriveorg.config import OrganizerConfig
from gdriveorg.errors import (
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
from gdriveorg.models import (
    AnalysisResult,
    Category,
    FileDescriptor,
    FileInfo,
    FileRecord,
    RecordStatus,
    Sensitivity,
    SyncItemResult,
    SyncProgress,
    SyncReport,
)
from gdriveorg.organizer import DriveOrganizer
from gdriveorg.review import ReviewSession
from gdriveorg.selection import describe_drive_files, describe_local_files
from gdriveorg.store import DriveStore
from gdriveorg.sync import FolderPathResolver, RemoteMutationApplier, SyncExecutor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # High-level
    "DriveOrganizer",
    "OrganizerConfig",
    # Components
    "ClassificationGateway",
    "ReviewSession",
    "FolderPathResolver",
    "RemoteMutationApplier",
    "SyncExecutor",
    "DriveStore",
    "describe_drive_files",
    "describe_local_files",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Models
    "FileInfo",
    "FileDescriptor",
    "AnalysisResult",
    "Category",
    "Sensitivity",
    "RecordStatus",
    "FileRecord",
    "SyncProgress",
    "SyncItemResult",
    "SyncReport",
    # Errors
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
