"""Public model exports for gdriveorg."""

from __future__ import annotations

from .analysis import MANUAL_REVIEW_CONFIDENCE, AnalysisResult, Category, Sensitivity
from .descriptor import MAX_SNIPPET_CHARS, FileDescriptor, FileSource
from .file_info import FileInfo
from .record import FileRecord
from .results import ItemStatus, SyncItemResult, SyncProgress, SyncReport
from .status import TERMINAL_STATUSES, RecordStatus, can_transition, check_transition

__all__ = [
    "FileInfo",
    "FileDescriptor",
    "FileSource",
    "MAX_SNIPPET_CHARS",
    "AnalysisResult",
    "Category",
    "Sensitivity",
    "MANUAL_REVIEW_CONFIDENCE",
    "RecordStatus",
    "TERMINAL_STATUSES",
    "can_transition",
    "check_transition",
    "FileRecord",
    "ItemStatus",
    "SyncProgress",
    "SyncItemResult",
    "SyncReport",
]
