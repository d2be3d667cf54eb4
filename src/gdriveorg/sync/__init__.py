"""Sync pipeline exports for gdriveorg."""

from __future__ import annotations

from .applier import RemoteMutationApplier
from .executor import SyncExecutor
from .resolver import FolderPathResolver, is_root_path, normalize_path

__all__ = [
    "FolderPathResolver",
    "RemoteMutationApplier",
    "SyncExecutor",
    "normalize_path",
    "is_root_path",
]
