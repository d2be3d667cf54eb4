"""Remote file store exports for gdriveorg."""

from __future__ import annotations

from .drive_store import BINARY_SENTINEL, GOOGLE_APP_SENTINEL, DriveStore

__all__ = ["DriveStore", "BINARY_SENTINEL", "GOOGLE_APP_SENTINEL"]
