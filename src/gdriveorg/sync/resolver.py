"""Folder Path Resolver: logical path -> Drive folder id, creating folders as needed."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional

from gdriveorg.errors import GDriveOrgError, PathResolutionError

logger = logging.getLogger(__name__)

PATH_SEPARATOR: str = "/"


def normalize_path(path: Optional[str]) -> list[str]:
    """
    Split a logical path into folder names.

    Segments are stripped; empty and "." segments are dropped, so "", "/",
    "." and " / " all normalize to [].
    """
    if not path:
        return []
    segments = (part.strip() for part in path.split(PATH_SEPARATOR))
    return [s for s in segments if s and s != "."]


def is_root_path(path: Optional[str]) -> bool:
    return not normalize_path(path)


class FolderPathResolver:
    """
    Resolve slash-delimited folder paths against a remote store.

    The path cache lives on the instance: one resolver per organizer session.
    Each cached prefix was either found or created exactly once, and entries
    are never invalidated. Resolution is strictly sequential.
    """

    def __init__(self, store: Any, *, root_id: str = "root") -> None:
        self._store = store
        self._root_id = root_id
        self._cache: dict[str, str] = {}

    @property
    def root_id(self) -> str:
        return self._root_id

    @property
    def cache(self) -> Mapping[str, str]:
        """Read-only view of normalized path prefix -> folder id."""
        return MappingProxyType(self._cache)

    def resolve(self, path: Optional[str]) -> str:
        """
        Return the folder id for path, creating missing folders.

        Raises:
            PathResolutionError: if a lookup or create call fails. Prefixes
                resolved before the failing segment stay cached.
        """
        segments = normalize_path(path)
        if not segments:
            return self._root_id

        parent_id = self._root_id
        prefix = ""
        for segment in segments:
            prefix = f"{prefix}{PATH_SEPARATOR}{segment}" if prefix else segment

            cached = self._cache.get(prefix)
            if cached is not None:
                logger.debug("Folder cache hit: %s -> %s", prefix, cached)
                parent_id = cached
                continue

            parent_id = self._find_or_create(segment, parent_id, prefix=prefix, path=path)
            self._cache[prefix] = parent_id

        return parent_id

    def _find_or_create(self, segment: str, parent_id: str, *, prefix: str, path: Optional[str]) -> str:
        try:
            folder_id = self._store.find_folder_by_name(segment, parent_id)
            if folder_id:
                logger.debug("Reusing existing folder %s -> %s", prefix, folder_id)
                return folder_id
            folder_id = self._store.create_folder(segment, parent_id)
        except GDriveOrgError as exc:
            raise PathResolutionError(
                f"Failed to resolve folder path {path!r} at segment {segment!r}: {exc}",
                details={
                    "path": path,
                    "segment": segment,
                    "prefix": prefix,
                    "parent_id": parent_id,
                    "error_type": exc.__class__.__name__,
                },
                cause=exc,
            ) from exc

        logger.info("Created folder for path prefix %s -> %s", prefix, folder_id)
        return folder_id
