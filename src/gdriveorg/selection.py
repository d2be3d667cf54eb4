"""Build FileDescriptors from Drive listings or local files."""

from __future__ import annotations

import logging
import mimetypes
import os
from typing import Any, Iterable, Optional

from gdriveorg.errors import GDriveOrgError
from gdriveorg.models import MAX_SNIPPET_CHARS, FileDescriptor, FileInfo
from gdriveorg.util.ids import new_local_file_id
from gdriveorg.util.mime import is_folder, is_text_like
from gdriveorg.util.time import to_epoch_millis

logger = logging.getLogger(__name__)

CONTENT_ERROR_SENTINEL: str = "[Content Access Error]"
LOCAL_SNIPPET_CHARS: int = 500
_DEFAULT_LOCAL_MIME: str = "application/octet-stream"


def describe_drive_files(
    store: Any,
    infos: Iterable[FileInfo],
    *,
    snippet_limit: int = MAX_SNIPPET_CHARS,
) -> list[FileDescriptor]:
    """
    Snapshot selected Drive files as descriptors, fetching a content snippet for each.

    Folders are skipped. A failed content fetch does not fail the selection;
    the snippet becomes CONTENT_ERROR_SENTINEL.
    """
    limit = _clamp_limit(snippet_limit)
    descriptors: list[FileDescriptor] = []
    for info in infos:
        if is_folder(info.mime_type):
            continue
        try:
            content = store.get_content(info.file_id, info.mime_type)
        except GDriveOrgError as exc:
            logger.warning("Could not fetch content for %s (%s): %s", info.name, info.file_id, exc)
            content = CONTENT_ERROR_SENTINEL

        descriptors.append(
            FileDescriptor(
                id=info.file_id,
                name=info.name,
                size=info.size or 0,
                mime_type=info.mime_type,
                last_modified=to_epoch_millis(info.modified_time) if info.modified_time else 0,
                content_snippet=content[:limit] if content else None,
                parents=tuple(info.parents),
                source="drive",
                web_view_link=info.web_view_link,
                icon_link=info.icon_link,
            )
        )
    return descriptors


def describe_local_files(
    paths: Iterable[str],
    *,
    snippet_limit: int = LOCAL_SNIPPET_CHARS,
) -> list[FileDescriptor]:
    """
    Describe files on local disk. They can be classified but not synced to Drive.

    Raises:
        OSError: if a path cannot be stat'ed.
    """
    limit = _clamp_limit(snippet_limit)
    descriptors: list[FileDescriptor] = []
    for path in paths:
        stat = os.stat(path)
        mime_type = mimetypes.guess_type(path)[0] or _DEFAULT_LOCAL_MIME
        descriptors.append(
            FileDescriptor(
                id=new_local_file_id(),
                name=os.path.basename(path),
                size=stat.st_size,
                mime_type=mime_type,
                last_modified=max(int(stat.st_mtime * 1000), 0),
                content_snippet=_read_local_snippet(path, mime_type, limit),
                source="local",
            )
        )
    return descriptors


def _read_local_snippet(path: str, mime_type: str, limit: int) -> Optional[str]:
    if not is_text_like(mime_type):
        return None
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read(limit) or None


def _clamp_limit(limit: int) -> int:
    if limit <= 0:
        raise ValueError("snippet_limit must be positive")
    return min(limit, MAX_SNIPPET_CHARS)
