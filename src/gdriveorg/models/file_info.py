"""Data model for Drive items returned by the store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class FileInfo:
    """
    Metadata of a Drive item as listed by DriveStore.

    Notes:
        - parents is the full list of containing folder ids; Drive models
          folders as parent links, so a file may have several.
    """

    file_id: str
    name: str
    mime_type: str
    parents: list[str] = field(default_factory=list)

    trashed: bool = False
    modified_time: Optional[datetime] = None
    created_time: Optional[datetime] = None
    size: Optional[int] = None
    md5_checksum: Optional[str] = None

    web_view_link: Optional[str] = None
    icon_link: Optional[str] = None
    thumbnail_link: Optional[str] = None
