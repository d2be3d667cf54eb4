"""FileDescriptor: immutable snapshot of a file at selection time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from gdriveorg.util.time import MAX_EPOCH_MILLIS, epoch_millis_to_rfc3339

FileSource = Literal["drive", "local"]

MAX_SNIPPET_CHARS: int = 1000


@dataclass(slots=True, frozen=True)
class FileDescriptor:
    """
    A file chosen for classification.

    Notes:
        - id is unique within a session; for Drive files it is the Drive file id.
        - parents is required later to reparent the file; local files have none.
        - content_snippet is classifier context only and never exceeds
          MAX_SNIPPET_CHARS.
    """

    id: str
    name: str
    size: int
    mime_type: str
    last_modified: int

    content_snippet: Optional[str] = None
    parents: tuple[str, ...] = ()
    source: FileSource = "drive"

    web_view_link: Optional[str] = None
    icon_link: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("FileDescriptor.id must be a non-empty string")
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
            raise ValueError("FileDescriptor.size must be an int >= 0")
        if (
            isinstance(self.last_modified, bool)
            or not isinstance(self.last_modified, int)
            or not 0 <= self.last_modified <= MAX_EPOCH_MILLIS
        ):
            raise ValueError(
                f"FileDescriptor.last_modified must be epoch millis in 0..{MAX_EPOCH_MILLIS}"
            )
        if self.content_snippet is not None and len(self.content_snippet) > MAX_SNIPPET_CHARS:
            raise ValueError(
                f"FileDescriptor.content_snippet must be at most {MAX_SNIPPET_CHARS} chars"
            )
        if self.source not in ("drive", "local"):
            raise ValueError("FileDescriptor.source must be 'drive' or 'local'")
        if not isinstance(self.parents, tuple):
            # Freeze list input so the snapshot stays immutable.
            object.__setattr__(self, "parents", tuple(self.parents))

    @property
    def last_modified_iso(self) -> str:
        return epoch_millis_to_rfc3339(self.last_modified)
