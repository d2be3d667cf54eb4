"""Field definitions for Google Drive API responses."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "parents,"
    "trashed,"
    "modifiedTime,"
    "createdTime,"
    "size,"
    "md5Checksum,"
    "webViewLink,"
    "iconLink,"
    "thumbnailLink"
)

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"

# Folder lookups only need the id of the first match.
FOLDER_LOOKUP_FIELDS: str = "files(id)"

# Writes do not need the full resource back.
WRITE_FIELDS: str = "id,name,parents"

LIST_ORDER_BY: str = "folder,name"
