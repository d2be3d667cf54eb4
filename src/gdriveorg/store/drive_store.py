"""Google Drive v3 adapter used by the organizer."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, TypeVar

from gdriveorg.auth import AuthInfo, OAuthClient
from gdriveorg.errors import (
    ApiError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from gdriveorg.models import FileInfo
from gdriveorg.util.mime import (
    EXPORT_TEXT_MIME,
    FOLDER_MIME,
    is_google_app,
    is_google_document,
    is_text_like,
)
from gdriveorg.util.time import parse_rfc3339

from .fields import (
    FILE_FIELDS,
    FOLDER_LOOKUP_FIELDS,
    LIST_FIELDS,
    LIST_ORDER_BY,
    WRITE_FIELDS,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

GOOGLE_APP_SENTINEL: str = "[Google App File - Content Analysis Limited]"
BINARY_SENTINEL: str = "[Binary File - Analysis based on Name/Type]"


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class DriveStore:
    """
    Remote file store backed by the Drive API.

    Notes:
        - The Drive `service` object is NOT exposed.
        - `supports_all_drives` is applied to all requests consistently.
        - Reads are retried on rate limits, 5xx and network errors.
          Writes (create_folder, update_file) are issued exactly once, since a
          retried create could leave a duplicate folder behind.
    """

    DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)
    ROOT_ID: str = "root"

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
    ) -> None:
        self._supports_all_drives = supports_all_drives
        self._retry_policy = _RetryPolicy()

        use_scopes = list(scopes) if scopes is not None else list(self.DEFAULT_SCOPES)
        client = OAuthClient(auth_info)
        self._service = client.build_drive_service(use_scopes, ensure_valid=True)

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
    ) -> "DriveStore":
        """Create a store from a pre-built Drive service (useful for tests)."""
        obj = cls.__new__(cls)
        obj._supports_all_drives = supports_all_drives
        obj._retry_policy = _RetryPolicy()
        obj._service = service
        return obj

    # ----------------------------
    # Reads
    # ----------------------------
    def get(self, file_id: str) -> FileInfo:
        req = self._service.files().get(
            fileId=file_id,
            fields=FILE_FIELDS,
            **self._common_get_kwargs(),
        )
        data = self._execute(req.execute)
        return _file_dict_to_file_info(data)

    def list_children(self, folder_id: str = ROOT_ID) -> list[FileInfo]:
        """List non-trashed direct children of folder_id, folders first, then by name."""
        q = f"'{_escape_query_value(folder_id)}' in parents and trashed=false"
        all_files: list[FileInfo] = []
        page_token: Optional[str] = None

        while True:
            req = self._service.files().list(
                q=q,
                fields=LIST_FIELDS,
                orderBy=LIST_ORDER_BY,
                pageToken=page_token,
                **self._common_list_kwargs(),
            )
            data = self._execute(req.execute)
            for f in data.get("files", []):
                all_files.append(_file_dict_to_file_info(f))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return all_files

    def find_folder_by_name(self, name: str, parent_id: str) -> Optional[str]:
        """Return the id of a non-trashed folder named `name` directly under parent_id."""
        if not name:
            raise InvalidArgumentError("Folder name must be a non-empty string")

        q = (
            f"mimeType='{FOLDER_MIME}'"
            f" and name='{_escape_query_value(name)}'"
            f" and '{_escape_query_value(parent_id)}' in parents"
            " and trashed=false"
        )
        req = self._service.files().list(
            q=q,
            fields=FOLDER_LOOKUP_FIELDS,
            pageSize=1,
            **self._common_list_kwargs(),
        )
        data = self._execute(req.execute)
        files = data.get("files") or []
        if not files:
            return None
        folder_id = files[0].get("id")
        return folder_id if isinstance(folder_id, str) and folder_id else None

    def get_content(self, file_id: str, mime_type: str) -> str:
        """
        Return file content as text for classifier context.

        Google Docs are exported as plain text; other Google-apps types and
        non-text media return a sentinel string instead of content.
        """
        if is_google_app(mime_type):
            if not is_google_document(mime_type):
                return GOOGLE_APP_SENTINEL
            req = self._service.files().export_media(
                fileId=file_id,
                mimeType=EXPORT_TEXT_MIME,
            )
        elif is_text_like(mime_type):
            req = self._service.files().get_media(
                fileId=file_id,
                **self._common_get_kwargs(),
            )
        else:
            return BINARY_SENTINEL

        body = self._execute(req.execute)
        if isinstance(body, (bytes, bytearray)):
            return bytes(body).decode("utf-8", errors="replace")
        return str(body) if body is not None else ""

    # ----------------------------
    # Writes (never retried)
    # ----------------------------
    def create_folder(self, name: str, parent_id: str) -> str:
        """Create a folder under parent_id and return its id."""
        body = {"name": name, "mimeType": FOLDER_MIME, "parents": [parent_id]}
        req = self._service.files().create(
            body=body,
            fields="id",
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute, retry=False)
        folder_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(folder_id, str) or not folder_id:
            raise ApiError(
                "Drive did not return an id for the created folder",
                details={"name": name, "parent_id": parent_id},
            )
        logger.info("Created folder %r under %s -> %s", name, parent_id, folder_id)
        return folder_id

    def update_file(
        self,
        file_id: str,
        *,
        name: Optional[str] = None,
        add_parents: Optional[Sequence[str]] = None,
        remove_parents: Optional[Sequence[str]] = None,
    ) -> FileInfo:
        """Rename and/or reparent a file in a single files.update request."""
        body: dict[str, Any] = {}
        if name is not None:
            body["name"] = name

        params: dict[str, Any] = {}
        if add_parents:
            params["addParents"] = ",".join(add_parents)
        if remove_parents:
            params["removeParents"] = ",".join(remove_parents)

        if not body and not params:
            raise InvalidArgumentError(
                "update_file requires a name or parent change",
                details={"file_id": file_id},
            )

        req = self._service.files().update(
            fileId=file_id,
            body=body,
            fields=WRITE_FIELDS,
            **params,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute, retry=False)
        return _file_dict_to_file_info(data)

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _common_write_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _execute(self, func: Callable[[], T], *, retry: bool = True) -> T:
        max_retries = self._retry_policy.max_retries if retry else 0
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < max_retries:
                    logger.debug("Retrying Drive request after %s (attempt %d)",
                                 type(mapped).__name__, attempt + 1)
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, (RateLimitError, NetworkError)):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        from googleapiclient.errors import HttpError

        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def _escape_query_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _file_dict_to_file_info(data: dict[str, Any]) -> FileInfo:
    file_id = data.get("id")
    name = data.get("name", "")
    mime_type = data.get("mimeType", "")
    parents = data.get("parents", []) or []

    modified_time = None
    created_time = None

    if isinstance(data.get("modifiedTime"), str):
        try:
            modified_time = parse_rfc3339(data["modifiedTime"])
        except ValueError:
            modified_time = None

    if isinstance(data.get("createdTime"), str):
        try:
            created_time = parse_rfc3339(data["createdTime"])
        except ValueError:
            created_time = None

    size = None
    if isinstance(data.get("size"), str) and data["size"].isdigit():
        size = int(data["size"])
    elif isinstance(data.get("size"), int):
        size = data["size"]

    return FileInfo(
        file_id=file_id if isinstance(file_id, str) else "",
        name=name if isinstance(name, str) else "",
        mime_type=mime_type if isinstance(mime_type, str) else "",
        parents=list(parents) if isinstance(parents, list) else [],
        trashed=bool(data.get("trashed", False)),
        modified_time=modified_time,
        created_time=created_time,
        size=size,
        md5_checksum=_optional_str(data.get("md5Checksum")),
        web_view_link=_optional_str(data.get("webViewLink")),
        icon_link=_optional_str(data.get("iconLink")),
        thumbnail_link=_optional_str(data.get("thumbnailLink")),
    )


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
