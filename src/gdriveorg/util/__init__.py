from .ids import new_local_file_id, new_run_id, new_uuid
from .mime import (
    FOLDER_MIME,
    GOOGLE_DOCUMENT_MIME,
    is_folder,
    is_google_app,
    is_google_document,
    is_text_like,
)
from .time import (
    epoch_millis_to_rfc3339,
    normalize_dt,
    parse_rfc3339,
    to_epoch_millis,
    to_rfc3339,
)

__all__ = [
    "new_uuid",
    "new_run_id",
    "new_local_file_id",
    "FOLDER_MIME",
    "GOOGLE_DOCUMENT_MIME",
    "is_folder",
    "is_google_app",
    "is_google_document",
    "is_text_like",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
    "to_epoch_millis",
    "epoch_millis_to_rfc3339",
]
