from __future__ import annotations

FOLDER_MIME: str = "application/vnd.google-apps.folder"
GOOGLE_APP_PREFIX: str = "application/vnd.google-apps."
GOOGLE_DOCUMENT_MIME: str = "application/vnd.google-apps.document"
EXPORT_TEXT_MIME: str = "text/plain"

# Substrings that mark a media type whose raw bytes are readable text.
_TEXT_MARKERS: tuple[str, ...] = ("text", "json", "javascript")


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def is_google_app(mime_type: str) -> bool:
    """Returns True if the MIME type is a Google 'apps' type (Docs, Sheets, ...)."""
    return mime_type.startswith(GOOGLE_APP_PREFIX)


def is_google_document(mime_type: str) -> bool:
    """Google Docs are the only apps type exported as plain text for snippets."""
    return mime_type == GOOGLE_DOCUMENT_MIME


def is_text_like(mime_type: str) -> bool:
    """
    Returns True if the content can be decoded as text for a classifier snippet.

    Google-apps types are never text-like here; they go through export instead.
    """
    if not mime_type or is_google_app(mime_type):
        return False
    lowered = mime_type.lower()
    return any(marker in lowered for marker in _TEXT_MARKERS)
