"""Runtime configuration for gdriveorg."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from gdriveorg.classify import ClassificationGateway
from gdriveorg.models import MAX_SNIPPET_CHARS
from gdriveorg.store import DriveStore

_API_KEY_VARS: tuple[str, ...] = (
    "GDRIVEORG_GEMINI_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
)
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True, frozen=True)
class OrganizerConfig:
    """
    Settings of one organizer session.

    gemini_api_key is the classification credential; Drive credentials are
    carried separately by AuthInfo.
    """

    gemini_api_key: str
    model_name: str = ClassificationGateway.DEFAULT_MODEL
    root_id: str = DriveStore.ROOT_ID
    supports_all_drives: bool = True
    snippet_limit: int = MAX_SNIPPET_CHARS
    scopes: tuple[str, ...] = DriveStore.DEFAULT_SCOPES

    def __post_init__(self) -> None:
        if not isinstance(self.gemini_api_key, str) or not self.gemini_api_key.strip():
            raise ValueError("OrganizerConfig.gemini_api_key must be a non-empty string")
        if not self.model_name.strip():
            raise ValueError("OrganizerConfig.model_name must be a non-empty string")
        if not self.root_id.strip():
            raise ValueError("OrganizerConfig.root_id must be a non-empty string")
        if not 0 < self.snippet_limit <= MAX_SNIPPET_CHARS:
            raise ValueError(f"OrganizerConfig.snippet_limit must be in 1..{MAX_SNIPPET_CHARS}")
        if not self.scopes:
            raise ValueError("OrganizerConfig.scopes must not be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> OrganizerConfig:
        env = os.environ if environ is None else environ

        api_key = ""
        for name in _API_KEY_VARS:
            api_key = env.get(name, "").strip()
            if api_key:
                break

        snippet_raw = env.get("GDRIVEORG_SNIPPET_LIMIT", "").strip()
        try:
            snippet_limit = int(snippet_raw) if snippet_raw else MAX_SNIPPET_CHARS
        except ValueError as exc:
            raise ValueError("GDRIVEORG_SNIPPET_LIMIT must be an integer") from exc

        return cls(
            gemini_api_key=api_key,
            model_name=env.get("GDRIVEORG_MODEL", "").strip() or ClassificationGateway.DEFAULT_MODEL,
            root_id=env.get("GDRIVEORG_ROOT_ID", "").strip() or DriveStore.ROOT_ID,
            supports_all_drives=_parse_bool(env.get("GDRIVEORG_SUPPORTS_ALL_DRIVES"), default=True),
            snippet_limit=snippet_limit,
        )


def _parse_bool(value: Optional[str], *, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")
