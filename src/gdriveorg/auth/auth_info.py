"""Drive authentication information for gdriveorg."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

_REQUIRED_KEYS: dict[str, tuple[str, ...]] = {
    "oauth": ("client_secrets_file", "token_file"),
    "service_account": ("service_account_file",),
}


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Drive credentials source.

    Supported kinds:
        kind = "oauth"
            data: client_secrets_file, token_file
        kind = "service_account"
            data: service_account_file, optional subject (domain-wide delegation)
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind not in _REQUIRED_KEYS:
            raise ValueError(
                f"AuthInfo.kind must be one of {sorted(_REQUIRED_KEYS)}, got {self.kind!r}"
            )

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in _REQUIRED_KEYS[self.kind]:
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @classmethod
    def oauth(cls, client_secrets_file: str, token_file: str) -> AuthInfo:
        return cls(
            kind="oauth",
            data={"client_secrets_file": client_secrets_file, "token_file": token_file},
        )

    @classmethod
    def service_account(cls, service_account_file: str, subject: Optional[str] = None) -> AuthInfo:
        data: dict[str, Any] = {"service_account_file": service_account_file}
        if subject:
            data["subject"] = subject
        return cls(kind="service_account", data=data)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> AuthInfo:
        """
        Build AuthInfo from environment variables.

        GDRIVEORG_SERVICE_ACCOUNT_FILE wins when set; otherwise
        GDRIVEORG_CLIENT_SECRETS and GDRIVEORG_TOKEN_FILE are required.
        """
        env = os.environ if environ is None else environ
        sa_file = env.get("GDRIVEORG_SERVICE_ACCOUNT_FILE", "").strip()
        if sa_file:
            subject = env.get("GDRIVEORG_SUBJECT", "").strip() or None
            return cls.service_account(sa_file, subject=subject)
        return cls.oauth(
            env.get("GDRIVEORG_CLIENT_SECRETS", "").strip(),
            env.get("GDRIVEORG_TOKEN_FILE", "").strip(),
        )

    @property
    def client_secrets_file(self) -> str:
        """Path to OAuth client secrets JSON."""
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        """Path to OAuth token JSON (authorized user)."""
        return str(self.data["token_file"])

    @property
    def service_account_file(self) -> str:
        """Path to a service-account key JSON."""
        return str(self.data["service_account_file"])
