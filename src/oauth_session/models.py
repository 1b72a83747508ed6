"""Typed, immutable records used by the login state machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Mapping

DEFAULT_TOKEN_TYPE: Final[str] = "bearer"
DEFAULT_EXPIRES_IN: Final[int] = 3600


class GrantType(str, Enum):
    """OAuth2 grant types; values are the wire values sent to the server."""

    CLIENT_CREDENTIALS = "client_credentials"
    USER_CREDENTIALS = "password"
    IMPLICIT = "token"


@dataclass(frozen=True, slots=True)
class Credential:
    """Access token currently authorising outgoing requests."""

    access_token: str
    token_type: str = DEFAULT_TOKEN_TYPE
    scope: str = ""
    # None when restored from the store, which keeps the expiry itself
    expires_at: int | None = None


@dataclass(frozen=True, slots=True)
class TokenResponse:
    """Token payload from the token endpoint or the redirect fragment."""

    access_token: str
    token_type: str = DEFAULT_TOKEN_TYPE
    scope: str = ""
    expires_in: int = DEFAULT_EXPIRES_IN

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TokenResponse":
        """Build from a JSON body or decoded fragment, defaulting absent fields.

        The authorization endpoint of some servers returns only
        ``access_token`` in the fragment, so every other field is optional.
        """
        raw_expires_in = data.get("expires_in")
        if raw_expires_in is None or raw_expires_in == "":
            raw_expires_in = DEFAULT_EXPIRES_IN
        try:
            expires_in = int(raw_expires_in)
        except (TypeError, ValueError):
            expires_in = DEFAULT_EXPIRES_IN
        return cls(
            access_token=str(data.get("access_token") or ""),
            token_type=str(data.get("token_type") or DEFAULT_TOKEN_TYPE),
            scope=str(data.get("scope") or ""),
            expires_in=expires_in,
        )

    def to_credential(self, *, issued_at: int) -> Credential:
        return Credential(
            access_token=self.access_token,
            token_type=self.token_type,
            scope=self.scope,
            expires_at=issued_at + self.expires_in,
        )
