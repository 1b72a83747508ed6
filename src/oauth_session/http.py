"""Default-header state of the shared outgoing HTTP client.

The session owns one :class:`HttpClientConfig` and is its only writer.  Other
components receive the wrapped :class:`requests.Session` (or the config
itself) through dependency injection and read from it; once a credential is
committed every request they send carries ``Authorization: Bearer ...``.
"""

from __future__ import annotations

import logging

import requests

_LOG = logging.getLogger("oauth-session.http")

AUTHORIZATION_HEADER = "Authorization"


class HttpClientConfig:
    """Owner of the shared session's default headers."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session: requests.Session = session or requests.Session()
        self.with_credentials: bool = False

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self.session.headers)

    @property
    def is_armed(self) -> bool:
        return AUTHORIZATION_HEADER in self.session.headers

    def arm(self, access_token: str) -> None:
        """Attach the bearer token to every later request."""
        self.session.headers[AUTHORIZATION_HEADER] = f"Bearer {access_token}"
        self.with_credentials = True
        _LOG.debug("Armed default Authorization header")

    def disarm(self) -> None:
        self.session.headers.pop(AUTHORIZATION_HEADER, None)
        self.with_credentials = False
        _LOG.debug("Removed default Authorization header")
