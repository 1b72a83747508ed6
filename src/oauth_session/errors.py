"""Exception types raised by :class:`~oauth_session.session.AuthSession`.

Every login failure is reported by raising one of these from the awaited
``login`` call.  They carry a stable ``code`` so outer layers can branch on
the failure kind or turn it into a user-facing message without parsing text.
"""

from __future__ import annotations

from typing import Any


class OAuthSessionError(RuntimeError):
    """Base class for all session errors."""

    code: str = "oauth_session_error"
    default_message: str = "OAuth session error."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.code, "message": str(self)}


class ConfigurationError(OAuthSessionError, ValueError):
    """Missing server URL, client ID or client secret."""

    code = "configuration_error"
    default_message = "OAuth session is not configured correctly."


class MissingCredentialsError(OAuthSessionError):
    """Resource-owner password grant requested without username or password."""

    code = "missing_credentials"
    default_message = "Username and password not provided."


class NoCredentialAvailable(OAuthSessionError):
    """Try-mode login found no cached, stored or redirected credential."""

    code = "no_credential"
    default_message = "No credential available."


class NetworkExchangeError(OAuthSessionError):
    """The token endpoint could not be reached or answered with an error."""

    code = "exchange_failed"
    default_message = "Token exchange failed."

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code: int | None = status_code

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        return payload
