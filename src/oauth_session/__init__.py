"""Client-side OAuth2 session package.

Establishes an authenticated HTTP session against a single authorization
server without a backend token broker.

Sub-modules
-----------
session
    :class:`AuthSession`, the login / logout state machine.
clock
    Test-friendly time abstraction.
codec
    Persisted-credential encoding and redirect-fragment parsing.
store
    Persisted key-value stores honouring expiry.
location
    Current-URL capability and hash-clearing strategies.
http
    Default-header owner of the shared :class:`requests.Session`.
models
    Grant types and immutable credential records.
errors
    Exception types reported by ``login``.
config
    Environment-driven settings.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .clock import Clock, default_clock, fixed_clock  # noqa: F401
from .codec import decode_credential, decode_hash, encode_credential  # noqa: F401
from .config import SessionSettings  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationError,
    MissingCredentialsError,
    NetworkExchangeError,
    NoCredentialAvailable,
    OAuthSessionError,
)
from .http import HttpClientConfig  # noqa: F401
from .location import (  # noqa: F401
    BrowserLocation,
    HashReset,
    Location,
    RawHashReset,
    RouterHashReset,
    SimpleLocation,
)
from .log_utils import get_session_logger, mask_sensitive  # noqa: F401
from .models import Credential, GrantType, TokenResponse  # noqa: F401
from .session import AuthSession  # noqa: F401
from .store import CredentialStore, DiskCredentialStore, MemoryCredentialStore  # noqa: F401

__all__ = [
    # session
    "AuthSession",
    # clock
    "Clock",
    "default_clock",
    "fixed_clock",
    # codec
    "encode_credential",
    "decode_credential",
    "decode_hash",
    # config
    "SessionSettings",
    # errors
    "OAuthSessionError",
    "ConfigurationError",
    "MissingCredentialsError",
    "NoCredentialAvailable",
    "NetworkExchangeError",
    # http
    "HttpClientConfig",
    # location
    "Location",
    "SimpleLocation",
    "BrowserLocation",
    "HashReset",
    "RawHashReset",
    "RouterHashReset",
    # logging helpers
    "get_session_logger",
    "mask_sensitive",
    # models
    "Credential",
    "GrantType",
    "TokenResponse",
    # store
    "CredentialStore",
    "MemoryCredentialStore",
    "DiskCredentialStore",
]
