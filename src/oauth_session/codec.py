"""Encoding helpers for the persisted credential and the redirect fragment.

Persisted payload
-----------------
The store keeps one opaque string per session.  It is the standard base64
encoding of::

    <access_token>:<token_type>:<scope>

which is the same format a browser would produce with ``btoa``, so entries
written by a JavaScript client of the same server remain readable.

Redirect fragment
-----------------
After an Implicit grant the authorization server sends the user agent back
with ``#access_token=...&token_type=...`` appended.  :func:`decode_hash`
splits that into a mapping.  Values are returned raw: no percent-decoding
takes place.

Logging
-------
Nothing in this module logs; payloads contain the access token.
"""

from __future__ import annotations

import base64
import binascii
from typing import Final

_DELIMITER: Final[str] = ":"


class InvalidPayloadError(ValueError):
    """Raised when a persisted payload cannot be decoded."""


def _b64e(data: str) -> str:
    return base64.b64encode(data.encode("utf-8")).decode("ascii")


def _b64d(data: str) -> str:
    """Decode base64 data that may lack padding."""
    pad_len = (-len(data)) % 4
    return base64.b64decode(data + "=" * pad_len, validate=True).decode("utf-8")


def encode_credential(access_token: str, token_type: str, scope: str) -> str:
    """Return the persisted form of a credential."""
    return _b64e(_DELIMITER.join((access_token, token_type, scope)))


def decode_credential(payload: str) -> tuple[str, str, str]:
    """Reverse :func:`encode_credential`.

    Returns
    -------
    tuple[str, str, str]
        ``(access_token, token_type, scope)``; absent trailing fields come
        back as empty strings.

    Raises
    ------
    InvalidPayloadError
        If *payload* is not base64 text or carries no access token.
    """
    try:
        decoded = _b64d(payload)
    except (ValueError, binascii.Error):  # UnicodeDecodeError is a ValueError
        raise InvalidPayloadError("credential payload cannot be decoded") from None

    # scopes may contain the delimiter; everything after the second one is scope
    parts = decoded.split(_DELIMITER, 2)
    parts += [""] * (3 - len(parts))
    access_token, token_type, scope = parts[0], parts[1], parts[2]
    if not access_token:
        raise InvalidPayloadError("credential payload has no access token")
    return access_token, token_type, scope


def decode_hash(fragment: str) -> dict[str, str]:
    """Parse a URL fragment of ``key=value`` pairs joined by ``&``.

    *fragment* is the part after ``#``.  A single leading ``/`` is dropped;
    client-side routers normalise ``#access_token=...`` into
    ``#/access_token=...``.
    """
    result: dict[str, str] = {}
    if not fragment:
        return result

    if fragment.startswith("/"):
        fragment = fragment[1:]

    for piece in fragment.split("&"):
        if not piece:
            continue
        key, _, value = piece.partition("=")
        result[key] = value
    return result
