"""Structured logging helpers for the OAuth session.

This module restricts **which** contextual attributes are attached to log
records so that tokens and secrets never reach a handler by accident.  The
adapter ONLY injects these *non-sensitive* fields:

- ``client_id``   – The OAuth client identifier
- ``storage_key`` – Key of the persisted credential entry

Per-call context such as ``grant_type`` is passed through ``extra=`` and is
never overwritten by the bound fields.

Usage
-----
>>> from oauth_session.log_utils import get_session_logger
>>> log = get_session_logger(client_id="web-app", storage_key="qOAuth2")
>>> log.info("Starting login", extra={"grant_type": "token"})
INFO oauth-session.session client_id=web-app storage_key=qOAuth2 grant_type=token ...
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping


def mask_sensitive(value: str | None, keep: int = 4) -> str:
    """Return *value* with everything after the first *keep* chars hidden."""
    if not value:
        return "<empty>"
    if len(value) <= keep:
        return "****"
    return f"{value[:keep]}****"


class _SessionLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted session context into log records."""

    extra_keys = ("client_id", "storage_key")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if extra and k in extra and extra[k] is not None:
                extra_clean[k] = extra[k]
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # merge but do not overwrite call-site provided extras
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        return msg, kwargs


def get_session_logger(
    *,
    base_logger_name: str = "oauth-session.session",
    client_id: str | None = None,
    storage_key: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter pre-filled with session context."""
    logger = logging.getLogger(base_logger_name)
    return _SessionLoggerAdapter(
        logger,
        {
            "client_id": client_id,
            "storage_key": storage_key,
        },
    )
