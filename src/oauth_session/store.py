"""Persisted key-value storage for the session credential.

This module introduces a *narrow* persistence interface
(:class:`CredentialStore`) and two implementations:

* :class:`MemoryCredentialStore` – process-local, behaves like a browser
  cookie jar that is never written to disk.
* :class:`DiskCredentialStore` – one JSON file per key, written with
  *temp-file + os.replace* so readers never observe a partial entry.

Both honour expiration on read: an entry past its ``expires_at`` is removed
and reported as missing.  The session relies on this and performs no expiry
check of its own.

Environment variables
---------------------
OAUTH_SESSION_STORAGE_DIR
    Base directory for :class:`DiskCredentialStore`.
    Defaults to ``~/.oauth-session/store`` when unset.
"""

from __future__ import annotations

import json
import logging
import os
import re
from hashlib import sha256
from pathlib import Path
from typing import Protocol, runtime_checkable

from oauth_session.clock import Clock, default_clock

_LOG = logging.getLogger("oauth-session.store")

# --------------------------------------------------------------------------- #
# helpers                                                                     #
# --------------------------------------------------------------------------- #


def _slug(text: str, max_len: int = 40) -> str:
    text = (text or "").strip().lower()
    text = re.sub(r"[^a-z0-9._-]+", "-", text)
    text = re.sub(r"-{2,}", "-", text).strip("-")
    return text[:max_len] or "unknown"


def _atomic_write(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, separators=(",", ":"), sort_keys=True)
    os.replace(tmp, path)  # atomic on POSIX


def _is_expired(expires_at: float | None, now: float) -> bool:
    return expires_at is not None and now >= expires_at


# --------------------------------------------------------------------------- #
# public interface                                                            #
# --------------------------------------------------------------------------- #


@runtime_checkable
class CredentialStore(Protocol):
    """Minimal persistence contract for the session credential."""

    def put(self, key: str, value: str, expires_at: float | None = None) -> None: ...
    def get(self, key: str) -> str | None: ...
    def remove(self, key: str) -> None: ...


# --------------------------------------------------------------------------- #
# Memory implementation                                                       #
# --------------------------------------------------------------------------- #


class MemoryCredentialStore(CredentialStore):
    """Dictionary-backed store with per-entry expiry."""

    def __init__(self, clock: Clock = default_clock) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float | None]] = {}

    def put(self, key: str, value: str, expires_at: float | None = None) -> None:
        self._entries[key] = (value, expires_at)

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if _is_expired(expires_at, self._clock()):
            del self._entries[key]
            return None
        return value

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)


# --------------------------------------------------------------------------- #
# Disk implementation                                                         #
# --------------------------------------------------------------------------- #


class DiskCredentialStore(CredentialStore):
    """JSON-file implementation of :class:`CredentialStore`."""

    def __init__(
        self,
        base_dir: str | os.PathLike | None = None,
        clock: Clock = default_clock,
    ) -> None:
        self.base_dir = Path(
            base_dir
            or os.getenv("OAUTH_SESSION_STORAGE_DIR")
            or Path.home() / ".oauth-session" / "store"
        ).expanduser()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._clock = clock

    def _entry_path(self, key: str) -> Path:
        # slug keeps the file recognisable, hash keeps distinct keys apart
        digest = sha256(key.encode("utf-8")).hexdigest()[:12]
        return self.base_dir / f"{_slug(key)}-{digest}.json"

    def put(self, key: str, value: str, expires_at: float | None = None) -> None:
        _atomic_write(self._entry_path(key), {"value": value, "expires_at": expires_at})

    def get(self, key: str) -> str | None:
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            with path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError):
            data = None
        if not isinstance(data, dict):
            _LOG.warning("Discarding unreadable store entry %s", path.name)
            path.unlink(missing_ok=True)
            return None

        if _is_expired(data.get("expires_at"), self._clock()):
            path.unlink(missing_ok=True)
            _LOG.debug("Store entry %s expired", path.name)
            return None
        value = data.get("value")
        return value if isinstance(value, str) else None

    def remove(self, key: str) -> None:
        self._entry_path(key).unlink(missing_ok=True)
