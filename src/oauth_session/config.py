"""Environment-driven settings for building an :class:`AuthSession`."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Final, Tuple

from oauth_session.errors import ConfigurationError

logger = logging.getLogger("oauth-session.config")

DEFAULT_STORAGE_KEY: Final[str] = "qOAuth2"
DEFAULT_TIMEOUT: Final[float] = 10.0

_ENV_PREFIX: Final[str] = "OAUTH_SESSION_"
_TRUTHY: Final[Tuple[str, ...]] = ("true", "1", "yes", "y", "on")


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _env(key: str) -> str | None:
    value = os.getenv(_ENV_PREFIX + key)
    return value.strip() if value and value.strip() else None


@dataclass(frozen=True, slots=True)
class SessionSettings:
    """Static configuration of one session."""

    server: str
    client_id: str
    client_secret: str | None = None
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_dir: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    use_router: bool = False

    @classmethod
    def from_env(cls) -> "SessionSettings":
        """Load settings from ``OAUTH_SESSION_*`` environment variables.

        Raises:
            ConfigurationError: If the server URL or client ID is missing,
                or the timeout is not a positive number.
        """
        server = _env("SERVER_URL")
        client_id = _env("CLIENT_ID")
        if not server:
            raise ConfigurationError("OAUTH_SESSION_SERVER_URL is not set")
        if not client_id:
            raise ConfigurationError("OAUTH_SESSION_CLIENT_ID is not set")

        timeout_raw = _env("TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if timeout_raw is not None:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                raise ConfigurationError(
                    f"OAUTH_SESSION_TIMEOUT must be a number, got {timeout_raw!r}"
                ) from None
            if timeout <= 0:
                raise ConfigurationError("OAUTH_SESSION_TIMEOUT must be positive")

        settings = cls(
            server=server,
            client_id=client_id,
            client_secret=_env("CLIENT_SECRET"),
            storage_key=_env("STORAGE_KEY") or DEFAULT_STORAGE_KEY,
            storage_dir=_env("STORAGE_DIR"),
            timeout=timeout,
            use_router=_truthy(os.getenv(_ENV_PREFIX + "ROUTER")),
        )
        logger.debug(
            "Loaded session settings server=%s client_id=%s storage=%s",
            settings.server,
            settings.client_id,
            "disk" if settings.storage_dir else "memory",
        )
        return settings
