"""Clock abstraction for testable expiry handling.

Every expiry decision in :mod:`oauth_session` (credential commit, store TTL
checks) depends on an injected ``Clock`` rather than calling ``time.time()``
directly, so tests can freeze time.

Example
-------
>>> from oauth_session.clock import default_clock
>>> isinstance(default_clock(), float)
True
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Callable protocol returning *seconds* since the UNIX epoch."""

    def __call__(self) -> float: ...


def default_clock() -> float:
    """Default implementation that delegates to ``time.time()``."""
    return time.time()


def fixed_clock(now: float) -> Clock:
    """Return a clock frozen at *now*."""
    return lambda now=now: now
