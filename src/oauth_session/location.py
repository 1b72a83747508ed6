"""Current-location capability and hash-clearing strategies.

The session needs three things from its host application: the current URL
(for the ``redirect_uri`` and for the fragment carrying an Implicit token), a
way to navigate away (to the authorization server, or a reload on logout),
and a way to drop the fragment once the token has been consumed.

Clearing the fragment must not cause a full reload, otherwise the redirect
branch would run again on every load.  Applications with a client-side
router therefore inject :class:`RouterHashReset`; everything else uses
:class:`RawHashReset`.  The choice belongs to the composition root.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable, Protocol, runtime_checkable

_LOG = logging.getLogger("oauth-session.location")


@runtime_checkable
class Location(Protocol):
    """The parts of ``window.location`` the session uses."""

    @property
    def href(self) -> str: ...

    @property
    def hash(self) -> str: ...

    def assign(self, url: str) -> None: ...
    def reload(self) -> None: ...
    def clear_hash(self) -> None: ...


class SimpleLocation(Location):
    """In-process address bar.

    Records every navigation and reload so hosts without a real browser
    (and tests) can observe what the session asked for.
    """

    def __init__(self, href: str = "") -> None:
        self._href = href
        self.navigations: list[str] = []
        self.reload_count = 0

    @property
    def href(self) -> str:
        return self._href

    @property
    def hash(self) -> str:
        _, sep, fragment = self._href.partition("#")
        return fragment if sep else ""

    def assign(self, url: str) -> None:
        self.navigations.append(url)
        self._href = url

    def reload(self) -> None:
        self.reload_count += 1

    def clear_hash(self) -> None:
        self._href = self._href.partition("#")[0]

    def set_hash(self, fragment: str) -> None:
        base = self._href.partition("#")[0]
        self._href = f"{base}#{fragment}" if fragment else base


class BrowserLocation(SimpleLocation):
    """:class:`SimpleLocation` that opens navigations in the system browser."""

    def assign(self, url: str) -> None:
        super().assign(url)
        if not webbrowser.open(url):
            _LOG.warning("No browser available; open the URL manually")


# --------------------------------------------------------------------------- #
# Hash-clearing strategies                                                    #
# --------------------------------------------------------------------------- #


@runtime_checkable
class HashReset(Protocol):
    def reset(self, location: Location) -> None: ...


class RawHashReset(HashReset):
    """Clear the fragment directly on the location."""

    def reset(self, location: Location) -> None:
        location.clear_hash()


class RouterHashReset(HashReset):
    """Clear the fragment through the client-side router's own primitive."""

    def __init__(self, set_hash: Callable[[str], None]) -> None:
        self._set_hash = set_hash

    def reset(self, location: Location) -> None:  # noqa: ARG002
        self._set_hash("")
