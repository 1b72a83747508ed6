"""Integration test: full Implicit-grant cycle across simulated page loads.

1. First load: no credential anywhere → navigation to the authorize endpoint.
2. Authorization server redirects back with ``#access_token=...``.
3. Second load (new AuthSession, same disk store): fragment consumed,
   credential committed, hash cleared, bearer header armed.
4. Third load: credential restored from the store without a fragment.
5. Logout: store cleared and page reloaded; next try_login finds nothing.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from oauth_session import (
    AuthSession,
    DiskCredentialStore,
    NoCredentialAvailable,
    SimpleLocation,
    fixed_clock,
)

APP_URL = "https://app.example.com/dashboard"
NOW = 1_700_000_000


def _page_load(store: DiskCredentialStore, href: str) -> tuple[AuthSession, SimpleLocation]:
    location = SimpleLocation(href)
    session = AuthSession(
        "https://auth.example.com",
        "web-app",
        store=store,
        location=location,
        clock=fixed_clock(NOW),
    )
    return session, location


@pytest.mark.integration
@pytest.mark.ci_safe
@pytest.mark.anyio
async def test_implicit_grant_round_trip(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_post(*args, **kwargs):  # noqa: ANN002, ANN003
        raise AssertionError("Implicit grant must not call the token endpoint")

    monkeypatch.setattr(requests, "post", _no_post)
    store = DiskCredentialStore(base_dir=tmp_path, clock=fixed_clock(NOW))

    # 1. first load redirects
    session, location = _page_load(store, APP_URL)
    assert await session.login() is None
    assert len(location.navigations) == 1
    authorize = urlparse(location.navigations[0])
    assert authorize.path == "/oauth/authorize"
    query = parse_qs(authorize.query)
    assert query["response_type"] == ["token"]
    assert query["client_id"] == ["web-app"]
    redirect_uri = query["redirect_uri"][0]
    assert redirect_uri == APP_URL

    # 2./3. server sends the user agent back with the token in the fragment
    session, location = _page_load(
        store, f"{redirect_uri}#access_token=tok-implicit&token_type=bearer&expires_in=900"
    )
    credential = await session.login()
    assert credential is not None
    assert credential.access_token == "tok-implicit"
    assert credential.expires_at == NOW + 900
    assert location.href == APP_URL
    assert location.navigations == []
    assert session.http.session.headers["Authorization"] == "Bearer tok-implicit"

    # 4. a later load restores from the store
    session, location = _page_load(store, APP_URL)
    restored = await session.try_login()
    assert restored is not None
    assert restored.access_token == "tok-implicit"
    assert restored.token_type == "bearer"

    # 5. logout
    session.logout()
    assert location.reload_count == 1
    session, location = _page_load(store, APP_URL)
    with pytest.raises(NoCredentialAvailable):
        await session.try_login()
