"""Live smoke test against a real authorization server.

Requires ``--integration`` and the ``OAUTH_SESSION_*`` environment variables,
including ``OAUTH_SESSION_CLIENT_SECRET`` for the client-credentials grant.
"""

from __future__ import annotations

import os

import pytest

from oauth_session import AuthSession, GrantType, SessionSettings

pytestmark = pytest.mark.integration


@pytest.mark.anyio
async def test_client_credentials_against_live_server() -> None:
    if not (
        os.getenv("OAUTH_SESSION_SERVER_URL")
        and os.getenv("OAUTH_SESSION_CLIENT_ID")
        and os.getenv("OAUTH_SESSION_CLIENT_SECRET")
    ):
        pytest.skip("OAUTH_SESSION_* environment not configured")

    session = AuthSession.from_settings(SessionSettings.from_env())
    credential = await session.login(GrantType.CLIENT_CREDENTIALS)

    assert credential is not None
    assert credential.access_token
    assert session.http.is_armed
