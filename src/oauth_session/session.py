"""AuthSession – client-side OAuth2 login state machine.

A login walks a fixed list of credential sources and stops at the first
one that yields a token:

1. the credential cached on this instance,
2. the persisted store entry under ``storage_key``,
3. an ``access_token`` in the current URL fragment (Implicit redirect-back),
4. an interactive step: a full navigation to the authorization endpoint for
   the Implicit grant, or a token-endpoint exchange for the client- and
   user-credentials grants.

Whenever a token is obtained, one commit step writes the persisted entry,
caches the credential and arms the shared HTTP client with
``Authorization: Bearer <token>``.

Secrets (client secret, passwords, tokens) are never logged in full.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Final
from urllib.parse import quote, urlencode

import anyio
import requests
from anyio import to_thread
from requests.auth import HTTPBasicAuth

from oauth_session.clock import Clock, default_clock
from oauth_session.codec import (
    InvalidPayloadError,
    decode_credential,
    decode_hash,
    encode_credential,
)
from oauth_session.config import DEFAULT_STORAGE_KEY, DEFAULT_TIMEOUT, SessionSettings
from oauth_session.errors import (
    ConfigurationError,
    MissingCredentialsError,
    NetworkExchangeError,
    NoCredentialAvailable,
)
from oauth_session.http import HttpClientConfig
from oauth_session.location import (
    HashReset,
    Location,
    RawHashReset,
    RouterHashReset,
    SimpleLocation,
)
from oauth_session.log_utils import get_session_logger, mask_sensitive
from oauth_session.models import DEFAULT_TOKEN_TYPE, Credential, GrantType, TokenResponse
from oauth_session.store import CredentialStore, DiskCredentialStore, MemoryCredentialStore

_LOG = logging.getLogger("oauth-session.session")

# characters encodeURIComponent leaves alone besides the unreserved set
_URI_COMPONENT_SAFE: Final[str] = "!~*'()"


class AuthSession:
    """Authenticated session against a single OAuth2 authorization server."""

    OAUTH_PATH: Final[str] = "oauth/"
    AUTHORIZE: Final[str] = "authorize"
    TOKEN: Final[str] = "token"

    def __init__(
        self,
        server: str,
        client_id: str,
        storage_key: str = DEFAULT_STORAGE_KEY,
        *,
        store: CredentialStore | None = None,
        location: Location | None = None,
        hash_reset: HashReset | None = None,
        http: HttpClientConfig | None = None,
        clock: Clock = default_clock,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not server:
            raise ConfigurationError("OAuth: please provide the server URL")
        if not client_id:
            raise ConfigurationError("OAuth: please provide the client ID")

        self._server: str = server.rstrip("/") + "/" + self.OAUTH_PATH
        self._client_id: str = client_id
        self._storage_key: str = storage_key or DEFAULT_STORAGE_KEY
        self._client_secret: str | None = None

        self._clock = clock
        self._timeout = timeout
        self._store: CredentialStore = store or MemoryCredentialStore(clock=clock)
        self._location: Location = location or SimpleLocation()
        self._hash_reset: HashReset = hash_reset or RawHashReset()
        self._http: HttpClientConfig = http or HttpClientConfig()

        self._credential: Credential | None = None
        self._exchange_lock: anyio.Lock | None = None
        self._log = get_session_logger(
            client_id=self._client_id, storage_key=self._storage_key
        )

    @classmethod
    def from_settings(cls, settings: SessionSettings, **collaborators: Any) -> "AuthSession":
        """Build a session from :class:`SessionSettings`.

        Keyword arguments override the collaborators derived from settings
        (``store``, ``location``, ``hash_reset``, ``http``, ``clock``).
        """
        clock = collaborators.get("clock", default_clock)
        if "store" not in collaborators and settings.storage_dir:
            collaborators["store"] = DiskCredentialStore(settings.storage_dir, clock=clock)

        if settings.use_router and "hash_reset" not in collaborators:
            set_hash = getattr(collaborators.get("location"), "set_hash", None)
            if set_hash is None:
                raise ConfigurationError(
                    "use_router is enabled but the location has no router set_hash()"
                )
            collaborators["hash_reset"] = RouterHashReset(set_hash)

        collaborators.setdefault("timeout", settings.timeout)
        session = cls(
            settings.server,
            settings.client_id,
            settings.storage_key,
            **collaborators,
        )
        if settings.client_secret:
            session.set_secret(settings.client_secret)
        return session

    # ------------------------------------------------------------------ #
    # Read-only state                                                    #
    # ------------------------------------------------------------------ #
    @property
    def server(self) -> str:
        return self._server

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def storage_key(self) -> str:
        return self._storage_key

    @property
    def credential(self) -> Credential | None:
        return self._credential

    @property
    def access_token(self) -> str | None:
        return self._credential.access_token if self._credential else None

    @property
    def is_authenticated(self) -> bool:
        return self._credential is not None

    @property
    def http(self) -> HttpClientConfig:
        """Shared HTTP client configuration armed by this session."""
        return self._http

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #
    def set_secret(self, client_secret: str) -> None:
        """Set the client secret used by the non-Implicit grant types.

        **Use this only for testing.**  A secret shipped to a user agent is
        not secret; production logins should use the Implicit grant.
        """
        self._log.warning(
            "In production, you should use the Implicit grant instead of a client secret."
        )
        self._client_secret = client_secret

    async def try_login(self, grant_type: GrantType | str = GrantType.IMPLICIT) -> Credential | None:
        """Look for an existing credential without redirecting or exchanging."""
        return await self.login(grant_type, is_try=True)

    async def login(
        self,
        grant_type: GrantType | str = GrantType.IMPLICIT,
        is_try: bool = False,
        username: str | None = None,
        password: str | None = None,
    ) -> Credential | None:
        """Obtain a credential and arm the shared HTTP client with it.

        Returns
        -------
        Credential | None
            The committed credential, or ``None`` when an Implicit login had
            to navigate to the authorization server.  In that case the result
            is observed after the server redirects back to this location.

        Raises
        ------
        MissingCredentialsError
            User-credentials grant without username or password.
        NoCredentialAvailable
            *is_try* is set and no credential source yielded a token.
        ConfigurationError
            A token exchange was needed but no client secret is set.
        NetworkExchangeError
            The token endpoint failed or returned an unusable response.
        """
        grant_type = GrantType(grant_type)
        extra = {"grant_type": grant_type.value}

        if grant_type is GrantType.USER_CREDENTIALS and not (username and password):
            raise MissingCredentialsError("Username and password not provided")

        if self._credential is not None:
            return self._credential

        credential = self._credential_from_store()
        if credential is not None:
            self._log.debug("Restored credential from store", extra=extra)
            return credential

        credential = self._credential_from_hash()
        if credential is not None:
            self._log.info("Accepted credential from redirect fragment", extra=extra)
            return credential

        if is_try:
            raise NoCredentialAvailable()

        if grant_type is GrantType.IMPLICIT:
            url = self.build_authorize_url(self._location.href)
            self._log.info("Redirecting to authorization endpoint", extra=extra)
            self._location.assign(url)
            return None

        return await self._exchange(grant_type, username, password)

    def logout(self) -> None:
        """Forget the credential everywhere and reload the application."""
        self._credential = None
        self._store.remove(self._storage_key)
        self._http.disarm()
        self._log.info("Logged out")
        self._location.reload()

    def build_authorize_url(self, redirect_uri: str) -> str:
        """Return the Implicit-grant authorization URL for *redirect_uri*."""
        query = urlencode(
            {
                "response_type": GrantType.IMPLICIT.value,
                "client_id": self._client_id,
                "redirect_uri": redirect_uri,
            },
            quote_via=quote,
            safe=_URI_COMPONENT_SAFE,
        )
        return f"{self._server}{self.AUTHORIZE}?{query}"

    # ------------------------------------------------------------------ #
    # Credential sources                                                 #
    # ------------------------------------------------------------------ #
    def _credential_from_store(self) -> Credential | None:
        payload = self._store.get(self._storage_key)
        if not payload:
            return None
        try:
            access_token, token_type, scope = decode_credential(payload)
        except InvalidPayloadError as exc:
            self._log.warning("Dropping unreadable stored credential: %s", exc)
            self._store.remove(self._storage_key)
            return None

        self._credential = Credential(
            access_token=access_token,
            token_type=token_type or DEFAULT_TOKEN_TYPE,
            scope=scope,
        )
        self._http.arm(access_token)
        return self._credential

    def _credential_from_hash(self) -> Credential | None:
        fragment = self._location.hash
        if not fragment:
            return None
        params = decode_hash(fragment)
        if not params.get("access_token"):
            return None

        # must not trigger a reload, or this branch would run again on load
        self._hash_reset.reset(self._location)
        return self._commit(TokenResponse.from_mapping(params))

    async def _exchange(
        self,
        grant_type: GrantType,
        username: str | None,
        password: str | None,
    ) -> Credential:
        if not self._client_secret:
            raise ConfigurationError(
                "OAuth: please provide the client secret by calling set_secret() first"
            )

        if self._exchange_lock is None:
            self._exchange_lock = anyio.Lock()

        async with self._exchange_lock:
            # Another login may have committed while we waited.
            if self._credential is not None:
                return self._credential

            data: dict[str, str] = {"grant_type": grant_type.value}
            if grant_type is GrantType.USER_CREDENTIALS:
                data["username"] = username or ""
                data["password"] = password or ""

            token = await to_thread.run_sync(
                functools.partial(self._post_token, data)
            )
            credential = self._commit(token)
            self._log.info(
                "Exchanged %s grant for token=%s (expires in %ss)",
                grant_type.value,
                mask_sensitive(token.access_token, 6),
                token.expires_in,
                extra={"grant_type": grant_type.value},
            )
            return credential

    def _post_token(self, data: dict[str, str]) -> TokenResponse:
        token_url = self._server + self.TOKEN
        try:
            resp = requests.post(
                token_url,
                data=data,
                auth=HTTPBasicAuth(self._client_id, self._client_secret or ""),
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            _LOG.error("Token request to %s failed: %s", token_url, exc)
            raise NetworkExchangeError(f"Token request failed: {exc}") from exc

        if not resp.ok:
            _LOG.error("Token endpoint returned %s", resp.status_code)
            raise NetworkExchangeError(
                f"Token endpoint returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError:
            raise NetworkExchangeError(
                "Token endpoint returned a non-JSON body", status_code=resp.status_code
            ) from None
        if not isinstance(body, dict) or not body.get("access_token"):
            raise NetworkExchangeError(
                "Token response missing access_token", status_code=resp.status_code
            )
        return TokenResponse.from_mapping(body)

    # ------------------------------------------------------------------ #
    # Commit                                                             #
    # ------------------------------------------------------------------ #
    def _commit(self, token: TokenResponse) -> Credential:
        """Persist, cache and arm *token* as the session credential."""
        credential = token.to_credential(issued_at=int(self._clock()))
        self._store.put(
            self._storage_key,
            encode_credential(credential.access_token, credential.token_type, credential.scope),
            credential.expires_at,
        )
        self._credential = credential
        self._http.arm(credential.access_token)
        return credential
