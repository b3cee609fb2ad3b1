"""Wallet-login identity provider seam.

The header client talks to the identity provider only through the
``IdentityProvider`` protocol so a real SDK bridge, the token adapter
below, or a test double can be injected.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol

from earthwise.client.local_storage import LocalStorage
from earthwise.core.exceptions import IdentityProviderError, UnauthorizedException
from earthwise.core.security import decode_id_token

logger = logging.getLogger(__name__)

ID_TOKEN_KEY = "idToken"


@dataclass(frozen=True)
class Identity:
    """User claims reported by the identity provider"""

    email: str | None = None
    name: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "Identity":
        return cls(email=claims.get("email") or None, name=claims.get("name") or None, raw=claims)


class IdentityProvider(Protocol):
    connected: bool
    provider: Any

    async def initialize(self) -> None: ...

    async def connect(self) -> Any: ...

    async def logout(self) -> None: ...

    async def get_user_info(self) -> Identity: ...


class TokenIdentityProvider:
    """
    Identity provider adapter over signed ID tokens.

    connect() obtains a token from the injected ``authenticate`` callable
    (the interactive wallet login) and verifies it. The token is cached in
    local storage so initialize() can restore the session after a reload.
    The verified token is exposed as the ``provider`` handle.
    """

    def __init__(
        self,
        authenticate: Callable[[], Awaitable[str]],
        storage: LocalStorage | None = None,
    ):
        self.authenticate = authenticate
        self.storage = storage or LocalStorage()
        self.provider: str | None = None
        self._claims: dict[str, Any] | None = None

    @property
    def connected(self) -> bool:
        return self._claims is not None

    async def initialize(self) -> None:
        """Restore a cached session; an expired or invalid token is dropped"""
        token = self.storage.get_item(ID_TOKEN_KEY)
        if not token:
            return
        try:
            self._accept(token)
        except UnauthorizedException as e:
            logger.info("Discarding cached ID token: %s", e)
            self.storage.remove_item(ID_TOKEN_KEY)

    async def connect(self) -> str:
        try:
            token = await self.authenticate()
        except Exception as e:
            raise IdentityProviderError(f"Wallet login failed: {e}") from e

        try:
            self._accept(token)
        except UnauthorizedException as e:
            raise IdentityProviderError(str(e)) from e

        self.storage.set_item(ID_TOKEN_KEY, token)
        return token

    async def logout(self) -> None:
        if not self.connected:
            raise IdentityProviderError("Wallet is not connected")
        self._claims = None
        self.provider = None
        self.storage.remove_item(ID_TOKEN_KEY)

    async def get_user_info(self) -> Identity:
        if self._claims is None:
            raise IdentityProviderError("Wallet is not connected")
        return Identity.from_claims(self._claims)

    def _accept(self, token: str) -> None:
        self._claims = decode_id_token(token)
        self.provider = token
