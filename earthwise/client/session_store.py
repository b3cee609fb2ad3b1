import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable

from earthwise.client.identity import Identity, IdentityProvider
from earthwise.client.local_storage import LocalStorage
from earthwise.repositories.user_repository import DEFAULT_USER_NAME
from earthwise.services.actions import DatabaseActions

logger = logging.getLogger(__name__)

# Last known email, kept across reloads for convenience only
USER_EMAIL_KEY = "userEmail"

SessionListener = Callable[["SessionStore"], Awaitable[None] | None]


class SessionState(str, Enum):
    """Authentication state of the header session"""

    INITIALIZING = "initializing"
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class SessionStore:
    """
    Holds the current authentication state and identity claims.

    The identity provider's live session is authoritative. On every
    successful connect the store makes sure a local User record exists
    for the identity's email; failing to create one is logged and the
    user stays logged in.

    Listeners registered with subscribe() are called (and awaited when
    they are coroutines) after every state or identity change.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        actions: DatabaseActions,
        storage: LocalStorage | None = None,
    ):
        self.identity_provider = identity_provider
        self.actions = actions
        self.storage = storage or LocalStorage()
        self.state = SessionState.INITIALIZING
        self.identity: Identity | None = None
        self.provider: Any = None
        self._listeners: list[SessionListener] = []
        self._known_emails: set[str] = set()

    @property
    def connected(self) -> bool:
        return self.state == SessionState.CONNECTED

    @property
    def email(self) -> str | None:
        """Email of the connected identity, None when unresolvable"""
        if not self.connected or self.identity is None:
            return None
        return self.identity.email

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def initialize(self) -> None:
        """Restore an existing provider session, if any"""
        try:
            await self.identity_provider.initialize()
            self.provider = self.identity_provider.provider

            if self.identity_provider.connected:
                identity = await self.identity_provider.get_user_info()
                await self._connected(identity)
                return
        except Exception:
            logger.exception("Error initializing identity provider")
            self.provider = None
            self.identity = None

        self.state = SessionState.DISCONNECTED
        await self._notify()

    async def login(self) -> bool:
        """
        Interactive connect.

        Returns:
            True when connected; False when the provider refused, in which
            case the previous state is kept
        """
        try:
            provider = await self.identity_provider.connect()
        except Exception:
            logger.exception("Error logging in")
            return False

        # The wallet is connected from here on, even without readable claims
        self.provider = provider
        try:
            identity = await self.identity_provider.get_user_info()
        except Exception:
            logger.exception("Error fetching user info after login")
            identity = Identity()

        await self._connected(identity)
        return True

    async def logout(self) -> bool:
        """
        Disconnect and clear all local identity state.

        Local state is cleared even when the provider call fails.

        Returns:
            Whether the provider acknowledged the disconnect
        """
        remote_ok = True
        try:
            await self.identity_provider.logout()
        except Exception:
            logger.warning("Identity provider logout failed, local session cleared anyway", exc_info=True)
            remote_ok = False
        finally:
            self.provider = None
            self.identity = None
            self.storage.remove_item(USER_EMAIL_KEY)
            self.state = SessionState.DISCONNECTED
            await self._notify()
        return remote_ok

    async def refresh_user_info(self) -> Identity | None:
        """Re-read claims from a connected provider and resync the local user"""
        if not self.identity_provider.connected:
            return None
        try:
            identity = await self.identity_provider.get_user_info()
        except Exception:
            logger.exception("Error fetching user info")
            return None

        await self._connected(identity)
        return identity

    async def _connected(self, identity: Identity) -> None:
        self.identity = identity
        self.state = SessionState.CONNECTED
        if identity.email:
            self.storage.set_item(USER_EMAIL_KEY, identity.email)
            await self._ensure_local_user(identity)
        await self._notify()

    async def _ensure_local_user(self, identity: Identity) -> None:
        email = identity.email
        if email in self._known_emails:
            return

        if await self.actions.get_user_by_email(email) is None:
            created = await self.actions.create_user(email, identity.name or DEFAULT_USER_NAME)
            if created is None:
                logger.warning("Could not create local user for %s", email)
                return
            logger.info("Created local user %s for %s", created.id, email)

        self._known_emails.add(email)

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            result = listener(self)
            if inspect.isawaitable(result):
                await result
