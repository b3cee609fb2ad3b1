"""Header bar: composes session, notifications and balance for one view."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from earthwise.client.balance_tracker import BalanceTracker
from earthwise.client.events import EventBus
from earthwise.client.identity import Identity, IdentityProvider
from earthwise.client.local_storage import LocalStorage
from earthwise.client.notification_poller import NotificationPoller
from earthwise.client.session_store import SessionState, SessionStore
from earthwise.config import settings
from earthwise.services.actions import DatabaseActions


BRAND = "Earthwise"
LOADING_TEXT = "Loading web3 auth..."


class HeaderIntent(str, Enum):
    """User actions the header bar can emit"""

    OPEN_MENU = "open_menu"
    LOGIN = "login"
    LOGOUT = "logout"
    ACKNOWLEDGE_NOTIFICATION = "acknowledge_notification"


@dataclass(frozen=True)
class HeaderState:
    session_state: SessionState
    identity: Identity | None = None
    notifications: tuple = ()
    balance: Any = 0
    is_mobile: bool = False


@dataclass(frozen=True)
class NotificationItem:
    id: int
    message: str
    type: str | None = None


@dataclass(frozen=True)
class HeaderBar:
    """Everything needed to draw the bar; no behaviour of its own"""

    brand: str = BRAND
    loading: bool = False
    loading_text: str | None = None
    show_search_input: bool = True
    show_search_button: bool = False
    notification_count: int = 0
    badge: str | None = None
    notification_items: tuple[NotificationItem, ...] = ()
    balance_text: str = "0.00"
    user_name: str | None = None
    auth_intent: HeaderIntent | None = None
    intents: tuple[HeaderIntent, ...] = field(default_factory=tuple)


def format_balance(balance: Any) -> str:
    """Two decimals for numbers, 0.00 for None, other payloads as-is"""
    try:
        return f"{float(balance):.2f}"
    except (TypeError, ValueError):
        return "0.00" if balance is None else str(balance)


def render_header(state: HeaderState) -> HeaderBar:
    """Pure projection of header state onto the bar"""
    if state.session_state == SessionState.INITIALIZING:
        return HeaderBar(loading=True, loading_text=LOADING_TEXT)

    connected = state.session_state == SessionState.CONNECTED
    items = tuple(
        NotificationItem(id=n.id, message=n.message, type=getattr(n, "type", None))
        for n in state.notifications
    )
    count = len(items)
    auth_intent = HeaderIntent.LOGOUT if connected else HeaderIntent.LOGIN

    intents = [HeaderIntent.OPEN_MENU, auth_intent]
    if items:
        intents.append(HeaderIntent.ACKNOWLEDGE_NOTIFICATION)

    return HeaderBar(
        show_search_input=not state.is_mobile,
        show_search_button=state.is_mobile,
        notification_count=count,
        badge=str(count) if count > 0 else None,
        notification_items=items,
        balance_text=format_balance(state.balance),
        user_name=(state.identity.name or state.identity.email) if connected and state.identity else None,
        auth_intent=auth_intent,
        intents=tuple(intents),
    )


class Header:
    """
    Owns the session-driven state of one header view.

    mount() initializes the session and starts notification polling and
    balance tracking once an identity with an email is known. unmount()
    stops the poll task and drops the broadcast subscription.
    """

    def __init__(
        self,
        session: SessionStore,
        poller: NotificationPoller,
        tracker: BalanceTracker,
        on_menu_click: Callable[[], None] | None = None,
        is_mobile: bool = False,
    ):
        self.session = session
        self.poller = poller
        self.tracker = tracker
        self.on_menu_click = on_menu_click
        self.is_mobile = is_mobile
        self.mounted = False
        self._unsubscribe_session: Callable[[], None] | None = None

    @classmethod
    def create(
        cls,
        identity_provider: IdentityProvider,
        events: EventBus,
        actions: DatabaseActions | None = None,
        storage: LocalStorage | None = None,
        **kwargs,
    ) -> "Header":
        """Wire a header from its collaborators using configured defaults"""
        actions = actions or DatabaseActions()
        storage = storage or LocalStorage(settings.LOCAL_STORAGE_PATH)
        return cls(
            session=SessionStore(identity_provider, actions, storage),
            poller=NotificationPoller(actions),
            tracker=BalanceTracker(actions, events),
            **kwargs,
        )

    @property
    def state(self) -> HeaderState:
        return HeaderState(
            session_state=self.session.state,
            identity=self.session.identity,
            notifications=tuple(self.poller.notifications),
            balance=self.tracker.balance,
            is_mobile=self.is_mobile,
        )

    def render(self) -> HeaderBar:
        return render_header(self.state)

    async def mount(self) -> None:
        if self.mounted:
            return
        self.mounted = True
        self.tracker.subscribe()
        self._unsubscribe_session = self.session.subscribe(self._on_session_change)
        await self.session.initialize()

    async def unmount(self) -> None:
        self.mounted = False
        if self._unsubscribe_session is not None:
            self._unsubscribe_session()
            self._unsubscribe_session = None
        await self.poller.stop()
        self.tracker.close()

    async def dispatch(self, intent: HeaderIntent, notification_id: int | None = None) -> Any:
        """Route a user action to the component that handles it"""
        if intent == HeaderIntent.OPEN_MENU:
            if self.on_menu_click is not None:
                self.on_menu_click()
            return None
        if intent == HeaderIntent.LOGIN:
            return await self.session.login()
        if intent == HeaderIntent.LOGOUT:
            return await self.session.logout()
        if intent == HeaderIntent.ACKNOWLEDGE_NOTIFICATION:
            if notification_id is None:
                raise ValueError("notification_id is required to acknowledge a notification")
            return await self.poller.acknowledge(notification_id)
        raise ValueError(f"Unknown header intent: {intent}")

    async def _on_session_change(self, session: SessionStore) -> None:
        if not self.mounted:
            return

        email = session.email
        if email:
            await self.tracker.activate(email)
            await self.poller.start(email)
        else:
            await self.poller.stop()
            self.tracker.reset()
