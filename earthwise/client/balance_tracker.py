import logging
from typing import Any, Callable

from earthwise.client.events import BALANCE_UPDATE, EventBus
from earthwise.services.actions import DatabaseActions

logger = logging.getLogger(__name__)


class BalanceTracker:
    """
    Current token balance for the header.

    Fetched once per identity change and overwritten by every
    ``balanceUpdate`` broadcast (last write wins).
    """

    def __init__(self, actions: DatabaseActions, events: EventBus):
        self.actions = actions
        self.events = events
        self.balance: Any = 0
        self.email: str | None = None
        self._generation = 0
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    def subscribe(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.events.subscribe(BALANCE_UPDATE, self._on_balance_update)

    def close(self) -> None:
        """Stop listening for broadcasts; in-flight fetches are discarded"""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._generation += 1

    async def activate(self, email: str) -> bool:
        """Resolve the user behind email and load their balance"""
        self.subscribe()
        self.email = email
        self._generation += 1
        return await self.refresh(email, self._generation)

    def reset(self) -> None:
        self._generation += 1
        self.email = None
        self.balance = 0

    async def refresh(self, email: str | None = None, generation: int | None = None) -> bool:
        email = email or self.email
        if generation is None:
            generation = self._generation
        if not email:
            return False

        try:
            user = await self.actions.get_user_by_email(email)
            if user is None:
                return False
            balance = await self.actions.get_user_balance(user.id)
        except Exception:
            logger.exception("Error fetching balance for %s", email)
            return False

        if balance is None or generation != self._generation:
            return False

        self.balance = balance
        return True

    def _on_balance_update(self, detail: Any) -> None:
        self.balance = detail
