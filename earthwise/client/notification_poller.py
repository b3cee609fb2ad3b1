import asyncio
import contextlib
import logging

from earthwise.config import settings
from earthwise.schemas.notification_schemas import NotificationResponse
from earthwise.services.actions import DatabaseActions

logger = logging.getLogger(__name__)


class NotificationPoller:
    """
    Keeps the unread-notification set of one user fresh.

    A single asyncio task fetches, replaces the held set, then sleeps for
    ``interval`` seconds (fixed delay, so fetches never overlap). A failed
    or unresolvable fetch keeps the previous set. Results that land after
    stop() or a switch to another user are dropped.
    """

    def __init__(self, actions: DatabaseActions, interval: float | None = None):
        self.actions = actions
        self.interval = settings.NOTIFICATION_POLL_INTERVAL if interval is None else interval
        self.notifications: list[NotificationResponse] = []
        self.email: str | None = None
        self._task: asyncio.Task | None = None
        # Bumped on every start/stop; stale fetches compare against it
        self._generation = 0

    @property
    def count(self) -> int:
        """Unread badge value"""
        return len(self.notifications)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self, email: str) -> None:
        """Begin polling for email; a no-op if already polling for it"""
        if self.running and self.email == email:
            return

        await self.stop()
        self.email = email
        self._generation += 1
        self._task = asyncio.create_task(
            self._run(email, self._generation), name=f"notification-poller:{email}"
        )

    async def stop(self) -> None:
        """Cancel the poll task, wait for it to finish and drop the held set"""
        self._generation += 1
        task, self._task = self._task, None
        self.email = None
        self.notifications = []
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _run(self, email: str, generation: int) -> None:
        while True:
            await self.refresh(email, generation)
            await asyncio.sleep(self.interval)

    async def refresh(self, email: str | None = None, generation: int | None = None) -> bool:
        """
        Fetch once and replace the held set.

        Returns:
            True if the held set was replaced
        """
        email = email or self.email
        if generation is None:
            generation = self._generation
        if not email:
            return False

        try:
            user = await self.actions.get_user_by_email(email)
            if user is None:
                return False
            unread = await self.actions.get_unread_notifications(user.id)
        except Exception:
            logger.exception("Error fetching notifications for %s", email)
            return False

        if unread is None:
            return False
        if generation != self._generation:
            logger.debug("Discarding notifications fetched for stale session %s", email)
            return False

        self.notifications = list(unread)
        return True

    async def acknowledge(self, notification_id: int) -> bool:
        """
        Mark one notification read.

        The held set is left as is; the next poll cycle drops the
        notification. Failures are logged and not retried.
        """
        try:
            marked = await self.actions.mark_notification_as_read(notification_id)
        except Exception:
            logger.exception("Error marking notification %s as read", notification_id)
            return False

        if not marked:
            logger.warning("Notification %s was not marked as read", notification_id)
        return bool(marked)
