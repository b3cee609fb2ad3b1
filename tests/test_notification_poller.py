import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from earthwise.client.notification_poller import NotificationPoller


def note(notification_id: int, message: str = "hello"):
    return SimpleNamespace(id=notification_id, message=message, type="reward")


@pytest.fixture
def mock_actions():
    actions = AsyncMock()
    actions.get_user_by_email.return_value = SimpleNamespace(id=7, email="a@x.com")
    actions.get_unread_notifications.return_value = [note(1), note(2)]
    actions.mark_notification_as_read.return_value = True
    return actions


def test_default_interval_is_three_seconds(mock_actions):
    assert NotificationPoller(mock_actions).interval == 3.0


@pytest.mark.asyncio
class TestRefresh:
    async def test_replaces_set_with_latest_fetch(self, mock_actions):
        poller = NotificationPoller(mock_actions)
        poller.email = "a@x.com"

        assert await poller.refresh() is True
        assert [n.id for n in poller.notifications] == [1, 2]
        assert poller.count == 2

        mock_actions.get_unread_notifications.return_value = [note(3)]
        await poller.refresh()

        assert [n.id for n in poller.notifications] == [3]
        mock_actions.get_unread_notifications.assert_awaited_with(7)

    async def test_failed_fetch_keeps_previous_set(self, mock_actions):
        poller = NotificationPoller(mock_actions)
        poller.email = "a@x.com"
        await poller.refresh()

        mock_actions.get_unread_notifications.return_value = None
        assert await poller.refresh() is False

        assert [n.id for n in poller.notifications] == [1, 2]

    async def test_raising_fetch_keeps_previous_set(self, mock_actions, caplog):
        poller = NotificationPoller(mock_actions)
        poller.email = "a@x.com"
        await poller.refresh()

        mock_actions.get_unread_notifications.side_effect = RuntimeError("connection reset")
        assert await poller.refresh() is False

        assert poller.count == 2
        assert "Error fetching notifications" in caplog.text

    async def test_unresolved_user_keeps_previous_set(self, mock_actions):
        poller = NotificationPoller(mock_actions)
        poller.email = "a@x.com"
        await poller.refresh()

        mock_actions.get_user_by_email.return_value = None
        await poller.refresh()

        assert poller.count == 2

    async def test_no_email_no_fetch(self, mock_actions):
        poller = NotificationPoller(mock_actions)

        assert await poller.refresh() is False
        mock_actions.get_user_by_email.assert_not_called()


@pytest.mark.asyncio
class TestPolling:
    async def test_polls_repeatedly(self, mock_actions):
        poller = NotificationPoller(mock_actions, interval=0.01)

        await poller.start("a@x.com")
        await asyncio.sleep(0.08)

        assert poller.running
        assert mock_actions.get_unread_notifications.await_count >= 3
        assert poller.count == 2
        await poller.stop()

    async def test_start_same_email_is_noop(self, mock_actions):
        poller = NotificationPoller(mock_actions, interval=10)

        await poller.start("a@x.com")
        task = poller._task
        await poller.start("a@x.com")

        assert poller._task is task
        await poller.stop()

    async def test_stop_mid_cycle_halts_fetching(self, mock_actions):
        poller = NotificationPoller(mock_actions, interval=0.01)
        await poller.start("a@x.com")
        await asyncio.sleep(0.035)

        await poller.stop()
        calls_at_stop = mock_actions.get_user_by_email.await_count
        await asyncio.sleep(0.05)

        assert mock_actions.get_user_by_email.await_count == calls_at_stop
        assert not poller.running
        assert poller._task is None
        assert poller.notifications == []

    async def test_result_arriving_after_stop_is_discarded(self, mock_actions):
        release = asyncio.Event()

        async def slow_fetch(user_id):
            await release.wait()
            return [note(99)]

        mock_actions.get_unread_notifications.side_effect = slow_fetch
        poller = NotificationPoller(mock_actions, interval=10)
        poller.email = "a@x.com"

        pending = asyncio.create_task(poller.refresh())
        await asyncio.sleep(0.01)
        await poller.stop()
        release.set()

        assert await pending is False
        assert poller.notifications == []

    async def test_switching_user_restarts(self, mock_actions):
        poller = NotificationPoller(mock_actions, interval=10)

        await poller.start("a@x.com")
        first = poller._task
        await poller.start("b@x.com")

        assert first.cancelled() or first.done()
        assert poller.email == "b@x.com"
        await poller.stop()


@pytest.mark.asyncio
class TestAcknowledge:
    async def test_marks_once_per_call_without_local_removal(self, mock_actions):
        poller = NotificationPoller(mock_actions)
        poller.email = "a@x.com"
        await poller.refresh()

        assert await poller.acknowledge(1) is True

        mock_actions.mark_notification_as_read.assert_awaited_once_with(1)
        assert [n.id for n in poller.notifications] == [1, 2]

    async def test_acknowledge_twice(self, mock_actions):
        poller = NotificationPoller(mock_actions)

        await poller.acknowledge(1)
        await poller.acknowledge(1)

        assert mock_actions.mark_notification_as_read.await_count == 2

    async def test_acknowledge_failure_logged(self, mock_actions, caplog):
        mock_actions.mark_notification_as_read.side_effect = RuntimeError("boom")
        poller = NotificationPoller(mock_actions)

        assert await poller.acknowledge(5) is False
        assert "Error marking notification 5" in caplog.text
        mock_actions.mark_notification_as_read.assert_awaited_once_with(5)
