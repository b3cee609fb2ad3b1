from earthwise.client.events import BALANCE_UPDATE, EventBus
from earthwise.client.local_storage import LocalStorage


class TestLocalStorage:
    def test_in_memory(self):
        storage = LocalStorage()

        storage.set_item("userEmail", "a@x.com")

        assert storage.get_item("userEmail") == "a@x.com"
        storage.remove_item("userEmail")
        assert storage.get_item("userEmail") is None

    def test_remove_missing_key_is_noop(self):
        LocalStorage().remove_item("nothing")

    def test_survives_reload(self, tmp_path):
        path = tmp_path / "state" / "local_storage.json"
        LocalStorage(path).set_item("userEmail", "a@x.com")

        assert LocalStorage(path).get_item("userEmail") == "a@x.com"

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "local_storage.json"
        path.write_text("{not json")

        storage = LocalStorage(path)

        assert storage.get_item("userEmail") is None
        storage.set_item("userEmail", "b@x.com")
        assert LocalStorage(path).get_item("userEmail") == "b@x.com"

    def test_clear(self, tmp_path):
        path = tmp_path / "local_storage.json"
        storage = LocalStorage(path)
        storage.set_item("a", "1")

        storage.clear()

        assert LocalStorage(path).get_item("a") is None


class TestEventBus:
    def test_publish_delivers_detail(self):
        bus = EventBus()
        received = []
        bus.subscribe(BALANCE_UPDATE, received.append)

        assert bus.publish(BALANCE_UPDATE, 42) == 1
        assert received == [42]

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe(BALANCE_UPDATE, received.append)

        unsubscribe()
        unsubscribe()
        bus.publish(BALANCE_UPDATE, 42)

        assert received == []
        assert bus.handler_count(BALANCE_UPDATE) == 0

    def test_failing_handler_does_not_block_others(self, caplog):
        bus = EventBus()
        received = []

        def broken(detail):
            raise RuntimeError("boom")

        bus.subscribe(BALANCE_UPDATE, broken)
        bus.subscribe(BALANCE_UPDATE, received.append)

        bus.publish(BALANCE_UPDATE, 7)

        assert received == [7]
        assert "Handler for balanceUpdate event failed" in caplog.text

    def test_other_events_not_delivered(self):
        bus = EventBus()
        received = []
        bus.subscribe(BALANCE_UPDATE, received.append)

        assert bus.publish("somethingElse", 1) == 0
        assert received == []
