"""Tests for extsync.core.collection module."""

from extsync.config.schemas import ExtensionData
from extsync.core.collection import ExtensionCollection
from extsync.core.items import SETTINGS_ITEM_ID, ExtensionItem, ExtensionStatus


class TestLoadAll:
    """Tests for ExtensionCollection.load_all()."""

    def test_loads_all_descriptors_in_order(self, sample_extensions: list[ExtensionData]):
        """One item per descriptor, order preserved."""
        collection = ExtensionCollection()

        collection.load_all(sample_extensions)

        assert len(collection) == len(sample_extensions)
        assert [item.id for item in collection] == [ext.id for ext in sample_extensions]

    def test_items_selected_and_pending(self, sample_extensions: list[ExtensionData]):
        """All loaded items are selected and pending."""
        collection = ExtensionCollection()

        collection.load_all(sample_extensions)

        assert all(item.selected for item in collection)
        assert all(item.status == ExtensionStatus.PENDING for item in collection)

    def test_reload_resets_state(self, collection: ExtensionCollection, sample_extensions):
        """A second load discards selection and status."""
        collection.deselect_all()
        collection.set_status("ms-python.python", ExtensionStatus.FAILED, "boom")

        collection.load_all(sample_extensions)

        assert all(item.selected for item in collection)
        assert collection.get("ms-python.python").status == ExtensionStatus.PENDING

    def test_reload_drops_settings_item(self, collection: ExtensionCollection, sample_extensions):
        """A full load replaces the settings item too."""
        collection.upsert_settings({"a": 1})

        collection.load_all(sample_extensions)

        assert collection.settings_item is None

    def test_fires_full_refresh(self, sample_extensions: list[ExtensionData]):
        """Loading notifies listeners without an item."""
        collection = ExtensionCollection()
        events: list[ExtensionItem | None] = []
        collection.subscribe(events.append)

        collection.load_all(sample_extensions)

        assert events == [None]


class TestUpsertSettings:
    """Tests for ExtensionCollection.upsert_settings()."""

    def test_inserts_at_top(self, collection: ExtensionCollection):
        """Settings item is placed first."""
        collection.upsert_settings({"editor.fontSize": 14})

        assert collection.items[0].id == SETTINGS_ITEM_ID
        assert len(collection) == 4

    def test_twice_keeps_single_item_with_latest_payload(self, collection: ExtensionCollection):
        """Upserting twice leaves exactly one settings item."""
        collection.upsert_settings({"a": 1})
        collection.upsert_settings({"b": 2})

        settings_items = [item for item in collection if item.id == SETTINGS_ITEM_ID]
        assert len(settings_items) == 1
        assert collection.items[0].id == SETTINGS_ITEM_ID
        assert collection.items[0].payload == {"b": 2}

    def test_fires_full_refresh(self, collection: ExtensionCollection):
        """Upsert notifies a full refresh."""
        events: list[ExtensionItem | None] = []
        collection.subscribe(events.append)

        collection.upsert_settings({"a": 1})

        assert events == [None]


class TestSelection:
    """Tests for selection operations."""

    def test_deselect_all_empties_selection(self, collection: ExtensionCollection):
        """Nothing is selected after deselect_all()."""
        collection.deselect_all()

        assert collection.selected() == []

    def test_select_all_returns_all_in_order(self, collection: ExtensionCollection):
        """select_all() selects every item in collection order."""
        collection.deselect_all()
        collection.select_all()

        assert collection.selected() == collection.items

    def test_selected_preserves_order(self, collection: ExtensionCollection):
        """selected() keeps the collection order of the remaining items."""
        collection.toggle("esbenp.prettier-vscode", False)

        assert [item.id for item in collection.selected()] == [
            "ms-python.python",
            "eamodio.gitlens",
        ]

    def test_toggle_does_not_fire_refresh(self, collection: ExtensionCollection):
        """Single checkbox changes don't trigger a full refresh."""
        events: list[ExtensionItem | None] = []
        collection.subscribe(events.append)

        collection.toggle("ms-python.python", False)

        assert events == []
        assert collection.get("ms-python.python").selected is False

    def test_toggle_unknown_id_is_ignored(self, collection: ExtensionCollection):
        """Toggling an unknown id does nothing."""
        collection.toggle("unknown.ext", False)

        assert len(collection.selected()) == 3

    def test_bulk_selection_fires_full_refresh(self, collection: ExtensionCollection):
        """select_all and deselect_all notify full refreshes."""
        events: list[ExtensionItem | None] = []
        collection.subscribe(events.append)

        collection.deselect_all()
        collection.select_all()

        assert events == [None, None]


class TestSetStatus:
    """Tests for ExtensionCollection.set_status()."""

    def test_updates_status_and_error(self, collection: ExtensionCollection):
        """Status and error message are stored on the item."""
        collection.set_status("ms-python.python", ExtensionStatus.FAILED, "network error")

        item = collection.get("ms-python.python")
        assert item.status == ExtensionStatus.FAILED
        assert item.error_message == "network error"

    def test_unknown_id_is_noop(self, collection: ExtensionCollection):
        """Unknown ids are ignored without error or event."""
        events: list[ExtensionItem | None] = []
        collection.subscribe(events.append)

        collection.set_status("unknown.ext", ExtensionStatus.SUCCESS)

        assert events == []

    def test_fires_item_scoped_event(self, collection: ExtensionCollection):
        """Listeners receive the changed item."""
        events: list[ExtensionItem | None] = []
        collection.subscribe(events.append)

        collection.set_status("eamodio.gitlens", ExtensionStatus.SUCCESS)

        assert events == [collection.get("eamodio.gitlens")]


class TestSubscribe:
    """Tests for listener management."""

    def test_unsubscribe_stops_events(self, collection: ExtensionCollection):
        """Unsubscribed listeners no longer receive events."""
        events: list[ExtensionItem | None] = []
        unsubscribe = collection.subscribe(events.append)

        unsubscribe()
        collection.refresh()

        assert events == []

    def test_unsubscribe_twice_is_safe(self, collection: ExtensionCollection):
        """Calling unsubscribe twice does not raise."""
        unsubscribe = collection.subscribe(lambda item: None)

        unsubscribe()
        unsubscribe()
