"""Ordered item collection with change notification."""

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from extsync.config.schemas import ExtensionData
from extsync.core.items import SETTINGS_ITEM_ID, ExtensionItem, ExtensionStatus, make_settings_item

logger = logging.getLogger(__name__)

# Called with None for "re-read everything", or with the item that changed
ChangeListener = Callable[[ExtensionItem | None], None]


class ExtensionCollection:
    """The ordered set of items shown in the checklist.

    Listeners receive either None (full refresh) or a single item. The item
    is a hint only; listeners should read current state from the collection.
    """

    def __init__(self) -> None:
        self._items: list[ExtensionItem] = []
        self._listeners: list[ChangeListener] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ExtensionItem]:
        return iter(list(self._items))

    @property
    def items(self) -> list[ExtensionItem]:
        return list(self._items)

    # =========================================================================
    # Change notification
    # =========================================================================

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> None:
        """Tell listeners to re-read the whole collection."""
        self._fire(None)

    def _fire(self, item: ExtensionItem | None) -> None:
        for listener in list(self._listeners):
            listener(item)

    # =========================================================================
    # Loading
    # =========================================================================

    def load_all(self, descriptors: Iterable[ExtensionData]) -> None:
        """Replace the contents with fresh items, all selected and pending."""
        self._items = [ExtensionItem(data) for data in descriptors]
        logger.debug("Loaded %d item(s)", len(self._items))
        self.refresh()

    def upsert_settings(self, payload: dict[str, Any], editor_name: str = "VS Code") -> ExtensionItem:
        """Insert the settings item at the top, replacing any existing one."""
        self._items = [item for item in self._items if item.id != SETTINGS_ITEM_ID]
        settings_item = make_settings_item(payload, editor_name)
        self._items.insert(0, settings_item)
        self.refresh()
        return settings_item

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, item_id: str) -> ExtensionItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    @property
    def settings_item(self) -> ExtensionItem | None:
        return self.get(SETTINGS_ITEM_ID)

    def selected(self) -> list[ExtensionItem]:
        """Selected items in collection order."""
        return [item for item in self._items if item.selected]

    # =========================================================================
    # Mutation
    # =========================================================================

    def select_all(self) -> None:
        self._set_all_selected(True)

    def deselect_all(self) -> None:
        self._set_all_selected(False)

    def _set_all_selected(self, selected: bool) -> None:
        for item in self._items:
            item.selected = selected
        self.refresh()

    def toggle(self, item_id: str, checked: bool) -> None:
        """Apply a single checkbox change.

        The checkbox already shows the new state, so no full refresh is sent.
        """
        item = self.get(item_id)
        if item is not None:
            item.selected = checked

    def set_status(
        self,
        item_id: str,
        status: ExtensionStatus,
        error_message: str | None = None,
    ) -> None:
        """Update one item's status. Unknown ids are ignored."""
        item = self.get(item_id)
        if item is None:
            logger.debug("Ignoring status update for unknown item %s", item_id)
            return
        item.set_status(status, error_message)
        self._fire(item)
