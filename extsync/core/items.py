"""Installable items tracked in the checklist."""

from enum import Enum
from typing import Any

from extsync.config.schemas import ExtensionData

# Reserved id of the synthetic item that carries the user settings
SETTINGS_ITEM_ID = "settings"

SUMMARY_MAX_LENGTH = 50


class ExtensionStatus(str, Enum):
    """Install status of an item."""

    PENDING = "pending"
    INSTALLING = "installing"
    SUCCESS = "success"
    FAILED = "failed"
    ALREADY_INSTALLED = "already_installed"

    @property
    def is_terminal(self) -> bool:
        return self in (
            ExtensionStatus.SUCCESS,
            ExtensionStatus.FAILED,
            ExtensionStatus.ALREADY_INSTALLED,
        )


class ExtensionItem:
    """One extension (or the settings bundle) in a collection.

    Items start selected and pending. The id is fixed for the life of the
    item; only selection, status and error message change.
    """

    def __init__(self, data: ExtensionData, payload: dict[str, Any] | None = None):
        self._data = data
        self.payload = payload
        self.selected = True
        self.status = ExtensionStatus.PENDING
        self.error_message: str | None = None

    def __repr__(self) -> str:
        return f"ExtensionItem(id={self.id!r}, status={self.status.value}, selected={self.selected})"

    @property
    def id(self) -> str:
        return self._data.id

    @property
    def data(self) -> ExtensionData:
        return self._data

    @property
    def is_settings(self) -> bool:
        return self.id == SETTINGS_ITEM_ID

    @property
    def label(self) -> str:
        """Display name, falling back to the id."""
        return self._data.display_name or self.id

    @property
    def summary(self) -> str:
        """Short secondary text: the truncated description, or the id."""
        description = self._data.description
        if not description:
            return self.id
        if len(description) > SUMMARY_MAX_LENGTH:
            return description[: SUMMARY_MAX_LENGTH - 3] + "..."
        return description

    def details(self) -> list[str]:
        """Full description lines for a detail view."""
        lines = [self.label, "", f"ID: {self.id}"]
        if self._data.publisher:
            lines.append(f"Publisher: {self._data.publisher}")
        if self._data.version:
            lines.append(f"Version: {self._data.version}")
        if self._data.description:
            lines.extend(["", self._data.description])
        if self.error_message:
            lines.extend(["", f"Error: {self.error_message}"])
        return lines

    def set_status(self, status: ExtensionStatus, error_message: str | None = None) -> None:
        self.status = status
        self.error_message = error_message if status == ExtensionStatus.FAILED else None


def make_settings_item(payload: dict[str, Any], editor_name: str = "VS Code") -> ExtensionItem:
    """Build the synthetic settings item for a settings payload."""
    data = ExtensionData(
        id=SETTINGS_ITEM_ID,
        display_name=f"{editor_name} Settings",
        description="User settings.json configuration",
        publisher="User",
        version="Current",
    )
    return ExtensionItem(data, payload=payload)
