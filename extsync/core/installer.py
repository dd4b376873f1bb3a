"""Extension installation workflow.

The installer applies the settings item first, then installs each selected
extension one at a time through the editor CLI. Every outcome is recorded on
the item in the collection; a failing item never stops the run.
"""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from extsync.config.parser import ConfigError, load_jsonc, save_json
from extsync.core.collection import ExtensionCollection
from extsync.core.items import ExtensionItem, ExtensionStatus
from extsync.editors.base import EditorHost
from extsync.utils.filesystem import backup_file

logger = logging.getLogger(__name__)


class ProgressReporter(Protocol):
    """Receives progress messages with the fraction of work just completed."""

    def report(self, message: str, increment: float) -> None: ...


class CancellationToken:
    """Cooperative cancellation flag, checked between items."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class InstallSummary:
    """Summary of an installation run."""

    installed: int = 0
    already_installed: int = 0
    failed: int = 0
    skipped: int = 0
    settings_applied: bool | None = None
    cancelled: bool = False
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def all_successful(self) -> bool:
        return self.failed == 0 and self.settings_applied is not False

    @property
    def message(self) -> str:
        parts = [f"{self.installed} installed"]
        if self.already_installed:
            parts.append(f"{self.already_installed} already installed")
        if self.failed:
            parts.append(f"{self.failed} failed")
        if self.skipped:
            parts.append(f"{self.skipped} skipped")
        if self.settings_applied is True:
            parts.append("settings applied")
        elif self.settings_applied is False:
            parts.append("settings failed")

        text = ", ".join(parts)
        if self.cancelled:
            return f"Installation cancelled: {text}"
        return f"Installation complete: {text}"


def merge_settings(current: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    """Shallow-merge incoming settings over the current ones.

    Incoming keys replace current keys of the same name; keys only present in
    the current settings are kept. Key order is preserved.
    """
    merged = dict(current)
    merged.update(incoming)
    return merged


def read_current_settings(path: Path) -> dict[str, Any]:
    """Read settings.json, treating a missing or broken file as empty."""
    if not path.exists():
        return {}
    try:
        return load_jsonc(path)
    except ConfigError as e:
        logger.warning("Ignoring current settings: %s", e)
        return {}


class ExtensionInstaller:
    """Runs the settings merge and the per-extension installs."""

    def __init__(
        self,
        collection: ExtensionCollection,
        host: EditorHost,
        cli_command: str,
        settings_path: Path | None = None,
        progress: ProgressReporter | None = None,
        cancellation: CancellationToken | None = None,
        backup: bool = True,
    ):
        """Initialize the installer.

        Args:
            collection: Items to install; statuses are written back here
            host: Editor to install into
            cli_command: Resolved CLI command or path
            settings_path: settings.json to merge into (defaults to the host's)
            progress: Optional progress sink
            cancellation: Optional cancellation flag
            backup: Whether to keep a .bak copy of the old settings
        """
        self.collection = collection
        self.host = host
        self.cli_command = cli_command
        self.settings_path = settings_path or host.get_user_settings_path()
        self.progress = progress
        self.cancellation = cancellation or CancellationToken()
        self.backup = backup

    def run(self) -> InstallSummary:
        """Apply settings and install the selected extensions.

        Returns:
            InstallSummary describing the run
        """
        summary = InstallSummary()
        selected = self.collection.selected()

        settings_item = next((item for item in selected if item.is_settings), None)
        if settings_item is not None and settings_item.payload:
            summary.settings_applied = self._apply_settings(settings_item)

        extensions = [item for item in selected if not item.is_settings]
        total = len(extensions)
        logger.info("Starting installation of %d extension(s)", total)

        for index, item in enumerate(extensions):
            if self.cancellation.cancelled:
                summary.cancelled = True
                summary.skipped = total - index
                logger.info("Installation cancelled, %d extension(s) skipped", summary.skipped)
                break

            self._install_one(item, summary)
            self._report(f"{item.label} ({index + 1}/{total})", 1 / total)

        logger.info(summary.message)
        return summary

    def _apply_settings(self, item: ExtensionItem) -> bool:
        """Merge the item's payload into settings.json."""
        self.collection.set_status(item.id, ExtensionStatus.INSTALLING)
        self._report("Applying settings", 0.0)

        current = read_current_settings(self.settings_path)
        merged = merge_settings(current, item.payload or {})

        try:
            if self.backup:
                backup_file(self.settings_path)
            save_json(self.settings_path, merged, indent=4)
        except OSError as e:
            logger.error("Failed to write settings to %s: %s", self.settings_path, e)
            self.collection.set_status(item.id, ExtensionStatus.FAILED, str(e))
            return False

        logger.info("Applied %d setting(s) to %s", len(item.payload or {}), self.settings_path)
        self.collection.set_status(item.id, ExtensionStatus.SUCCESS)
        return True

    def _install_one(self, item: ExtensionItem, summary: InstallSummary) -> None:
        if self.host.is_installed(item.id):
            logger.debug("Skipping %s: already installed", item.id)
            self.collection.set_status(item.id, ExtensionStatus.ALREADY_INSTALLED)
            summary.already_installed += 1
            return

        self.collection.set_status(item.id, ExtensionStatus.INSTALLING)
        logger.info("Installing %s", item.id)

        try:
            result = self.host.install_extension(item.id, self.cli_command)
        except OSError as e:
            error = f"Cannot run {self.cli_command}: {e}"
        else:
            if result.success:
                logger.debug("Installed %s: %s", item.id, result.stdout.strip())
                self.collection.set_status(item.id, ExtensionStatus.SUCCESS)
                summary.installed += 1
                return
            error = result.error_text

        logger.error("Failed to install %s: %s", item.id, error)
        self.collection.set_status(item.id, ExtensionStatus.FAILED, error)
        summary.failed += 1
        summary.failures[item.id] = error

    def _report(self, message: str, increment: float) -> None:
        if self.progress is not None:
            self.progress.report(message, increment)
