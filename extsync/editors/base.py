"""Abstract base class for editor hosts.

An editor host answers questions about one installed editor (where its
extensions and settings live, which extensions are installed) and runs its
CLI to install an extension. Subclasses only describe the editor through
metadata; the VS Code family shares one on-disk layout.
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from extsync.config.parser import ConfigError, load_json, load_jsonc
from extsync.config.schemas import EditorMetadata, ExtensionData
from extsync.utils.platform import get_home_directory, get_os, get_user_config_directory

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external CLI invocation."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def error_text(self) -> str:
        """The text to show the user when the command failed."""
        text = self.stderr.strip() or self.stdout.strip()
        return text or f"Command exited with code {self.returncode}"


class EditorHost(ABC):
    """Abstract base class for editor hosts."""

    _installed_ids: set[str] | None = None

    # =========================================================================
    # Metadata
    # =========================================================================

    @property
    @abstractmethod
    def metadata(self) -> EditorMetadata:
        """Get editor metadata."""
        ...

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def display_name(self) -> str:
        return self.metadata.display_name

    # =========================================================================
    # Locations
    # =========================================================================

    def get_user_settings_path(self) -> Path:
        """Path to the user settings.json."""
        return get_user_config_directory() / self.metadata.user_data_folder / "User" / "settings.json"

    def get_extensions_directory(self) -> Path:
        """Directory holding user-installed extensions."""
        return get_home_directory() / self.metadata.extensions_folder / "extensions"

    def get_app_root(self, override: str | None = None) -> Path | None:
        """Find the editor's application root (the directory containing bin/).

        Args:
            override: Explicit app root from configuration

        Returns:
            The first existing app root, or None if the editor isn't found
        """
        if override:
            return Path(override).expanduser()

        for candidate in self.metadata.app_roots.get(get_os(), []):
            path = Path(candidate).expanduser()
            if path.is_dir():
                return path
        return None

    # =========================================================================
    # Installed extensions
    # =========================================================================

    def list_installed_extensions(self) -> list[ExtensionData]:
        """Scan the extensions directory for installed extensions.

        Each extension folder carries a package.json. Folders listed in the
        editor's .obsolete file are pending removal and skipped. When several
        versions of an extension are on disk, the first folder wins.
        """
        ext_dir = self.get_extensions_directory()
        if not ext_dir.is_dir():
            logger.debug("Extensions directory not found: %s", ext_dir)
            return []

        obsolete = self._load_obsolete(ext_dir)
        seen: set[str] = set()
        extensions: list[ExtensionData] = []

        for folder in sorted(p for p in ext_dir.iterdir() if p.is_dir()):
            if folder.name in obsolete or folder.name.startswith("."):
                continue

            manifest_path = folder / "package.json"
            if not manifest_path.is_file():
                continue

            try:
                manifest = load_json(manifest_path)
            except ConfigError as e:
                logger.warning("Skipping %s: %s", folder.name, e)
                continue

            data = self._extension_from_manifest(manifest)
            if data is None or data.id.lower() in seen:
                continue
            seen.add(data.id.lower())
            extensions.append(data)

        return extensions

    def is_installed(self, extension_id: str) -> bool:
        """Check whether an extension is installed (ids are case-insensitive).

        The extensions directory is scanned once per host; successful installs
        are added to the cached ids. Call ``refresh_installed()`` to rescan.
        """
        if self._installed_ids is None:
            self._installed_ids = {ext.id.lower() for ext in self.list_installed_extensions()}
        return extension_id.lower() in self._installed_ids

    def refresh_installed(self) -> None:
        """Forget the cached installed ids."""
        self._installed_ids = None

    def _load_obsolete(self, ext_dir: Path) -> set[str]:
        obsolete_path = ext_dir / ".obsolete"
        if not obsolete_path.is_file():
            return set()
        try:
            data = json.loads(obsolete_path.read_text(encoding="utf-8") or "{}")
        except (json.JSONDecodeError, OSError) as e:
            logger.debug("Ignoring unreadable %s: %s", obsolete_path, e)
            return set()
        return {name for name, flag in data.items() if flag} if isinstance(data, dict) else set()

    @staticmethod
    def _extension_from_manifest(manifest: Any) -> ExtensionData | None:
        if not isinstance(manifest, dict):
            return None
        publisher = manifest.get("publisher")
        name = manifest.get("name")
        if not publisher or not name:
            return None

        display_name = manifest.get("displayName")
        description = manifest.get("description")
        # Localized manifests use %placeholders% resolved from package.nls.json
        if isinstance(display_name, str) and display_name.startswith("%"):
            display_name = None
        if isinstance(description, str) and description.startswith("%"):
            description = None

        return ExtensionData(
            id=f"{publisher}.{name}",
            display_name=display_name,
            description=description,
            version=manifest.get("version"),
            publisher=publisher,
        )

    # =========================================================================
    # Settings
    # =========================================================================

    def read_user_settings(self) -> dict[str, Any]:
        """Read the user settings, or an empty mapping if unavailable."""
        path = self.get_user_settings_path()
        if not path.exists():
            return {}
        try:
            return load_jsonc(path)
        except ConfigError as e:
            logger.warning("Could not read settings: %s", e)
            return {}

    # =========================================================================
    # Installation
    # =========================================================================

    def build_install_command(self, extension_id: str, cli_command: str) -> list[str]:
        return [cli_command, "--install-extension", extension_id]

    def install_extension(self, extension_id: str, cli_command: str) -> CommandResult:
        """Install one extension through the editor CLI.

        Blocks until the CLI exits. The child runs in its own session so an
        interrupt aimed at extsync does not kill an install in progress.

        Raises:
            OSError: If the CLI cannot be started
        """
        args = self.build_install_command(extension_id, cli_command)
        logger.debug("Running: %s", " ".join(args))

        completed = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=False,
            start_new_session=True,
        )
        if completed.returncode == 0 and self._installed_ids is not None:
            self._installed_ids.add(extension_id.lower())
        return CommandResult(
            success=completed.returncode == 0,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )
