"""Shared fixtures for extsync tests."""

import json
import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from extsync.config.schemas import EditorMetadata, ExtensionData
from extsync.core.collection import ExtensionCollection
from extsync.editors.base import CommandResult, EditorHost


class FakeEditorHost(EditorHost):
    """Editor host that records installs instead of spawning the CLI."""

    def __init__(
        self,
        installed: set[str] | None = None,
        failures: dict[str, str] | None = None,
        settings_path: Path | None = None,
    ):
        self.installed = set(installed or ())
        self.failures = dict(failures or {})
        self.settings_path = settings_path
        self.calls: list[tuple[str, str]] = []
        self.on_install: Callable[[str], None] | None = None

    @property
    def metadata(self) -> EditorMetadata:
        return EditorMetadata(
            name="fake",
            display_name="Fake Editor",
            cli_name="fake",
            user_data_folder="Fake",
            extensions_folder=".fake",
        )

    def get_user_settings_path(self) -> Path:
        if self.settings_path is not None:
            return self.settings_path
        return super().get_user_settings_path()

    def is_installed(self, extension_id: str) -> bool:
        return extension_id in self.installed

    def install_extension(self, extension_id: str, cli_command: str) -> CommandResult:
        self.calls.append((extension_id, cli_command))
        if self.on_install is not None:
            self.on_install(extension_id)
        if extension_id in self.failures:
            return CommandResult(success=False, stderr=self.failures[extension_id], returncode=1)
        self.installed.add(extension_id)
        return CommandResult(success=True, stdout=f"Extension '{extension_id}' was successfully installed.")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="extsync_test_"))
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def fake_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the home and config directories at a temporary location."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("EXTSYNC_CLI_COMMAND", raising=False)
    monkeypatch.setattr("extsync.utils.platform.get_os", lambda: "linux")
    return home


@pytest.fixture
def sample_extensions() -> list[ExtensionData]:
    """A few extension descriptors."""
    return [
        ExtensionData(
            id="ms-python.python",
            display_name="Python",
            description="Python language support",
            version="2024.2.1",
            publisher="ms-python",
        ),
        ExtensionData(
            id="esbenp.prettier-vscode",
            display_name="Prettier - Code formatter",
            version="10.1.0",
            publisher="esbenp",
        ),
        ExtensionData(id="eamodio.gitlens", version="14.0.0", publisher="eamodio"),
    ]


@pytest.fixture
def collection(sample_extensions: list[ExtensionData]) -> ExtensionCollection:
    """Collection loaded with the sample extensions."""
    result = ExtensionCollection()
    result.load_all(sample_extensions)
    return result


@pytest.fixture
def fake_host(temp_dir: Path) -> FakeEditorHost:
    """Fake editor host with its settings under the temp directory."""
    return FakeEditorHost(settings_path=temp_dir / "User" / "settings.json")


@pytest.fixture
def export_file(temp_dir: Path) -> Path:
    """An export file in the current format."""
    path = temp_dir / "extensions.json"
    data = {
        "meta": {"exportedAt": "2026-01-05T10:00:00Z", "source": "Visual Studio Code"},
        "extensions": [
            {"id": "ms-python.python", "version": "2024.2.1", "displayName": "Python"},
            {"id": "esbenp.prettier-vscode", "version": "10.1.0"},
        ],
        "settings": {"editor.fontSize": 14},
    }
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def make_extension() -> Callable[..., Path]:
    """Factory creating installed extension folders with a package.json."""

    def _make(ext_dir: Path, publisher: str, name: str, version: str = "1.0.0", **extra) -> Path:
        folder = ext_dir / f"{publisher}.{name}-{version}"
        folder.mkdir(parents=True)
        manifest = {"publisher": publisher, "name": name, "version": version, **extra}
        (folder / "package.json").write_text(json.dumps(manifest))
        return folder

    return _make
