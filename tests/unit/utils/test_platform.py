"""Tests for extsync.utils.platform module."""

from pathlib import Path
from unittest.mock import patch

from extsync.utils.platform import (
    get_env,
    get_home_directory,
    get_local_programs_directory,
    get_os,
    get_user_config_directory,
)


class TestGetOS:
    """Tests for get_os function."""

    def test_returns_valid_os(self):
        """Returns one of the valid OS values."""
        assert get_os() in ("windows", "linux", "macos")

    @patch("platform.system")
    def test_darwin_returns_macos(self, mock_system):
        """Darwin platform returns macos."""
        mock_system.return_value = "Darwin"
        assert get_os() == "macos"

    @patch("platform.system")
    def test_windows_returns_windows(self, mock_system):
        """Windows platform returns windows."""
        mock_system.return_value = "Windows"
        assert get_os() == "windows"

    @patch("platform.system")
    def test_other_returns_linux(self, mock_system):
        """Anything else is treated as linux."""
        mock_system.return_value = "FreeBSD"
        assert get_os() == "linux"


class TestGetEnv:
    """Tests for get_env function."""

    def test_returns_value(self, monkeypatch):
        """Returns a set variable."""
        monkeypatch.setenv("EXTSYNC_TEST_VAR", "value")
        assert get_env("EXTSYNC_TEST_VAR") == "value"

    def test_returns_default(self, monkeypatch):
        """Returns the default for unset variables."""
        monkeypatch.delenv("EXTSYNC_TEST_VAR", raising=False)
        assert get_env("EXTSYNC_TEST_VAR", "fallback") == "fallback"


class TestGetUserConfigDirectory:
    """Tests for get_user_config_directory function."""

    def test_linux_uses_xdg(self, fake_home: Path, monkeypatch):
        """XDG_CONFIG_HOME wins on linux."""
        monkeypatch.setenv("XDG_CONFIG_HOME", "/custom/config")
        assert get_user_config_directory() == Path("/custom/config")

    def test_linux_default(self, fake_home: Path, monkeypatch):
        """Defaults to ~/.config."""
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_user_config_directory() == fake_home / ".config"

    def test_macos(self, fake_home: Path, monkeypatch):
        """macOS uses Application Support."""
        monkeypatch.setattr("extsync.utils.platform.get_os", lambda: "macos")
        assert get_user_config_directory() == fake_home / "Library" / "Application Support"

    def test_windows_appdata(self, fake_home: Path, monkeypatch):
        """Windows uses APPDATA."""
        monkeypatch.setattr("extsync.utils.platform.get_os", lambda: "windows")
        monkeypatch.setenv("APPDATA", str(fake_home / "Roaming"))
        assert get_user_config_directory() == fake_home / "Roaming"


class TestHomeAndPrograms:
    """Tests for home and programs directories."""

    def test_home_follows_environment(self, fake_home: Path):
        """HOME is honored."""
        assert get_home_directory() == fake_home

    def test_local_programs(self, monkeypatch, temp_dir: Path):
        """LOCALAPPDATA/Programs is used when set."""
        monkeypatch.setenv("LOCALAPPDATA", str(temp_dir))
        assert get_local_programs_directory() == temp_dir / "Programs"
