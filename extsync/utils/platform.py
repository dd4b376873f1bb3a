"""Platform and OS detection utilities."""

import os
import platform
from pathlib import Path
from typing import Literal

PlatformOS = Literal["windows", "linux", "macos"]


def get_os() -> PlatformOS:
    """Get the current operating system.

    Returns:
        One of: "windows", "linux", "macos"
    """
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    elif system == "windows":
        return "windows"
    else:
        return "linux"


def get_home_directory() -> Path:
    """Get the user's home directory."""
    return Path(os.path.expanduser("~"))


def get_env(name: str, default: str | None = None) -> str | None:
    """Get an environment variable.

    Args:
        name: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.environ.get(name, default)


def get_user_config_directory() -> Path:
    """Get the per-user application configuration directory.

    This is where editors keep their ``User/settings.json``:
    - Windows: %APPDATA%
    - macOS: ~/Library/Application Support
    - Linux: $XDG_CONFIG_HOME or ~/.config

    Returns:
        Path to the configuration root
    """
    current = get_os()
    home = get_home_directory()

    if current == "windows":
        appdata = get_env("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    if current == "macos":
        return home / "Library" / "Application Support"

    xdg = get_env("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else home / ".config"


def get_local_programs_directory() -> Path:
    """Get the per-user programs directory used by Windows user installs."""
    local = get_env("LOCALAPPDATA")
    base = Path(local) if local else get_home_directory() / "AppData" / "Local"
    return base / "Programs"
