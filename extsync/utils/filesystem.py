"""Filesystem utilities for extsync."""

import shutil
from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def backup_file(path: Path, suffix: str = ".bak") -> Path | None:
    """Copy a file next to itself before it gets overwritten.

    Args:
        path: File to back up
        suffix: Suffix appended to the file name

    Returns:
        Path to the backup, or None if there was nothing to back up
    """
    if not path.is_file():
        return None
    backup = path.with_name(path.name + suffix)
    shutil.copy2(path, backup)
    return backup


def list_directory(path: Path) -> list[str]:
    """List entry names of a directory in sorted order.

    Args:
        path: Directory to list

    Returns:
        Sorted entry names, or an empty list if the directory doesn't exist
    """
    if not path.is_dir():
        return []
    return sorted(entry.name for entry in path.iterdir())
