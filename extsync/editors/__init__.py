"""Editor hosts for extsync.

This module provides the editor registration system and discovery mechanism.
Everything that depends on a particular editor (install locations, settings
path, CLI name) lives in an EditorHost implementation.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from extsync.editors.base import EditorHost

logger = logging.getLogger(__name__)

_EDITORS: dict[str, type[EditorHost]] = {}
_LOADED = False

# Known editor modules - add new editors here
_EDITOR_MODULES = [
    "extsync.editors.vscode",
    "extsync.editors.cursor",
    "extsync.editors.vscodium",
]

DEFAULT_EDITOR = "vscode"


def register_editor(
    name: str,
) -> Callable[[type[EditorHost]], type[EditorHost]]:
    """Decorator for editor registration.

    Usage:
        @register_editor("cursor")
        class CursorHost(EditorHost):
            ...
    """

    def decorator(cls: type[EditorHost]) -> type[EditorHost]:
        _EDITORS[name] = cls
        return cls

    return decorator


def _load_editors() -> None:
    """Load all editor modules to trigger registration."""
    global _LOADED
    if _LOADED:
        return

    for module_name in _EDITOR_MODULES:
        importlib.import_module(module_name)

    _LOADED = True


def get_editor(name: str) -> EditorHost:
    """Get an instantiated editor host by name.

    Raises:
        ValueError: If the editor is not registered
    """
    _load_editors()

    if name not in _EDITORS:
        available = ", ".join(_EDITORS.keys()) or "none"
        raise ValueError(f"Unknown editor: {name}. Available editors: {available}")
    return _EDITORS[name]()


def list_editors() -> list[str]:
    """List all registered editor names."""
    _load_editors()
    return list(_EDITORS.keys())


def detect_editor() -> EditorHost:
    """Pick the first editor that has an extensions directory on this machine.

    Falls back to VS Code when none is found.
    """
    for name in list_editors():
        host = get_editor(name)
        if host.get_extensions_directory().is_dir():
            logger.debug("Detected editor: %s", name)
            return host
    logger.debug("No editor detected, defaulting to %s", DEFAULT_EDITOR)
    return get_editor(DEFAULT_EDITOR)
