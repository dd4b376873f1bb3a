"""Export file reading and writing.

An export file is either the current object shape::

    {"meta": {"exportedAt": ..., "source": ...},
     "extensions": [{"id": ..., "version": ..., ...}],
     "settings": {...}}

or the legacy shape, a bare list of extension descriptors.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from extsync.config.parser import ConfigError, load_json, save_json
from extsync.config.schemas import ExportDocument, ExportMeta, ExtensionData
from extsync.core.collection import ExtensionCollection
from extsync.editors.base import EditorHost

logger = logging.getLogger(__name__)

# Extensions bundled with the editor itself; reinstalling them makes no sense
BUILTIN_PREFIXES = (
    "vscode.",
    "ms-vscode.js-debug",
    "ms-vscode.references-view",
)


def is_exportable(extension_id: str) -> bool:
    """Check whether an extension should go into an export file."""
    return not extension_id.lower().startswith(BUILTIN_PREFIXES)


def build_export(
    extensions: Iterable[ExtensionData],
    settings: dict[str, Any] | None = None,
    source: str = "",
) -> ExportDocument:
    """Build an export document, dropping built-in extensions."""
    return ExportDocument(
        meta=ExportMeta(source=source),
        extensions=[ext for ext in extensions if is_exportable(ext.id)],
        settings=dict(settings or {}),
    )


def export_installed(host: EditorHost, include_settings: bool = True) -> ExportDocument:
    """Build an export document from what is installed in an editor."""
    extensions = host.list_installed_extensions()
    settings = host.read_user_settings() if include_settings else {}
    document = build_export(extensions, settings, source=host.display_name)
    logger.info(
        "Collected %d extension(s) and %d setting(s) from %s",
        len(document.extensions),
        len(document.settings),
        host.display_name,
    )
    return document


def export_collection(collection: ExtensionCollection, source: str = "") -> ExportDocument:
    """Build an export document from a collection's current items."""
    settings_item = collection.settings_item
    settings = settings_item.payload if settings_item is not None else None
    return build_export(
        (item.data for item in collection if not item.is_settings),
        settings,
        source=source,
    )


def write_export(path: Path, document: ExportDocument) -> None:
    """Write an export document as pretty-printed JSON."""
    save_json(path, document.to_json_data())


def parse_export(data: Any, path: Path | None = None) -> ExportDocument:
    """Validate raw JSON data as an export document.

    Raises:
        ConfigError: If the data matches neither accepted shape
    """
    if isinstance(data, list):
        data = {"extensions": data}
    elif not isinstance(data, dict) or not isinstance(data.get("extensions"), list):
        raise ConfigError("Invalid extensions file format", path)

    extensions = [{"id": entry} if isinstance(entry, str) else entry for entry in data["extensions"]]

    try:
        return ExportDocument.model_validate({**data, "extensions": extensions})
    except ValidationError as e:
        raise ConfigError(f"Invalid extensions file format: {e}", path) from e


def read_export(path: Path) -> ExportDocument:
    """Read and validate an export file.

    Raises:
        ConfigError: If the file is unreadable or has the wrong shape
    """
    document = parse_export(load_json(path), path)
    logger.debug("Read %d extension(s) from %s", len(document.extensions), path)
    return document


def load_into_collection(
    collection: ExtensionCollection,
    document: ExportDocument,
    editor_name: str = "VS Code",
) -> None:
    """Replace the collection's items with the document's contents.

    The settings item is added only when the document carries settings.
    """
    collection.load_all(document.extensions)
    if document.settings:
        collection.upsert_settings(document.settings, editor_name)
