"""Resolution of the editor CLI used to install extensions.

The editors ship their CLI in ``<app root>/bin`` next to helper binaries
(e.g. ``code-tunnel``). ``resolve_cli_name`` picks the right entry from a
directory listing; ``resolve_cli_command`` does the filesystem work around it.
"""

import logging
from collections.abc import Iterable
from pathlib import Path, PurePath

from extsync.config.schemas import AUTO_DETECT
from extsync.editors.base import EditorHost
from extsync.utils.filesystem import list_directory

logger = logging.getLogger(__name__)

KNOWN_CLI_NAMES = ("code", "cursor", "codium")


def _stem(file_name: str) -> str:
    return PurePath(file_name).stem.lower()


def resolve_cli_name(file_names: Iterable[str], host_name: str, fallback: str) -> str:
    """Pick the CLI executable from a bin directory listing.

    Hidden entries and tunnel helpers are ignored. Among the rest, prefer a
    name contained in the host's display name, then one of the well-known CLI
    names, then the first candidate.

    Args:
        file_names: Entry names found in the bin directory
        host_name: The editor's display name (e.g. "Cursor")
        fallback: Returned unchanged when there are no candidates

    Returns:
        The chosen file name, or ``fallback``
    """
    candidates = [
        name for name in file_names if name and not name.startswith(".") and "tunnel" not in name
    ]
    if not candidates:
        return fallback

    host = host_name.lower()
    for name in candidates:
        if _stem(name) in host:
            return name

    for name in candidates:
        if _stem(name) in KNOWN_CLI_NAMES:
            return name

    return candidates[0]


def resolve_cli_command(
    host: EditorHost,
    override: str = AUTO_DETECT,
    app_root: str | None = None,
) -> str:
    """Work out the command used to run the editor CLI.

    An explicit override is used as-is. In auto mode the editor's bin
    directory is searched; if it can't be found the bare CLI name is returned
    so it is looked up on PATH. Never raises.

    Args:
        host: The editor to install into
        override: ``"auto"`` or an explicit command/path
        app_root: Explicit application root, if configured

    Returns:
        Command or path to execute
    """
    if override and override != AUTO_DETECT:
        logger.debug("Using configured CLI command: %s", override)
        return override

    fallback = host.metadata.cli_name

    try:
        root = host.get_app_root(app_root)
    except OSError as e:
        logger.warning("Failed to locate %s: %s", host.display_name, e)
        return fallback

    if root is None:
        logger.warning("%s installation not found, falling back to %r on PATH", host.display_name, fallback)
        return fallback

    bin_dir = Path(root) / "bin"
    if not bin_dir.is_dir():
        logger.warning("Bin directory not found at %s", bin_dir)
        return fallback

    try:
        files = list_directory(bin_dir)
    except OSError as e:
        logger.warning("Failed to list %s: %s", bin_dir, e)
        return fallback

    chosen = resolve_cli_name(files, host.display_name, fallback)
    if chosen == fallback and fallback not in files:
        return fallback

    command = str(bin_dir / chosen)
    logger.debug("Resolved CLI command: %s", command)
    return command
