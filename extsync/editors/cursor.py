"""Cursor editor host.

Cursor is a VS Code fork and keeps the same layout under its own names:
~/.cursor/extensions and <config dir>/Cursor/User/settings.json.
"""

from extsync.config.schemas import EditorMetadata
from extsync.editors import register_editor
from extsync.editors.base import EditorHost
from extsync.utils.platform import get_local_programs_directory


@register_editor("cursor")
class CursorHost(EditorHost):
    """Host for the Cursor editor."""

    @property
    def metadata(self) -> EditorMetadata:
        return EditorMetadata(
            name="cursor",
            display_name="Cursor",
            cli_name="cursor",
            user_data_folder="Cursor",
            extensions_folder=".cursor",
            app_roots={
                "linux": [
                    "/opt/Cursor/resources/app",
                    "/usr/share/cursor/resources/app",
                    "~/Applications/cursor/resources/app",
                ],
                "macos": [
                    "/Applications/Cursor.app/Contents/Resources/app",
                ],
                "windows": [
                    str(get_local_programs_directory() / "cursor" / "resources" / "app"),
                ],
            },
        )
