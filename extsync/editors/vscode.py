"""Visual Studio Code editor host.

Layout:
    ~/.vscode/extensions/                 # User-installed extensions
    <config dir>/Code/User/settings.json  # User settings
    <app root>/bin/code                   # CLI shipped with the editor
"""

from extsync.config.schemas import EditorMetadata
from extsync.editors import register_editor
from extsync.editors.base import EditorHost
from extsync.utils.platform import get_local_programs_directory


@register_editor("vscode")
class VSCodeHost(EditorHost):
    """Host for Microsoft's Visual Studio Code."""

    @property
    def metadata(self) -> EditorMetadata:
        return EditorMetadata(
            name="vscode",
            display_name="Visual Studio Code",
            cli_name="code",
            user_data_folder="Code",
            extensions_folder=".vscode",
            app_roots={
                "linux": [
                    "/usr/share/code/resources/app",
                    "/opt/visual-studio-code/resources/app",
                    "/snap/code/current/usr/share/code/resources/app",
                ],
                "macos": [
                    "/Applications/Visual Studio Code.app/Contents/Resources/app",
                    "~/Applications/Visual Studio Code.app/Contents/Resources/app",
                ],
                "windows": [
                    str(get_local_programs_directory() / "Microsoft VS Code" / "resources" / "app"),
                    "C:/Program Files/Microsoft VS Code/resources/app",
                ],
            },
        )
