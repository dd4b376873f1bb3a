"""VSCodium editor host."""

from extsync.config.schemas import EditorMetadata
from extsync.editors import register_editor
from extsync.editors.base import EditorHost
from extsync.utils.platform import get_local_programs_directory


@register_editor("vscodium")
class VSCodiumHost(EditorHost):
    """Host for VSCodium, the telemetry-free VS Code build.

    Extensions live in ~/.vscode-oss/extensions.
    """

    @property
    def metadata(self) -> EditorMetadata:
        return EditorMetadata(
            name="vscodium",
            display_name="VSCodium",
            cli_name="codium",
            user_data_folder="VSCodium",
            extensions_folder=".vscode-oss",
            app_roots={
                "linux": [
                    "/usr/share/codium/resources/app",
                    "/opt/vscodium-bin/resources/app",
                    "/snap/codium/current/usr/share/codium/resources/app",
                ],
                "macos": [
                    "/Applications/VSCodium.app/Contents/Resources/app",
                ],
                "windows": [
                    str(get_local_programs_directory() / "VSCodium" / "resources" / "app"),
                ],
            },
        )
