"""Main CLI application for extsync."""

import logging
import signal
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from extsync import __version__
from extsync.config.parser import ConfigError, get_config_path, load_tool_config, save_tool_config
from extsync.config.schemas import ToolConfig
from extsync.core.bundle import export_installed, load_into_collection, read_export, write_export
from extsync.core.collection import ExtensionCollection
from extsync.core.installer import CancellationToken, ExtensionInstaller
from extsync.core.resolver import resolve_cli_command
from extsync.editors import detect_editor, get_editor
from extsync.editors.base import EditorHost
from extsync.ui.checklist import ChecklistView, RichInstallDisplay, print_failures, prompt_selection
from extsync.utils.platform import get_home_directory

app = typer.Typer(
    name="extsync",
    help="Export and reinstall editor extensions and settings",
    add_completion=False,
    no_args_is_help=True,
)
config_app = typer.Typer(help="Show or change extsync configuration", no_args_is_help=True)
app.add_typer(config_app, name="config")

console = Console()
error_console = Console(stderr=True)

logger = logging.getLogger("extsync")

DEFAULT_EXPORT_NAME = "vscode-extensions.json"

EditorOption = Annotated[
    str | None,
    typer.Option(
        "--editor",
        "-e",
        help="Editor to work with: vscode, cursor or vscodium (auto-detected by default)",
    ),
]


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            console=error_console,
            show_time=verbosity >= 2,
            show_path=verbosity >= 3,
            rich_tracebacks=True,
        )
        handler.setLevel(level)
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            h.setLevel(level)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def get_config() -> ToolConfig:
    """Load the tool configuration, exiting on errors."""
    try:
        return load_tool_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def get_host(editor: str | None, config: ToolConfig) -> EditorHost:
    """Get the editor host from the option, the config, or detection."""
    name = editor or config.editor
    if name is None:
        return detect_editor()
    try:
        return get_editor(name)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@app.callback()
def callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug)",
        ),
    ] = 0,
) -> None:
    """extsync - export and reinstall editor extensions and settings."""
    setup_logging(verbose)


@app.command()
def version() -> None:
    """Show the extsync version."""
    console.print(f"extsync {__version__}")


@app.command("export")
def export_command(
    output: Annotated[
        Path | None,
        typer.Argument(help=f"File to write (defaults to ~/{DEFAULT_EXPORT_NAME})"),
    ] = None,
    editor: EditorOption = None,
    no_settings: Annotated[
        bool,
        typer.Option("--no-settings", help="Don't include user settings"),
    ] = False,
) -> None:
    """Export installed extensions and user settings to a JSON file."""
    config = get_config()
    host = get_host(editor, config)
    output = output or get_home_directory() / DEFAULT_EXPORT_NAME

    try:
        document = export_installed(host, include_settings=not no_settings)
        write_export(output, document)
    except OSError as e:
        print_error(f"Error exporting extensions: {e}")
        raise typer.Exit(1) from e

    print_success(f"Successfully exported {len(document.extensions)} extensions to {output}")
    if document.settings:
        console.print(f"  Included {len(document.settings)} setting(s)")


@app.command()
def show(
    file: Annotated[Path, typer.Argument(help="Export file to show")],
) -> None:
    """Show the contents of an export file."""
    try:
        document = read_export(file)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    collection = ExtensionCollection()
    load_into_collection(collection, document, document.meta.source or "Editor")

    view = ChecklistView(collection, title=f"{file.name}")
    console.print(view.render())
    view.close()
    if document.meta.source:
        console.print(f"Exported from {document.meta.source} at {document.meta.exported_at}")


@app.command("import")
def import_command(
    file: Annotated[Path, typer.Argument(help="Export file to import")],
    editor: EditorOption = None,
    select_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Install everything without the checklist"),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Don't ask for confirmation"),
    ] = False,
    no_settings: Annotated[
        bool,
        typer.Option("--no-settings", help="Don't apply settings from the file"),
    ] = False,
    cli: Annotated[
        str | None,
        typer.Option("--cli", help="Editor CLI command or path (overrides config)"),
    ] = None,
    settings_path: Annotated[
        Path | None,
        typer.Option("--settings-path", help="settings.json to merge into"),
    ] = None,
) -> None:
    """Import extensions and settings from an export file.

    Shows a checklist of everything in the file, then installs the selected
    extensions one at a time with the editor's CLI. Settings from the file
    are merged into the user settings.json. Press Ctrl-C to stop after the
    current extension.
    """
    config = get_config()
    host = get_host(editor, config)

    try:
        document = read_export(file)
    except ConfigError as e:
        print_error(f"Error importing extensions: {e}")
        raise typer.Exit(1) from e

    collection = ExtensionCollection()
    load_into_collection(collection, document, host.display_name)

    settings_item = collection.settings_item
    if no_settings and settings_item is not None:
        collection.toggle(settings_item.id, False)

    if not (select_all or yes):
        if not prompt_selection(collection, console):
            console.print("Cancelled")
            raise typer.Exit(0)

    selected = collection.selected()
    extensions = [item for item in selected if not item.is_settings]
    if not selected:
        console.print("Nothing selected")
        return

    pending = [item for item in extensions if not host.is_installed(item.id)]
    applies_settings = any(item.is_settings for item in selected)
    if not pending and not applies_settings:
        print_success("All extensions are already installed.")
        return

    if not yes and not typer.confirm(f"Install {len(pending)} extensions?", default=True):
        console.print("Cancelled")
        raise typer.Exit(0)

    cli_command = resolve_cli_command(host, cli or config.cli_command, config.app_root)
    console.print(f"Using command: {cli_command}")

    cancellation = CancellationToken()

    def handle_interrupt(signum, frame):
        if cancellation.cancelled:
            raise KeyboardInterrupt
        cancellation.cancel()
        error_console.print("[yellow]Stopping after the current extension...[/yellow]")

    previous_handler = signal.signal(signal.SIGINT, handle_interrupt)
    try:
        with RichInstallDisplay(collection, console) as display:
            installer = ExtensionInstaller(
                collection,
                host,
                cli_command,
                settings_path=settings_path,
                progress=display,
                cancellation=cancellation,
            )
            summary = installer.run()
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if summary.failed or summary.settings_applied is False:
        console.print()
        print_failures(collection, console)

    console.print()
    if summary.all_successful and not summary.cancelled:
        print_success(summary.message)
    else:
        print_warning(summary.message)

    if not summary.all_successful:
        raise typer.Exit(1)


@app.command("list")
def list_extensions(editor: EditorOption = None) -> None:
    """List extensions installed in the editor."""
    config = get_config()
    host = get_host(editor, config)
    extensions = host.list_installed_extensions()

    if not extensions:
        console.print(f"No extensions installed in {host.display_name}")
        return

    table = Table(title=f"{host.display_name} Extensions")
    table.add_column("Extension", style="cyan")
    table.add_column("Name")
    table.add_column("Version", style="green")

    for ext in extensions:
        table.add_row(ext.id, ext.display_name or "", ext.version or "")

    console.print(table)
    console.print(f"\n{len(extensions)} extension(s) in {host.get_extensions_directory()}")


@app.command("which-cli")
def which_cli(
    editor: EditorOption = None,
    cli: Annotated[
        str | None,
        typer.Option("--cli", help="Editor CLI command or path (overrides config)"),
    ] = None,
) -> None:
    """Show which editor CLI would be used for installs."""
    config = get_config()
    host = get_host(editor, config)
    console.print(resolve_cli_command(host, cli or config.cli_command, config.app_root))


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration."""
    config = get_config()

    table = Table(title=str(get_config_path()))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in config.model_dump().items():
        table.add_row(key, "" if value is None else str(value))
    console.print(table)


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Configuration key")],
    value: Annotated[str, typer.Argument(help="New value (empty to reset)")],
) -> None:
    """Change a configuration value."""
    if key not in ToolConfig.model_fields:
        print_error(f"Unknown config key: {key}")
        print_error(f"Available keys: {', '.join(ToolConfig.model_fields)}")
        raise typer.Exit(1)

    try:
        config = load_tool_config(apply_env=False)
        data = config.model_dump()
        data[key] = value or None
        if data["cli_command"] is None:
            data["cli_command"] = ToolConfig.model_fields["cli_command"].default
        updated = ToolConfig.model_validate(data)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except ValueError as e:
        print_error(f"Invalid value for {key}: {e}")
        raise typer.Exit(1) from e

    path = save_tool_config(updated)
    print_success(f"Set {key} in {path}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
