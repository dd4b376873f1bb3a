"""Terminal checklist for an ExtensionCollection.

The view listens to the collection's change events and re-reads the
collection on every event, whether it was a full refresh or a single item.
"""

from collections.abc import Callable

from rich.console import Console, Group
from rich.live import Live
from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.prompt import Prompt
from rich.table import Table

from extsync.core.collection import ExtensionCollection
from extsync.core.items import ExtensionItem, ExtensionStatus

STATUS_GLYPHS = {
    ExtensionStatus.PENDING: "[dim]·[/dim]",
    ExtensionStatus.INSTALLING: "[yellow]↻[/yellow]",
    ExtensionStatus.SUCCESS: "[green]✓[/green]",
    ExtensionStatus.FAILED: "[red]✗[/red]",
    ExtensionStatus.ALREADY_INSTALLED: "[green]✔[/green]",
}

SELECTION_HELP = (
    "Toggle items by number (e.g. [cyan]1,3-5[/cyan]), "
    "[cyan]a[/cyan] select all, [cyan]n[/cyan] select none, "
    "[cyan]Enter[/cyan] to continue, [cyan]q[/cyan] to quit"
)


class SelectionError(ValueError):
    """Raised for checklist input that can't be parsed."""


class ChecklistView:
    """Renders a collection as a table of checkboxes and statuses."""

    def __init__(self, collection: ExtensionCollection, title: str = "Extensions"):
        self.collection = collection
        self.title = title
        self._on_update: Callable[[], None] | None = None
        self._unsubscribe = collection.subscribe(self._handle_change)

    def close(self) -> None:
        self._unsubscribe()

    def attach(self, on_update: Callable[[], None] | None) -> None:
        """Set the callback run after each collection change."""
        self._on_update = on_update

    def _handle_change(self, _item: ExtensionItem | None) -> None:
        if self._on_update is not None:
            self._on_update()

    def render(self) -> Table:
        """Build a table from the collection's current state."""
        table = Table(title=self.title)
        table.add_column("#", justify="right", style="dim")
        table.add_column("", justify="center")
        table.add_column("Status", justify="center")
        table.add_column("Name", style="cyan")
        table.add_column("Description", style="dim")
        table.add_column("Version", style="green")

        for index, item in enumerate(self.collection, start=1):
            checkbox = escape("[x]" if item.selected else "[ ]")
            label = escape(item.label)
            name = f"[bold]{label}[/bold]" if item.is_settings else label
            table.add_row(
                str(index),
                checkbox,
                STATUS_GLYPHS[item.status],
                name,
                escape(item.summary),
                escape(item.data.version or ""),
            )

        selected = len(self.collection.selected())
        table.caption = f"{selected} of {len(self.collection)} selected"
        return table


def parse_selection(text: str, count: int) -> list[int]:
    """Parse "1,3-5" style input into zero-based indexes.

    Raises:
        SelectionError: If a number or range is malformed or out of bounds
    """
    indexes: list[int] = []
    for part in text.replace(" ", ",").split(","):
        if not part:
            continue
        try:
            if "-" in part:
                start_text, end_text = part.split("-", 1)
                start, end = int(start_text), int(end_text)
            else:
                start = end = int(part)
        except ValueError as e:
            raise SelectionError(f"Not a number or range: {part}") from e

        if start > end:
            start, end = end, start
        if start < 1 or end > count:
            raise SelectionError(f"Out of range: {part} (1-{count})")
        indexes.extend(range(start - 1, end))
    return indexes


def prompt_selection(collection: ExtensionCollection, console: Console) -> bool:
    """Let the user pick items interactively.

    Returns:
        True to continue with the selection, False if the user quit
    """
    view = ChecklistView(collection, title="Select items to install")
    try:
        while True:
            console.print(view.render())
            console.print(SELECTION_HELP)
            answer = Prompt.ask(">", default="", show_default=False, console=console).strip().lower()

            if answer == "":
                return True
            if answer in ("q", "quit"):
                return False
            if answer in ("a", "all"):
                collection.select_all()
                continue
            if answer in ("n", "none"):
                collection.deselect_all()
                continue

            try:
                indexes = parse_selection(answer, len(collection))
            except SelectionError as e:
                console.print(f"[red]{e}[/red]")
                continue

            items = collection.items
            for index in indexes:
                item = items[index]
                collection.toggle(item.id, not item.selected)
    finally:
        view.close()


class RichInstallDisplay:
    """Live checklist plus progress bar for an installation run.

    Implements the installer's ProgressReporter protocol.
    """

    def __init__(self, collection: ExtensionCollection, console: Console):
        self.console = console
        self.view = ChecklistView(collection, title="Installing")
        self.progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        )
        self._task = self.progress.add_task("Starting...", total=1.0)
        self._live: Live | None = None

    def __enter__(self) -> "RichInstallDisplay":
        self._live = Live(self._renderable(), console=self.console, refresh_per_second=8)
        self._live.__enter__()
        self.view.attach(self._update)
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.view.attach(None)
        self.view.close()
        if self._live is not None:
            self._live.update(self._renderable())
            self._live.__exit__(*exc_info)
            self._live = None

    def _renderable(self) -> Group:
        return Group(self.view.render(), self.progress)

    def _update(self) -> None:
        if self._live is not None:
            self._live.update(self._renderable())

    def report(self, message: str, increment: float) -> None:
        self.progress.update(self._task, description=escape(message), advance=increment)
        self._update()


def print_failures(collection: ExtensionCollection, console: Console) -> None:
    """Print the error message of every failed item."""
    for item in collection:
        if item.status == ExtensionStatus.FAILED:
            console.print(f"[red]✗[/red] [bold]{escape(item.label)}[/bold] ({escape(item.id)})")
            for line in (item.error_message or "Unknown error").splitlines():
                console.print(f"    {line}", markup=False, highlight=False)
