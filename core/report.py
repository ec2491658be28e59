"""Console reporting of update progress."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import DependencyChange


class Reporter:
    """Prints what happens to each manifest on a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def processing(self, details: str) -> None:
        self.console.print(f"Processing {details}", end=" ")

    def no_changes(self) -> None:
        self.console.print("[red]no changes[/red]")

    def changes(self, changes: list[DependencyChange]) -> None:
        """Print the change count followed by a table of changes."""
        self.console.print(f"[red]{len(changes)} changes[/red]")

        table = Table(box=None, show_header=False, pad_edge=False)
        table.add_column("name", style="yellow")
        table.add_column("declared", style="green", justify="right")
        table.add_column("updated", style="green")
        table.add_column("kind", style="blue")
        for change in changes:
            table.add_row(
                f" * {escape(change.name)}",
                escape(change.declared),
                f"-> {escape(change.updated)}",
                change.kind,
            )
        self.console.print(table)

    def version_updated(self, details: str, version: str) -> None:
        self.console.print(f"Updating {details} version to [yellow]{version}[/yellow]")

    def aligned(self, version: str) -> None:
        self.console.print(f"Workspaces versions aligned to [yellow]{version}[/yellow]")

    def dry_run(self, package_file: str) -> None:
        self.console.print(f"Dry run, not writing [green]{escape(package_file)}[/green]")
