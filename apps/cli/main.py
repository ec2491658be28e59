"""CLI application for check-updates."""

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from core.config import DEFAULT_MANIFEST
from core.models import BumpLevel, UpdaterOptions
from core.orchestrate import process_packages
from core.report import Reporter

console = Console()


def configure_logging(debug: bool) -> None:
    """Send log records through rich, at DEBUG level when requested."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


app = typer.Typer(
    name="check-updates",
    help="check-updates - Update package.json dependency ranges to the newest versions",
    add_completion=False,
)


@app.command()
def update(
    files: list[str] | None = typer.Argument(
        None, help="package.json files or glob patterns (default: package.json)"
    ),
    strict: bool = typer.Option(
        False, "--strict", "-s",
        help="Strictly adhere to semver rules for tilde (~x.y.z) and caret (^x.y.z) ranges",
    ),
    quick: bool = typer.Option(
        False, "--quick", "-q",
        help="Consider dev/peer/optional updates only when main dependencies changed",
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Output debugging information"),
    no_errors: bool = typer.Option(
        False, "--no-errors", "-n", help="Exit with 0 (zero) in case of no updates"
    ),
    bump: BumpLevel | None = typer.Option(
        None, "--bump", "-b", help="Bump the version of the package file on changes"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-x", help="Only process changes without writing to disk"
    ),
    align: bool = typer.Option(
        False, "--align", "-a", help="Align all workspace versions to the highest one"
    ),
    align_version: str | None = typer.Option(
        None, "--align-version", help="Align all workspace versions to this version"
    ),
    workspaces: bool = typer.Option(
        True, "--workspaces/--no-workspaces", help="Process workspaces declared in package files"
    ),
) -> None:
    """Update dependencies in package.json files to the newest matching versions."""

    configure_logging(debug)

    options = UpdaterOptions(
        bump=bump,
        strict=strict,
        quick=quick,
        workspaces=workspaces,
        align=align or bool(align_version),
        align_version=align_version,
        dry_run=dry_run,
        debug=debug,
    )

    try:
        changed = asyncio.run(
            process_packages(files or [DEFAULT_MANIFEST], options, reporter=Reporter(console))
        )
    except Exception as e:
        console.print(f"Error: {escape(str(e))}", style="red")
        raise typer.Exit(1)

    if not changed:
        raise typer.Exit(0 if no_errors else 2)  # No changes exit code


if __name__ == "__main__":
    app()
