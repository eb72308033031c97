"""CLI for gust."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from .context import RepoContext
from .core import ResolutionSource
from .errors import GustError
from .logging import Verbosity, console, print_error, print_success, setup_logging
from .ops import build as ops_build
from .ops import load_build_config, resolve_entries
from .utils import format_timestamp


app = typer.Typer(help="""\
Build a static listing from a directory of Markdown entries, dating each
entry by the last commit that changed it.""")


def _verbosity(verbose: bool, quiet: bool) -> Verbosity:
    if verbose:
        return "verbose"
    if quiet:
        return "quiet"
    return "normal"


_SOURCE_LABELS = {
    ResolutionSource.CHANGED: "[green]history[/green]",
    ResolutionSource.ROOT: "[cyan]since root[/cyan]",
    ResolutionSource.UNTRACKED: "[yellow]untracked[/yellow]",
}


@app.command()
def build(
    entries: Path = typer.Argument(..., help="Directory containing all entries"),
    output: Optional[Path] = typer.Argument(None, help="Output directory [default: ./gust_generated]"),
    gitref: Optional[str] = typer.Option(None, "--gitref", "-g", help="Git ref for resolving timestamps [default: HEAD]"),
    fallback: Optional[str] = typer.Option(None, "--fallback", help="Timestamp for entries not in the ref's tree: 'now' or 'reference'"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
):
    """Copy entries to the output directory and write listing.json.

    Examples:
        gust build posts                    # Output to ./gust_generated
        gust build posts site/data          # Explicit output directory
        gust build posts -g v1.0            # Date entries as of tag v1.0
    """
    setup_logging(_verbosity(verbose, quiet))

    try:
        result = ops_build(entries, output=output, gitref=gitref, fallback=fallback)
    except GustError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not quiet:
        print_success(
            f"Wrote {len(result.listing.entries)} entries to {result.output} "
            f"({result.resolution.snapshots_visited} commits walked)"
        )


@app.command()
def show(
    entries: Path = typer.Argument(..., help="Directory containing all entries"),
    gitref: Optional[str] = typer.Option(None, "--gitref", "-g", help="Git ref for resolving timestamps [default: HEAD]"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """Show the resolved last-modified time of each entry without writing anything."""
    setup_logging("verbose" if verbose else "quiet")

    try:
        with RepoContext(entries) as ctx:
            config = load_build_config(ctx, gitref=gitref)
            resolution = resolve_entries(ctx, config)
    except GustError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not resolution.entries:
        console.print("[dim]No publishable entries found[/dim]")
        return

    table = Table(title=f"Entries as of {resolution.reference} ({resolution.reference_id[:12]})")
    table.add_column("Slug", style="bold")
    table.add_column("Last modified")
    table.add_column("Source")
    for entry in sorted(resolution.entries, key=lambda e: e.slug):
        table.add_row(entry.slug, format_timestamp(entry.last_modified), _SOURCE_LABELS[entry.source])
    console.print(table)
    console.print(f"[dim]{resolution.snapshots_visited} commits walked, {resolution.comparisons} comparisons[/dim]")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
