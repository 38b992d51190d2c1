"""Command line interface for branchsync."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from branchsync import sync
from branchsync.git import GitRepo
from branchsync.models import SyncContext
from branchsync.report import (
    ColorMode,
    ReportConfig,
    create_status_table,
    make_console,
    print_header,
    print_outcomes,
)
from branchsync.vcs import GitError

app = typer.Typer(help="Reconcile local branches with their remote counterparts")

PathOption = Annotated[Path, typer.Option(help="Path to git repository")]
RemoteOption = Annotated[
    Optional[str],
    typer.Option("--remote", "-r", help="Remote to reconcile against (default: upstream, github, origin, first)"),
]
ColorOption = Annotated[ColorMode, typer.Option("--color", help="Colorize output")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")]


def setup_logging(err_console: Console, verbose: bool) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def prepare_repo(path: Path, remote: Optional[str], err_console: Console) -> tuple[GitRepo, SyncContext]:
    """Open the repository, select the remote and fetch from it, exiting on failure."""
    try:
        repo = GitRepo(path)
        context = sync.prepare(repo, remote_name=remote)
    except GitError as err:
        err_console.print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err
    return repo, context


@app.command(name="sync")
def sync_branches(
    path: PathOption = Path("."),
    remote: RemoteOption = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", "-n", help="Show what would change without changing it")] = False,
    color: ColorOption = ColorMode.AUTO,
    verbose: VerboseOption = False,
) -> None:
    """Fast-forward branches that are behind and delete branches whose upstream is gone."""
    config = ReportConfig(color=color, dry_run=dry_run)
    console = make_console(config)
    err_console = make_console(config, stderr=True)
    setup_logging(err_console, verbose)

    repo, context = prepare_repo(path, remote, err_console)
    print_header(console, context, repo.current_branch())
    print_outcomes(console, sync.reconcile(repo, context, dry_run=dry_run), context, config)


@app.command()
def status(
    path: PathOption = Path("."),
    remote: RemoteOption = None,
    color: ColorOption = ColorMode.AUTO,
    verbose: VerboseOption = False,
) -> None:
    """Show what sync would do to each tracked branch."""
    config = ReportConfig(color=color, dry_run=True)
    console = make_console(config)
    err_console = make_console(config, stderr=True)
    setup_logging(err_console, verbose)

    repo, context = prepare_repo(path, remote, err_console)
    print_header(console, context, repo.current_branch())
    outcomes = list(sync.reconcile(repo, context, dry_run=True))
    if not outcomes:
        console.print("[dim]No tracked branches[/dim]")
        return
    console.print(create_status_table(outcomes, context))


if __name__ == "__main__":
    app()
