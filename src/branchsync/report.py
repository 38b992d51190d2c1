"""Terminal reporting."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from branchsync.models import Action, Outcome, SyncContext


class ColorMode(str, Enum):
    """When to colorize output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


@dataclass(frozen=True)
class ReportConfig:
    """Reporting settings."""

    color: ColorMode = ColorMode.AUTO
    dry_run: bool = False


def make_console(config: ReportConfig, stderr: bool = False) -> Console:
    """Create a console honoring the configured color mode."""
    if config.color is ColorMode.ALWAYS:
        return Console(stderr=stderr, force_terminal=True, soft_wrap=True, highlight=False)
    if config.color is ColorMode.NEVER:
        return Console(stderr=stderr, color_system=None, soft_wrap=True, highlight=False)
    return Console(stderr=stderr, soft_wrap=True, highlight=False)


FAILURE_VERBS = {
    Action.FAST_FORWARD: "update",
    Action.DELETE: "delete",
}


def format_outcome(outcome: Outcome, context: SyncContext, config: ReportConfig) -> Optional[str]:
    """Render one outcome as a line of console markup, or None if there is nothing to say."""
    disposition = outcome.disposition
    name = escape(disposition.branch.name)
    delta = disposition.delta
    remote = escape(context.remote.name)
    default = escape(context.default_branch)

    if outcome.failed:
        verb = FAILURE_VERBS.get(disposition.action, "check")
        return f"[red]error:[/red] failed to {verb} branch [bold]{name}[/bold]: {escape(outcome.error)}"

    if disposition.action is Action.FAST_FORWARD:
        if config.dry_run:
            return f"Would update branch [bold]{name}[/bold] ({outcome.old_commit}..{outcome.new_commit})"
        return (
            f"[green]Updated branch[/green] [bold]{name}[/bold] "
            f"(was {outcome.old_commit}, now {outcome.new_commit}, {delta.behind} new)"
        )
    if disposition.action is Action.DELETE:
        if config.dry_run:
            return f"Would delete branch [bold]{name}[/bold] (was {outcome.old_commit})"
        return f"[red]Deleted branch[/red] [bold]{name}[/bold] (was {outcome.old_commit})"
    if disposition.action is Action.WARN:
        behind = f", {delta.behind} behind" if delta.behind else ""
        return (
            f"[yellow]warning:[/yellow] [bold]{name}[/bold] is ahead of "
            f"{escape(short_ref(disposition.compared_to))} and seems to contain unpushed commits "
            f"({delta.ahead} ahead{behind})"
        )
    if disposition.action is Action.WARN_UNMERGED:
        return (
            f"[yellow]warning:[/yellow] [bold]{name}[/bold] was deleted on {remote}, "
            f"but appears not merged into {remote}/{default} ({delta.ahead} unmerged)"
        )
    return None


def short_ref(ref: str) -> str:
    """Shorten a full ref name for display."""
    for prefix in ("refs/heads/", "refs/remotes/"):
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return ref


def print_header(console: Console, context: SyncContext, current_branch: Optional[str] = None) -> None:
    """Print the selected remote and default branch, warning when another branch is checked out."""
    console.print(f"Remote: [bold]{escape(context.remote.name)}[/bold] [dim]{escape(context.remote.url)}[/dim]")
    console.print(f"Default branch: [bold]{escape(context.default_branch)}[/bold]")
    if current_branch is not None and current_branch != context.default_branch:
        console.print(
            f"[yellow]warning:[/yellow] you are on branch [bold]{escape(current_branch)}[/bold], "
            f"not the default branch [bold]{escape(context.default_branch)}[/bold]"
        )


def print_outcomes(console: Console, outcomes: Iterable[Outcome], context: SyncContext, config: ReportConfig) -> int:
    """Print a line per outcome as it arrives. Returns the number of lines printed."""
    printed = 0
    for outcome in outcomes:
        line = format_outcome(outcome, context, config)
        if line is not None:
            console.print(line)
            printed += 1
    if not printed:
        console.print(
            Panel(
                "[green]Your branches are in sync ✨[/green]",
                style="green",
                padding=(0, 2),
                expand=False,
            )
        )
    return printed


ACTION_STYLES = {
    Action.NOOP: "dim",
    Action.FAST_FORWARD: "green",
    Action.WARN: "yellow",
    Action.DELETE: "red",
    Action.WARN_UNMERGED: "bright_yellow",
}


def create_status_table(outcomes: Iterable[Outcome], context: SyncContext) -> Table:
    """Create a table of planned actions."""
    table = Table(
        title=f"Branches vs {escape(context.remote.name)}",
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Compared to", style="magenta", no_wrap=True)
    table.add_column("Ahead", justify="right")
    table.add_column("Behind", justify="right")
    table.add_column("Action", justify="center", no_wrap=True)

    for outcome in outcomes:
        disposition = outcome.disposition
        style = ACTION_STYLES[disposition.action]
        table.add_row(
            escape(disposition.branch.name),
            escape(short_ref(disposition.compared_to)),
            str(disposition.delta.ahead),
            str(disposition.delta.behind),
            f"[{style}]{disposition.action.value}[/{style}]",
        )
    return table
