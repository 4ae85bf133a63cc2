"""report command — workflow progress for a synced pull request."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from rabbitlens_cli.commands._common import require_store

console = Console()


@click.command("report")
@click.option("--repo", required=True, help="GitHub repository (owner/name).")
@click.option("--pr", "pr_number", type=int, default=None, help="Only this PR (default: all synced PRs).")
@click.pass_context
def report_cmd(ctx, repo: str, pr_number: int | None):
    """Show how many CodeRabbit comments have been replied to, fixed and resolved."""
    store = require_store(ctx)

    if pr_number is not None:
        pr = store.get_pr(repo, pr_number)
        prs = [pr] if pr is not None else []
    else:
        prs = store.list_prs(repo)
    if not prs:
        console.print("[yellow]No synced pull requests found.[/yellow]")
        return

    table = Table(title=f"Comment workflow — {repo}", show_header=True, header_style="bold cyan")
    table.add_column("PR", style="bold", width=6)
    table.add_column("Comments", justify="right")
    table.add_column("Actionable", justify="right")
    table.add_column("Replied", justify="right")
    table.add_column("Fixed", justify="right")
    table.add_column("Resolved", justify="right")
    table.add_column("Last Synced", width=20)

    pending: dict[int, list[int]] = {}
    for pr in prs:
        stats = store.pr_stats(pr.id)
        table.add_row(
            f"#{pr.number}",
            str(stats.total),
            str(stats.actionable),
            f"{stats.replied}/{stats.total}",
            str(stats.fixed),
            str(stats.resolved),
            (pr.last_synced or "")[:19].replace("T", " "),
        )
        if stats.pending_ids:
            pending[pr.number] = stats.pending_ids

    console.print(table)
    for number, ids in pending.items():
        console.print(f"[dim]#{number} awaiting reply:[/dim] {', '.join(str(i) for i in ids)}")
