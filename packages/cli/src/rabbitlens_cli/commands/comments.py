"""comments, show and agree commands — browse and triage stored comments."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from rabbitlens_cli.commands._common import require_comment, require_store
from rabbitlens_store.models import AGREEMENTS

console = Console()

_agreement_style = {"yes": "green", "no": "red", "partially": "yellow"}


@click.command("comments")
@click.option("--repo", required=True, help="GitHub repository (owner/name).")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--actionable", is_flag=True, help="Only comments with a prompt or a suggestion.")
@click.option("--pending", is_flag=True, help="Only comments without a reply yet.")
@click.pass_context
def comments_cmd(ctx, repo: str, pr_number: int, actionable: bool, pending: bool):
    """List the stored CodeRabbit comments for a pull request."""
    store = require_store(ctx)
    actionable = actionable or ctx.obj["config"].get("actionable_only", False)

    pr = store.get_pr(repo, pr_number)
    if pr is None:
        console.print(f"[yellow]{repo}#{pr_number} has not been synced yet.[/yellow]")
        return

    records = store.list_comments(pr.id, replied=False if pending else None)
    if actionable:
        records = [r for r in records if r.is_actionable]
    if not records:
        console.print("[yellow]No comments found.[/yellow]")
        return

    table = Table(title=f"CodeRabbit comments — {repo}#{pr_number}", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold")
    table.add_column("Location", max_width=40)
    table.add_column("Type", max_width=24)
    table.add_column("Summary", max_width=60)
    table.add_column("Agree", width=9)
    table.add_column("State", width=14)

    for r in records:
        location = f"{r.file}:{r.line}" if r.line is not None else (r.file or "")
        style = _agreement_style.get(r.agreement or "", "white")
        state = []
        if r.replied:
            state.append("replied")
        if r.fix_applied:
            state.append("fixed")
        if r.is_resolved:
            state.append("resolved")
        table.add_row(
            str(r.id),
            escape(location),
            escape(r.issue_type or ""),
            escape(r.summary or r.heading or ""),
            f"[{style}]{r.agreement}[/{style}]" if r.agreement else "",
            ", ".join(state),
        )

    console.print(table)


@click.command("show")
@click.argument("comment_id", type=int)
@click.pass_context
def show_cmd(ctx, comment_id: int):
    """Print a stored comment with every extracted field."""
    store = require_store(ctx)
    r = require_comment(store, comment_id)

    console.print(f"[bold]Comment {r.id}[/bold] by {escape(r.author or '')}  {escape(r.url)}")
    if r.file:
        console.print(f"[dim]{escape(r.file)}:{r.line}[/dim]")
    for label, value in (
        ("Type", r.issue_type),
        ("Heading", r.heading),
        ("Summary", r.summary),
        ("Tools", ", ".join(r.tool_list)),
        ("Fingerprint", r.internal_id),
        ("Agreement", r.agreement),
    ):
        if value:
            console.print(f"[cyan]{label}:[/cyan] {escape(value)}")

    if r.diff:
        console.print(Panel(Syntax(r.diff, "diff"), title="Diff"))
    if r.suggested_code:
        console.print(Panel(Text(r.suggested_code), title="Suggestion"))
    if r.committable_suggestion:
        console.print(Panel(Text(r.committable_suggestion), title="Committable suggestion"))
    if r.ai_prompt:
        console.print(Panel(Text(r.ai_prompt), title="Prompt for AI agents"))
    if r.reply:
        console.print(Panel(Text(r.reply), title="Our reply"))


@click.command("agree")
@click.argument("comment_id", type=int)
@click.argument("agreement", type=click.Choice(AGREEMENTS))
@click.pass_context
def agree_cmd(ctx, comment_id: int, agreement: str):
    """Record whether you agree with a comment (yes, no or partially)."""
    store = require_store(ctx)
    require_comment(store, comment_id)
    store.set_agreement(comment_id, agreement)
    console.print(f"[green]✓[/green] Comment {comment_id}: agreement set to {agreement}.")
