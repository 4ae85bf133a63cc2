"""resolve command — mark a comment's review thread as resolved on GitHub."""

from __future__ import annotations

import click
from rich.console import Console

from rabbitlens_cli.commands._common import require_comment, require_store
from rabbitlens_core.exceptions import RabbitlensError

console = Console()


@click.command("resolve")
@click.argument("comment_id", type=int)
@click.pass_context
def resolve_cmd(ctx, comment_id: int):
    """Resolve the review thread that holds a stored comment."""
    from rabbitlens_core.gh.review_threads import resolve_review_thread

    store = require_store(ctx)
    record = require_comment(store, comment_id)

    if record.is_resolved:
        console.print(f"[yellow]Thread for comment {comment_id} is already resolved.[/yellow]")
        return
    if not record.thread_id:
        raise click.ClickException(f"Comment {comment_id} has no review thread id. Re-run `rabbitlens sync`.")

    try:
        resolved = resolve_review_thread(record.thread_id)
    except RabbitlensError as e:
        raise click.ClickException(str(e)) from e
    if not resolved:
        raise click.ClickException(f"GitHub did not resolve thread {record.thread_id}.")

    store.mark_resolved(comment_id)
    console.print(f"[green]✓[/green] Resolved thread for comment {comment_id}.")
