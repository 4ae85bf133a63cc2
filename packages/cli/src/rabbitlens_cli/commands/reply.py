"""reply command — answer a CodeRabbit comment in its GitHub thread."""

from __future__ import annotations

import click
from rich.console import Console

from rabbitlens_cli.commands._common import require_comment, require_store
from rabbitlens_core.exceptions import RabbitlensError

console = Console()


@click.command("reply")
@click.argument("comment_id", type=int)
@click.argument("message")
@click.pass_context
def reply_cmd(ctx, comment_id: int, message: str):
    """Post MESSAGE as a threaded reply to a stored comment."""
    from rabbitlens_core.gh.pull_request import get_pull, get_repo, reply_to_comment

    store = require_store(ctx)
    record = require_comment(store, comment_id)

    pr = store.get_pr_by_id(record.pr_id)
    if pr is None:
        raise click.ClickException(f"Comment {comment_id} references an unknown PR. Re-run `rabbitlens sync`.")

    token = ctx.obj["config"].get("github_token")
    if not token:
        raise click.UsageError("GitHub token not found. Set GITHUB_TOKEN or run `gh auth login`.")

    try:
        pull = get_pull(get_repo(pr.repo, token), pr.number)
        reply_id = reply_to_comment(pull, comment_id, message)
    except RabbitlensError as e:
        raise click.ClickException(str(e)) from e

    store.mark_replied(comment_id, message)
    console.print(f"[green]✓[/green] Replied to comment {comment_id} (reply {reply_id}).")
