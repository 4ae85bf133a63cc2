"""apply-fix command — apply a comment's diff to the working tree and commit it."""

from __future__ import annotations

import click
from rich.console import Console

from rabbitlens_cli.commands._common import require_comment, require_store
from rabbitlens_core.exceptions import ApplyFixError

console = Console()


@click.command("apply-fix")
@click.argument("comment_id", type=int)
@click.option(
    "--patch",
    "patch_file",
    type=click.File("r"),
    default=None,
    help="Unified diff to apply instead of the diff stored with the comment.",
)
@click.option("--message", "-m", default=None, help="Commit message.")
@click.option(
    "--cwd",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Repository checkout to apply the patch in.",
)
@click.pass_context
def apply_fix_cmd(ctx, comment_id: int, patch_file, message: str | None, cwd: str):
    """Apply the suggested change of a stored comment with `git apply` and commit it."""
    from rabbitlens_core.utils.git import apply_patch, is_unified_diff
    from rabbitlens_core.workflow import default_commit_message

    store = require_store(ctx)
    record = require_comment(store, comment_id)

    if record.fix_applied:
        console.print(f"[yellow]Fix for comment {comment_id} was already applied.[/yellow]")
        return

    if patch_file is not None:
        patch = patch_file.read()
    elif not record.diff:
        raise click.UsageError(f"Comment {comment_id} has no diff. Pass one with --patch FILE.")
    elif not is_unified_diff(record.diff):
        raise click.UsageError(
            f"The diff stored with comment {comment_id} has no file headers or hunks, so git cannot apply it. "
            "Write a unified diff and pass it with --patch FILE."
        )
    else:
        patch = record.diff

    try:
        sha = apply_patch(patch, message or default_commit_message(comment_id), cwd=cwd)
    except ApplyFixError as e:
        raise click.ClickException(str(e)) from e

    store.mark_fixed(comment_id)
    console.print(f"[green]✓[/green] Applied fix for comment {comment_id} as {sha[:7]}.")
