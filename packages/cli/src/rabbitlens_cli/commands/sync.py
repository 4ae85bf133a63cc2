"""sync command — pull CodeRabbit comments for a PR into the local store."""

from __future__ import annotations

import logging
from collections import Counter

import click
from rich.console import Console
from rich.markup import escape

from rabbitlens_cli.commands._common import require_store
from rabbitlens_core.exceptions import RabbitlensError
from rabbitlens_core.models import ParsedComment
from rabbitlens_store.models import CommentRecord

logger = logging.getLogger(__name__)
console = Console()


def _to_record(parsed: ParsedComment, pr_id: int) -> CommentRecord:
    return CommentRecord(
        id=parsed.id,
        pr_id=pr_id,
        file=parsed.path,
        line=parsed.position,
        author=parsed.bot,
        body=parsed.body,
        url=parsed.url,
        created_at=parsed.created_at,
        issue_type=parsed.issue_type,
        heading=parsed.heading,
        summary=parsed.summary,
        diff=parsed.diff,
        suggested_code=parsed.suggested_code,
        committable_suggestion=parsed.committable_suggestion,
        ai_prompt=parsed.ai_prompt,
        tools=",".join(parsed.tools),
        internal_id=parsed.internal_id,
        thread_id=parsed.thread_id,
        is_resolved=parsed.is_resolved,
        is_outdated=parsed.is_outdated,
        is_minimized=parsed.is_minimized,
    )


@click.command("sync")
@click.option("--repo", default=None, help="GitHub repository (owner/name). Auto-detected from git remote.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number.")
@click.option("--branch", default=None, help="Find the open PR for this branch (default: current branch).")
@click.pass_context
def sync_cmd(ctx, repo: str | None, pr_number: int | None, branch: str | None):
    """Fetch review threads from GitHub and store every CodeRabbit comment.

    Re-running sync is safe: unchanged comments are left alone and local
    workflow state (agreement, replies, applied fixes) is preserved.
    """
    from rabbitlens_core.workflow import process_pull_request

    store = require_store(ctx)
    config = ctx.obj["config"]

    try:
        result = process_pull_request(config, repo=repo, pr_number=pr_number, branch=branch)
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    except RabbitlensError as e:
        raise click.ClickException(str(e)) from e

    pr = store.get_or_create_pr(result.repo, result.pr_number)
    outcomes = Counter(
        store.upsert_comment(_to_record(c, pr.id)) for c in result.comments if isinstance(c, ParsedComment)
    )
    store.update_pr_last_synced(pr.id, result.processed_at)
    logger.info("Synced %s#%d into the store: %s", result.repo, result.pr_number, dict(outcomes))

    console.print(
        f"[bold]{result.repo}#{result.pr_number}[/bold]: "
        f"{result.total_comments} comment(s), {result.bot_comments} from CodeRabbit, "
        f"{result.actionable_comments} actionable"
    )
    console.print(
        f"[green]{outcomes['new']} new[/green], "
        f"[yellow]{outcomes['updated']} updated[/yellow], "
        f"{outcomes['unchanged']} unchanged"
    )
    for failure in result.failures:
        console.print(f"[red]Could not parse comment {failure.comment_id}:[/red] {escape(failure.error)}")
