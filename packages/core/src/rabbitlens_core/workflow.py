"""PR comment workflow orchestration.

Resolves which repository and pull request to look at (falling back to the
local git checkout), fetches the review threads, parses every comment, and
returns a WorkflowResult the CLI can print or persist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from rabbitlens_core.gh.pull_request import find_pull_for_branch, get_repo
from rabbitlens_core.gh.review_threads import fetch_review_comments
from rabbitlens_core.models import Comment
from rabbitlens_core.parsing.filters import filter_actionable, filter_bot_comments
from rabbitlens_core.parsing.parser import ParseFailure, parse_batch
from rabbitlens_core.utils.git import detect_current_branch, detect_repo_from_git

logger = logging.getLogger(__name__)


@dataclass
class WorkflowResult:
    """Result returned by process_pull_request.

    Decoupled from rabbitlens_store so rabbitlens_core has no dependency on
    the store layer. The CLI converts parsed comments to CommentRecords
    before persisting.
    """

    repo: str
    pr_number: int
    total_comments: int = 0
    bot_comments: int = 0
    actionable_comments: int = 0
    comments: list[Comment] = field(default_factory=list)
    failures: list[ParseFailure] = field(default_factory=list)
    processed_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def default_commit_message(comment_id: int) -> str:
    return f"Fix: Applied suggested change from comment {comment_id}"


def resolve_pr_number(config: dict, repo: str, branch: str | None = None, repo_obj=None) -> int:
    """Find the open PR for a branch (the current checkout's branch by default)."""
    branch = branch or detect_current_branch()
    if not branch:
        raise ValueError("Could not detect the current branch. Pass --pr or --branch explicitly.")
    this_repo = repo_obj if repo_obj is not None else get_repo(repo, token=config.get("github_token"))
    pr = find_pull_for_branch(this_repo, branch)
    logger.info("Branch %s maps to PR #%d", branch, pr.number)
    return pr.number


def process_pull_request(
    config: dict,
    repo: str | None = None,
    pr_number: int | None = None,
    branch: str | None = None,
    actionable_only: bool = False,
    repo_obj=None,
) -> WorkflowResult:
    """Fetch, parse and classify every review comment on one pull request.

    `comments` holds every comment (raw and parsed) unless actionable_only
    is set, in which case only actionable CodeRabbit comments are kept. The
    counts always describe the full set.
    """
    repo = repo or detect_repo_from_git()
    if not repo:
        raise ValueError(
            "Could not detect the repository. Run inside a git checkout with a GitHub "
            "remote or pass --repo owner/name."
        )

    if pr_number is None:
        pr_number = resolve_pr_number(config, repo, branch, repo_obj)

    raws = fetch_review_comments(
        repo,
        pr_number,
        max_threads=config.get("max_threads", 100),
        max_comments=config.get("max_comments_per_thread", 100),
    )
    batch = parse_batch(raws)
    actionable = filter_actionable(batch.comments)

    result = WorkflowResult(
        repo=repo,
        pr_number=pr_number,
        total_comments=len(raws),
        bot_comments=len(filter_bot_comments(batch.comments)),
        actionable_comments=len(actionable),
        comments=list(actionable) if actionable_only else batch.comments,
        failures=batch.failures,
    )
    logger.info(
        "%s#%d: %d comment(s), %d from CodeRabbit, %d actionable",
        repo,
        pr_number,
        result.total_comments,
        result.bot_comments,
        result.actionable_comments,
    )
    return result
