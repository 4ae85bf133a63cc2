from __future__ import annotations

import logging

from github import Github, GithubException

from rabbitlens_core.exceptions import GitHubError, NotFoundError

logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str | None = None):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    try:
        return repo.get_pull(pr_number)
    except GithubException as e:
        if e.status == 404:
            raise NotFoundError(f"PR #{pr_number} in {repo.full_name}") from e
        raise GitHubError(f"Failed to get PR #{pr_number}: {e}") from e


def find_pull_for_branch(repo, branch: str):
    """Return the first open PR whose head is `branch` in this repository."""
    owner = repo.full_name.split("/")[0]
    try:
        pulls = list(repo.get_pulls(state="open", head=f"{owner}:{branch}"))
    except GithubException as e:
        raise GitHubError(f"Failed to list PRs for branch {branch!r}: {e}") from e
    if not pulls:
        raise NotFoundError(f"open PR for {repo.full_name}:{branch}")
    return pulls[0]


def reply_to_comment(pr, comment_id: int, body: str) -> int:
    """Post a threaded reply under a review comment and return the reply's id."""
    try:
        reply = pr.create_review_comment_reply(comment_id, body)
    except GithubException as e:
        raise GitHubError(f"Failed to reply to comment {comment_id}: {e}") from e
    logger.info("Replied to comment %d (reply id %d)", comment_id, reply.id)
    return reply.id
