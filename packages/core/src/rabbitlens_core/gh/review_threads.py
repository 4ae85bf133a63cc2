"""Review-thread access through the GitHub GraphQL API.

Thread-level state (resolved, outdated) and the thread node id needed to
resolve a thread are only exposed by GraphQL, so these calls go through
`gh api graphql`. gh reuses whatever credentials `gh auth login` or
GITHUB_TOKEN provide, same as token resolution in the CLI.
"""

from __future__ import annotations

import json
import logging
import subprocess

from rabbitlens_core.exceptions import GitHubError
from rabbitlens_core.models import RawComment

logger = logging.getLogger(__name__)

_GH_TIMEOUT = 30

_REVIEW_THREADS_QUERY = """
query($owner: String!, $repo: String!, $pr: Int!, $threads: Int!, $comments: Int!) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $pr) {
      reviewThreads(first: $threads) {
        nodes {
          id
          isResolved
          isOutdated
          comments(first: $comments) {
            nodes {
              databaseId
              author { login }
              body
              createdAt
              url
              path
              position
              isMinimized
            }
          }
        }
      }
    }
  }
}
"""

_RESOLVE_THREAD_MUTATION = """
mutation($threadId: ID!) {
  resolveReviewThread(input: {threadId: $threadId}) {
    thread { id isResolved }
  }
}
"""


def run_graphql(query: str, variables: dict) -> dict:
    """Run a GraphQL document through `gh api graphql` and return its `data`.

    Integer variables are passed with -F (typed), everything else with -f.
    """
    cmd = ["gh", "api", "graphql", "-f", f"query={query}"]
    for key, value in variables.items():
        flag = "-F" if isinstance(value, int) and not isinstance(value, bool) else "-f"
        cmd += [flag, f"{key}={value}"]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=_GH_TIMEOUT)
    except FileNotFoundError as e:
        raise GitHubError("The GitHub CLI (gh) is not installed or not on PATH.") from e
    except subprocess.TimeoutExpired as e:
        raise GitHubError(f"gh api graphql timed out after {_GH_TIMEOUT}s") from e

    try:
        payload = json.loads(result.stdout) if result.stdout.strip() else {}
    except json.JSONDecodeError as e:
        raise GitHubError(f"gh api graphql returned invalid JSON: {e}") from e

    errors = payload.get("errors")
    if errors:
        raise GitHubError(f"GraphQL error: {errors[0].get('message', errors)}")
    if result.returncode != 0:
        raise GitHubError(f"gh api graphql failed: {result.stderr.strip() or result.returncode}")

    data = payload.get("data")
    if not data:
        raise GitHubError("GraphQL response data is empty")
    return data


def _comment_from_node(node: dict, thread: dict) -> RawComment:
    author = node.get("author") or {}
    return RawComment(
        id=node["databaseId"],
        author=author.get("login"),
        body=node.get("body") or "",
        created_at=node.get("createdAt") or "",
        url=node.get("url") or "",
        path=node.get("path"),
        position=node.get("position"),
        is_resolved=bool(thread.get("isResolved")),
        is_outdated=bool(thread.get("isOutdated")),
        is_minimized=bool(node.get("isMinimized")),
        thread_id=thread.get("id"),
    )


def fetch_review_comments(
    repo: str,
    pr_number: int,
    max_threads: int = 100,
    max_comments: int = 100,
) -> list[RawComment]:
    """Return every comment in every review thread of a PR, thread by thread."""
    owner, _, name = repo.partition("/")
    if not owner or not name:
        raise ValueError(f"Invalid repository format: {repo!r}. Expected owner/name.")

    data = run_graphql(
        _REVIEW_THREADS_QUERY,
        {"owner": owner, "repo": name, "pr": pr_number, "threads": max_threads, "comments": max_comments},
    )
    pull = (data.get("repository") or {}).get("pullRequest")
    if pull is None:
        raise GitHubError(f"PR #{pr_number} not found in {repo}")

    comments: list[RawComment] = []
    for thread in pull["reviewThreads"]["nodes"]:
        for node in thread["comments"]["nodes"]:
            comments.append(_comment_from_node(node, thread))

    logger.info("Fetched %d review comment(s) from %s#%d", len(comments), repo, pr_number)
    return comments


def resolve_review_thread(thread_id: str) -> bool:
    data = run_graphql(_RESOLVE_THREAD_MUTATION, {"threadId": thread_id})
    thread = (data.get("resolveReviewThread") or {}).get("thread") or {}
    resolved = bool(thread.get("isResolved"))
    if resolved:
        logger.info("Resolved review thread %s", thread_id)
    else:
        logger.warning("Review thread %s is still unresolved", thread_id)
    return resolved
