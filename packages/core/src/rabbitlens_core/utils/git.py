from __future__ import annotations

import logging
import re
import subprocess

from rabbitlens_core.exceptions import ApplyFixError

logger = logging.getLogger(__name__)

_GIT_TIMEOUT = 15

_HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@", re.MULTILINE)


def detect_repo_from_git(cwd: str = ".") -> str | None:
    """Try to detect the GitHub repo slug from the git remote URL."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=cwd,
        )
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        # Handle both HTTPS and SSH remotes:
        # https://github.com/owner/repo.git  ->  owner/repo
        # git@github.com:owner/repo.git      ->  owner/repo
        if "github.com" not in url:
            return None
        slug = url.split("github.com")[-1].lstrip("/:").removesuffix(".git")
        return slug if "/" in slug else None
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None


def detect_current_branch(cwd: str = ".") -> str | None:
    try:
        result = subprocess.run(
            ["git", "branch", "--show-current"],
            capture_output=True,
            text=True,
            timeout=5,
            cwd=cwd,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    branch = result.stdout.strip()
    # Empty output means a detached HEAD.
    return branch if result.returncode == 0 and branch else None


def _git(args: list[str], cwd: str, stdin: str | None = None) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            input=stdin,
            capture_output=True,
            text=True,
            timeout=_GIT_TIMEOUT,
            cwd=cwd,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise ApplyFixError(f"git {args[0]} could not run: {e}") from e
    if result.returncode != 0:
        raise ApplyFixError(f"git {args[0]} failed: {result.stderr.strip()}")
    return result.stdout


def apply_patch(patch: str, commit_message: str, cwd: str = ".") -> str:
    """Apply a unified diff to the index and working tree, commit it, and return the new HEAD sha."""
    if not patch.strip():
        raise ApplyFixError("Patch is empty.")
    if not patch.endswith("\n"):
        patch += "\n"  # git apply rejects a final hunk line without a newline

    _git(["apply", "--index", "-"], cwd, stdin=patch)
    _git(["commit", "-m", commit_message], cwd)
    sha = _git(["rev-parse", "HEAD"], cwd).strip()
    logger.info("Committed fix %s", sha[:7])
    return sha


def is_unified_diff(text: str | None) -> bool:
    """True when text carries file headers and at least one hunk, i.e. something `git apply` accepts.

    CodeRabbit's ```diff blocks are bare -/+ lines without headers and fail this check.
    """
    if not text:
        return False
    lines = text.splitlines()
    has_headers = any(line.startswith("--- ") for line in lines) and any(line.startswith("+++ ") for line in lines)
    return has_headers and _HUNK_HEADER_RE.search(text) is not None
