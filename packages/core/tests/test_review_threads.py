"""Tests for review-thread access through gh api graphql."""

import json
import subprocess
from unittest.mock import MagicMock

import pytest

from rabbitlens_core.exceptions import GitHubError
from rabbitlens_core.gh.review_threads import fetch_review_comments, resolve_review_thread, run_graphql


def _completed(payload=None, returncode=0, stdout=None, stderr=""):
    return MagicMock(
        returncode=returncode,
        stdout=stdout if stdout is not None else json.dumps(payload),
        stderr=stderr,
    )


def _threads_payload(threads):
    return {"data": {"repository": {"pullRequest": {"reviewThreads": {"nodes": threads}}}}}


def _node(database_id, login="coderabbitai", body="body", **extra):
    node = {
        "databaseId": database_id,
        "author": {"login": login} if login is not None else None,
        "body": body,
        "createdAt": "2024-05-01T10:00:00Z",
        "url": f"https://github.com/owner/repo/pull/1#discussion_r{database_id}",
        "path": "src/app.py",
        "position": 4,
        "isMinimized": False,
    }
    node.update(extra)
    return node


class TestRunGraphql:
    def test_builds_gh_command(self, mocker):
        mock_run = mocker.patch("subprocess.run", return_value=_completed({"data": {"ok": True}}))

        assert run_graphql("query { ok }", {"owner": "o", "pr": 3}) == {"ok": True}

        cmd = mock_run.call_args.args[0]
        assert cmd[:5] == ["gh", "api", "graphql", "-f", "query=query { ok }"]
        assert cmd[5:] == ["-f", "owner=o", "-F", "pr=3"]

    def test_gh_missing(self, mocker):
        mocker.patch("subprocess.run", side_effect=FileNotFoundError)
        with pytest.raises(GitHubError, match="not installed"):
            run_graphql("q", {})

    def test_timeout(self, mocker):
        mocker.patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="gh", timeout=30))
        with pytest.raises(GitHubError, match="timed out"):
            run_graphql("q", {})

    def test_graphql_errors(self, mocker):
        mocker.patch("subprocess.run", return_value=_completed({"errors": [{"message": "Bad credentials"}]}, returncode=1))
        with pytest.raises(GitHubError, match="Bad credentials"):
            run_graphql("q", {})

    def test_invalid_json(self, mocker):
        mocker.patch("subprocess.run", return_value=_completed(stdout="<html>"))
        with pytest.raises(GitHubError, match="invalid JSON"):
            run_graphql("q", {})

    def test_non_zero_exit(self, mocker):
        mocker.patch("subprocess.run", return_value=_completed(stdout="", returncode=1, stderr="HTTP 502"))
        with pytest.raises(GitHubError, match="HTTP 502"):
            run_graphql("q", {})

    def test_empty_data(self, mocker):
        mocker.patch("subprocess.run", return_value=_completed({"data": None}))
        with pytest.raises(GitHubError, match="empty"):
            run_graphql("q", {})


class TestFetchReviewComments:
    def test_flattens_threads(self, mocker):
        threads = [
            {
                "id": "PRRT_1",
                "isResolved": True,
                "isOutdated": False,
                "comments": {"nodes": [_node(1), _node(2, login="alice")]},
            },
            {
                "id": "PRRT_2",
                "isResolved": False,
                "isOutdated": True,
                "comments": {"nodes": [_node(3, isMinimized=True)]},
            },
        ]
        mocker.patch("subprocess.run", return_value=_completed(_threads_payload(threads)))

        comments = fetch_review_comments("owner/repo", 1)

        assert [c.id for c in comments] == [1, 2, 3]
        first, second, third = comments
        assert (first.author, first.thread_id, first.is_resolved) == ("coderabbitai", "PRRT_1", True)
        assert second.author == "alice"
        assert (third.thread_id, third.is_outdated, third.is_minimized) == ("PRRT_2", True, True)
        assert first.path == "src/app.py" and first.position == 4

    def test_passes_limits(self, mocker):
        mock_run = mocker.patch("subprocess.run", return_value=_completed(_threads_payload([])))

        fetch_review_comments("owner/repo", 9, max_threads=5, max_comments=7)

        cmd = mock_run.call_args.args[0]
        for arg in ("owner=owner", "repo=repo", "pr=9", "threads=5", "comments=7"):
            assert arg in cmd

    def test_deleted_author_and_null_body(self, mocker):
        threads = [
            {
                "id": "PRRT_1",
                "isResolved": False,
                "isOutdated": False,
                "comments": {"nodes": [_node(1, login=None, body=None)]},
            }
        ]
        mocker.patch("subprocess.run", return_value=_completed(_threads_payload(threads)))

        (comment,) = fetch_review_comments("owner/repo", 1)

        assert comment.author is None
        assert comment.body == ""

    def test_invalid_repo(self):
        with pytest.raises(ValueError, match="owner/name"):
            fetch_review_comments("just-a-name", 1)

    def test_missing_pull_request(self, mocker):
        mocker.patch("subprocess.run", return_value=_completed({"data": {"repository": {"pullRequest": None}}}))
        with pytest.raises(GitHubError, match="PR #4 not found"):
            fetch_review_comments("owner/repo", 4)


class TestResolveReviewThread:
    def test_resolved(self, mocker):
        payload = {"data": {"resolveReviewThread": {"thread": {"id": "PRRT_1", "isResolved": True}}}}
        mock_run = mocker.patch("subprocess.run", return_value=_completed(payload))

        assert resolve_review_thread("PRRT_1") is True
        assert "threadId=PRRT_1" in mock_run.call_args.args[0]

    def test_still_unresolved(self, mocker):
        payload = {"data": {"resolveReviewThread": {"thread": {"id": "PRRT_1", "isResolved": False}}}}
        mocker.patch("subprocess.run", return_value=_completed(payload))

        assert resolve_review_thread("PRRT_1") is False
