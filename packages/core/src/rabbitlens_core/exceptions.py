"""Exception hierarchy for rabbitlens.

Classification misses and field-extraction misses are not errors — they are
normal branches represented as pass-through comments and absent fields. The
exceptions below cover the few conditions callers must be able to catch:

- RabbitlensError: base for everything raised by rabbitlens
- CommentParsingError: a comment body that is not a string reached an extractor
- GitHubError / NotFoundError: a GitHub call failed or found nothing
- ApplyFixError: git refused to apply or commit a suggested fix
"""

from __future__ import annotations

__all__ = [
    "RabbitlensError",
    "CommentParsingError",
    "GitHubError",
    "NotFoundError",
    "ApplyFixError",
]


class RabbitlensError(Exception):
    """Base exception for rabbitlens errors."""


class CommentParsingError(RabbitlensError):
    """Raised when a comment body cannot be parsed at all.

    Only invalid input (a body that is not a string) triggers this. A body
    that simply lacks a marker yields an absent field instead.
    """

    def __init__(self, message: str | None = None):
        super().__init__(message or "Failed to parse CodeRabbit comment")


class GitHubError(RabbitlensError):
    """Raised when a GitHub REST or GraphQL call fails."""


class NotFoundError(GitHubError):
    """Raised when a pull request, comment or thread does not exist."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"Not found: {resource}")


class ApplyFixError(RabbitlensError):
    """Raised when `git apply` or `git commit` fails while applying a fix."""
