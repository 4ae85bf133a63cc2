"""Decide whether a comment was written by the CodeRabbit bot.

GitHub reports the bot as `coderabbitai` through GraphQL and as
`coderabbitai[bot]` through REST; both spellings are the same identity.
Only the author login participates — body content is never inspected.
"""

from __future__ import annotations

from rabbitlens_core.models import RawComment

CODERABBIT_LOGINS = frozenset({"coderabbitai", "coderabbitai[bot]"})


def is_coderabbit_comment(comment: RawComment) -> bool:
    """Return True iff the comment's author is one of the CodeRabbit logins.

    Never raises: a missing or non-string author classifies as False.
    """
    author = getattr(comment, "author", None)
    return isinstance(author, str) and author in CODERABBIT_LOGINS
