"""Comment data shapes.

RawComment is what the review-thread fetch layer produces. ParsedComment wraps
a RawComment (composition, not inheritance) and adds the fields extracted from
its body. Collections hold either variant; use `is_parsed()` to branch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

CODERABBIT_BOT = "coderabbitai[bot]"


@dataclass(frozen=True)
class RawComment:
    """A review comment exactly as delivered by GitHub."""

    id: int
    author: str | None
    body: str
    created_at: str  # ISO-8601, as returned by the API
    url: str
    path: str | None = None
    position: int | None = None
    is_resolved: bool = False
    is_outdated: bool = False
    is_minimized: bool = False
    thread_id: str | None = None  # GraphQL node id of the review thread


@dataclass(frozen=True)
class ParsedComment:
    """A CodeRabbit comment plus the structured fields pulled out of its body.

    Every derived field except `bot` and `tools` is optional: extraction takes
    what is present and leaves the rest as None. `tools` is a list for callers
    but is left out of the hash; treat it as read-only.
    """

    raw: RawComment
    bot: str = CODERABBIT_BOT
    issue_type: str | None = None
    heading: str | None = None
    summary: str | None = None
    diff: str | None = None
    suggested_code: str | None = None
    committable_suggestion: str | None = None
    ai_prompt: str | None = None
    tools: list[str] = field(default_factory=list, hash=False)
    internal_id: str | None = None

    @property
    def is_actionable(self) -> bool:
        """True when there is something an agent can act on directly."""
        return bool(self.ai_prompt or self.suggested_code or self.committable_suggestion)

    # Read-through access to the wrapped RawComment so callers can treat both
    # variants alike for the base fields.

    @property
    def id(self) -> int:
        return self.raw.id

    @property
    def author(self) -> str | None:
        return self.raw.author

    @property
    def body(self) -> str:
        return self.raw.body

    @property
    def created_at(self) -> str:
        return self.raw.created_at

    @property
    def url(self) -> str:
        return self.raw.url

    @property
    def path(self) -> str | None:
        return self.raw.path

    @property
    def position(self) -> int | None:
        return self.raw.position

    @property
    def is_resolved(self) -> bool:
        return self.raw.is_resolved

    @property
    def is_outdated(self) -> bool:
        return self.raw.is_outdated

    @property
    def is_minimized(self) -> bool:
        return self.raw.is_minimized

    @property
    def thread_id(self) -> str | None:
        return self.raw.thread_id


Comment = Union[RawComment, ParsedComment]


def is_parsed(comment: Comment) -> bool:
    return isinstance(comment, ParsedComment)
