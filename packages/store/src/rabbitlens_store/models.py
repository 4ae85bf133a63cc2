"""Persisted comment data models.

Decoupled from rabbitlens_core so the store layer can be used independently
and rabbitlens_core has no knowledge of persistence concerns. A
CommentRecord is a parsed comment flattened into columns, plus the workflow
state (agreement, reply, fix) that accumulates locally.
"""

from __future__ import annotations

from dataclasses import dataclass, field

AGREEMENTS = ("yes", "no", "partially")


@dataclass
class PrRecord:
    id: int
    repo: str
    number: int
    last_synced: str | None = None  # ISO-8601 UTC timestamp


@dataclass
class CommentRecord:
    """A single review comment persisted to the store.

    Created by the CLI layer from a ParsedComment during sync. Derived
    fields are refreshed on every sync; workflow fields are only changed by
    the mark_* / set_agreement operations.
    """

    id: int  # GitHub database id of the comment
    pr_id: int
    file: str | None = None
    line: int | None = None
    author: str | None = None
    body: str = ""
    url: str = ""
    created_at: str = ""
    issue_type: str | None = None
    heading: str | None = None
    summary: str | None = None
    diff: str | None = None
    suggested_code: str | None = None
    committable_suggestion: str | None = None
    ai_prompt: str | None = None
    tools: str = ""  # comma-joined tool names
    internal_id: str | None = None
    thread_id: str | None = None
    is_resolved: bool = False
    is_outdated: bool = False
    is_minimized: bool = False
    agreement: str | None = None  # "yes" | "no" | "partially"
    reply: str | None = None
    replied: bool = False
    fix_applied: bool = False
    synced_at: str | None = None
    reviewed_at: str | None = None
    fixed_at: str | None = None

    @property
    def tool_list(self) -> list[str]:
        return [t for t in self.tools.split(",") if t] if self.tools else []

    @property
    def is_actionable(self) -> bool:
        return bool(self.ai_prompt or self.suggested_code or self.committable_suggestion)


@dataclass
class PrStats:
    total: int = 0
    replied: int = 0
    fixed: int = 0
    resolved: int = 0
    actionable: int = 0
    pending_ids: list[int] = field(default_factory=list)  # comments not replied to yet
