"""No-op store — used when persistence is switched off.

Using a NoOpStore rather than None lets the CLI always call store methods
without conditional checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rabbitlens_store.base import BaseStore
from rabbitlens_store.models import PrRecord, PrStats

if TYPE_CHECKING:
    from rabbitlens_store.models import CommentRecord


class NoOpStore(BaseStore):
    """Silently discards all records — zero configuration required."""

    def get_or_create_pr(self, repo: str, number: int) -> PrRecord:
        return PrRecord(id=0, repo=repo, number=number)

    def get_pr(self, repo: str, number: int) -> PrRecord | None:
        return None

    def get_pr_by_id(self, pr_id: int) -> PrRecord | None:
        return None

    def list_prs(self, repo: str | None = None) -> list[PrRecord]:
        return []

    def update_pr_last_synced(self, pr_id: int, timestamp: str) -> None:
        pass  # intentional no-op

    def upsert_comment(self, record: CommentRecord) -> str:
        return "new"

    def get_comment(self, comment_id: int) -> CommentRecord | None:
        return None

    def list_comments(self, pr_id, replied=None, fix_applied=None, agreement=None, author=None) -> list[CommentRecord]:
        return []

    def mark_replied(self, comment_id: int, reply: str) -> None:
        pass

    def mark_fixed(self, comment_id: int) -> None:
        pass

    def mark_resolved(self, comment_id: int) -> None:
        pass

    def set_agreement(self, comment_id: int, agreement: str) -> None:
        pass

    def pr_stats(self, pr_id: int) -> PrStats:
        return PrStats()
