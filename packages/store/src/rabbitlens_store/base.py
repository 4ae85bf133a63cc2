"""Abstract store interface.

The CLI depends on BaseStore — not on a concrete backend — so backends are
swappable without touching CLI code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rabbitlens_store.models import CommentRecord, PrRecord, PrStats


class BaseStore(ABC):
    """Pluggable persistence layer for synced review comments."""

    @abstractmethod
    def get_or_create_pr(self, repo: str, number: int) -> PrRecord:
        """Return the PR row for repo#number, inserting it on first sight."""

    @abstractmethod
    def get_pr(self, repo: str, number: int) -> PrRecord | None:
        """Return the PR row or None."""

    @abstractmethod
    def get_pr_by_id(self, pr_id: int) -> PrRecord | None:
        """Return the PR row with this primary key or None."""

    @abstractmethod
    def list_prs(self, repo: str | None = None) -> list[PrRecord]:
        """Return tracked PRs, newest number first, optionally for one repo."""

    @abstractmethod
    def update_pr_last_synced(self, pr_id: int, timestamp: str) -> None:
        """Record when a PR was last synced."""

    @abstractmethod
    def upsert_comment(self, record: CommentRecord) -> str:
        """Insert or refresh a comment.

        Returns "new" for an insert, "updated" when the body or thread flags
        changed, "unchanged" otherwise. Workflow state (agreement, reply,
        replied, fix_applied) is never overwritten by an upsert.
        """

    @abstractmethod
    def get_comment(self, comment_id: int) -> CommentRecord | None:
        """Return one comment or None."""

    @abstractmethod
    def list_comments(
        self,
        pr_id: int,
        replied: bool | None = None,
        fix_applied: bool | None = None,
        agreement: str | None = None,
        author: str | None = None,
    ) -> list[CommentRecord]:
        """Return a PR's comments; None filters are not applied.

        Returns an empty list if nothing matches — never raises.
        """

    @abstractmethod
    def mark_replied(self, comment_id: int, reply: str) -> None:
        """Store the reply text and flag the comment as replied."""

    @abstractmethod
    def mark_fixed(self, comment_id: int) -> None:
        """Flag the comment's fix as applied."""

    @abstractmethod
    def mark_resolved(self, comment_id: int) -> None:
        """Flag the comment's review thread as resolved."""

    @abstractmethod
    def set_agreement(self, comment_id: int, agreement: str) -> None:
        """Record whether we agree with the comment: yes, no or partially."""

    @abstractmethod
    def pr_stats(self, pr_id: int) -> PrStats:
        """Aggregate workflow progress for one PR."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional — subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
