"""SQLiteStore — local file-based store for synced review comments.

Schema:
  prs       — one row per tracked pull request (repo + number unique).
  comments  — one row per review comment, keyed by the GitHub comment id.
              Parsed fields are flattened into columns; the tool list is
              stored comma-joined.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import fields
from datetime import datetime, timezone
from pathlib import Path

from rabbitlens_store.base import BaseStore
from rabbitlens_store.models import AGREEMENTS, CommentRecord, PrRecord, PrStats

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS prs (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    repo            TEXT NOT NULL,
    number          INTEGER NOT NULL,
    last_synced     TEXT,
    UNIQUE (repo, number)
);
CREATE TABLE IF NOT EXISTS comments (
    id                      INTEGER PRIMARY KEY,
    pr_id                   INTEGER NOT NULL REFERENCES prs(id) ON DELETE CASCADE,
    file                    TEXT,
    line                    INTEGER,
    author                  TEXT,
    body                    TEXT NOT NULL DEFAULT '',
    url                     TEXT DEFAULT '',
    created_at              TEXT DEFAULT '',
    issue_type              TEXT,
    heading                 TEXT,
    summary                 TEXT,
    diff                    TEXT,
    suggested_code          TEXT,
    committable_suggestion  TEXT,
    ai_prompt               TEXT,
    tools                   TEXT DEFAULT '',
    internal_id             TEXT,
    thread_id               TEXT,
    is_resolved             INTEGER DEFAULT 0,
    is_outdated             INTEGER DEFAULT 0,
    is_minimized            INTEGER DEFAULT 0,
    agreement               TEXT CHECK (agreement IN ('yes', 'no', 'partially')),
    reply                   TEXT,
    replied                 INTEGER DEFAULT 0,
    fix_applied             INTEGER DEFAULT 0,
    synced_at               TEXT,
    reviewed_at             TEXT,
    fixed_at                TEXT
);
CREATE INDEX IF NOT EXISTS idx_prs_repo_number        ON prs (repo, number);
CREATE INDEX IF NOT EXISTS idx_comments_pr_id         ON comments (pr_id);
CREATE INDEX IF NOT EXISTS idx_comments_replied       ON comments (replied);
CREATE INDEX IF NOT EXISTS idx_comments_fix_applied   ON comments (fix_applied);
"""

# Columns refreshed from GitHub on every sync. Workflow state is excluded.
_SYNCED_COLUMNS = (
    "pr_id",
    "file",
    "line",
    "author",
    "body",
    "url",
    "created_at",
    "issue_type",
    "heading",
    "summary",
    "diff",
    "suggested_code",
    "committable_suggestion",
    "ai_prompt",
    "tools",
    "internal_id",
    "thread_id",
    "is_resolved",
    "is_outdated",
    "is_minimized",
)
_BOOL_COLUMNS = {"is_resolved", "is_outdated", "is_minimized", "replied", "fix_applied"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteStore(BaseStore):
    """Stores PRs and review comments in a local SQLite database file.

    The database file path defaults to `.rabbitlens/state.db` in the current
    working directory. Configure via .rabbitlens.yml: `store_path: /path/to/state.db`.
    """

    def __init__(self, db_path: str = ".rabbitlens/state.db"):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    # ------------------------------------------------------------------ #
    # Pull requests                                                        #
    # ------------------------------------------------------------------ #

    def get_or_create_pr(self, repo: str, number: int) -> PrRecord:
        existing = self.get_pr(repo, number)
        if existing is not None:
            return existing
        cur = self._conn.execute("INSERT INTO prs (repo, number) VALUES (?, ?)", (repo, number))
        self._conn.commit()
        logger.info("Tracking new PR %s#%d", repo, number)
        return PrRecord(id=cur.lastrowid, repo=repo, number=number)

    def get_pr(self, repo: str, number: int) -> PrRecord | None:
        row = self._conn.execute("SELECT * FROM prs WHERE repo=? AND number=?", (repo, number)).fetchone()
        return self._row_to_pr(row) if row else None

    def get_pr_by_id(self, pr_id: int) -> PrRecord | None:
        row = self._conn.execute("SELECT * FROM prs WHERE id=?", (pr_id,)).fetchone()
        return self._row_to_pr(row) if row else None

    def list_prs(self, repo: str | None = None) -> list[PrRecord]:
        if repo is not None:
            rows = self._conn.execute("SELECT * FROM prs WHERE repo=? ORDER BY number DESC", (repo,)).fetchall()
        else:
            rows = self._conn.execute("SELECT * FROM prs ORDER BY number DESC").fetchall()
        return [self._row_to_pr(r) for r in rows]

    def update_pr_last_synced(self, pr_id: int, timestamp: str) -> None:
        self._conn.execute("UPDATE prs SET last_synced=? WHERE id=?", (timestamp, pr_id))
        self._conn.commit()

    # ------------------------------------------------------------------ #
    # Comments                                                             #
    # ------------------------------------------------------------------ #

    def upsert_comment(self, record: CommentRecord) -> str:
        values = {col: getattr(record, col) for col in _SYNCED_COLUMNS}
        for col in _BOOL_COLUMNS.intersection(values):
            values[col] = int(bool(values[col]))

        existing = self._conn.execute("SELECT * FROM comments WHERE id=?", (record.id,)).fetchone()
        if existing is None:
            columns = ("id", *_SYNCED_COLUMNS, "synced_at")
            placeholders = ", ".join("?" for _ in columns)
            self._conn.execute(
                f"INSERT INTO comments ({', '.join(columns)}) VALUES ({placeholders})",
                (record.id, *values.values(), _now()),
            )
            self._conn.commit()
            return "new"

        if all(existing[col] == values[col] for col in _SYNCED_COLUMNS):
            return "unchanged"

        assignments = ", ".join(f"{col}=?" for col in _SYNCED_COLUMNS)
        self._conn.execute(
            f"UPDATE comments SET {assignments}, synced_at=? WHERE id=?",
            (*values.values(), _now(), record.id),
        )
        self._conn.commit()
        return "updated"

    def get_comment(self, comment_id: int) -> CommentRecord | None:
        row = self._conn.execute("SELECT * FROM comments WHERE id=?", (comment_id,)).fetchone()
        return self._row_to_comment(row) if row else None

    def list_comments(
        self,
        pr_id: int,
        replied: bool | None = None,
        fix_applied: bool | None = None,
        agreement: str | None = None,
        author: str | None = None,
    ) -> list[CommentRecord]:
        query = "SELECT * FROM comments WHERE pr_id=?"
        params: list = [pr_id]
        if replied is not None:
            query += " AND replied=?"
            params.append(int(replied))
        if fix_applied is not None:
            query += " AND fix_applied=?"
            params.append(int(fix_applied))
        if agreement is not None:
            query += " AND agreement=?"
            params.append(agreement)
        if author is not None:
            query += " AND author=?"
            params.append(author)
        query += " ORDER BY created_at, id"
        return [self._row_to_comment(r) for r in self._conn.execute(query, params).fetchall()]

    def mark_replied(self, comment_id: int, reply: str) -> None:
        self._conn.execute(
            "UPDATE comments SET reply=?, replied=1, reviewed_at=? WHERE id=?",
            (reply, _now(), comment_id),
        )
        self._conn.commit()

    def mark_fixed(self, comment_id: int) -> None:
        self._conn.execute("UPDATE comments SET fix_applied=1, fixed_at=? WHERE id=?", (_now(), comment_id))
        self._conn.commit()

    def mark_resolved(self, comment_id: int) -> None:
        self._conn.execute("UPDATE comments SET is_resolved=1 WHERE id=?", (comment_id,))
        self._conn.commit()

    def set_agreement(self, comment_id: int, agreement: str) -> None:
        if agreement not in AGREEMENTS:
            raise ValueError(f"Unknown agreement {agreement!r}. Choose one of: {', '.join(AGREEMENTS)}.")
        self._conn.execute(
            "UPDATE comments SET agreement=?, reviewed_at=? WHERE id=?",
            (agreement, _now(), comment_id),
        )
        self._conn.commit()

    def pr_stats(self, pr_id: int) -> PrStats:
        row = self._conn.execute(
            """
            SELECT
              COUNT(*)                                         AS total,
              COALESCE(SUM(replied), 0)                        AS replied,
              COALESCE(SUM(fix_applied), 0)                    AS fixed,
              COALESCE(SUM(is_resolved), 0)                    AS resolved,
              COALESCE(SUM(CASE WHEN ai_prompt IS NOT NULL
                                  OR suggested_code IS NOT NULL
                                  OR committable_suggestion IS NOT NULL
                                THEN 1 ELSE 0 END), 0)         AS actionable
            FROM comments WHERE pr_id=?
            """,
            (pr_id,),
        ).fetchone()
        pending = self._conn.execute(
            "SELECT id FROM comments WHERE pr_id=? AND replied=0 ORDER BY id",
            (pr_id,),
        ).fetchall()
        return PrStats(
            total=row["total"],
            replied=row["replied"],
            fixed=row["fixed"],
            resolved=row["resolved"],
            actionable=row["actionable"],
            pending_ids=[r["id"] for r in pending],
        )

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_pr(row: sqlite3.Row) -> PrRecord:
        return PrRecord(id=row["id"], repo=row["repo"], number=row["number"], last_synced=row["last_synced"])

    @staticmethod
    def _row_to_comment(row: sqlite3.Row) -> CommentRecord:
        data = {f.name: row[f.name] for f in fields(CommentRecord)}
        for col in _BOOL_COLUMNS:
            data[col] = bool(data[col])
        data["tools"] = data["tools"] or ""
        data["body"] = data["body"] or ""
        data["url"] = data["url"] or ""
        data["created_at"] = data["created_at"] or ""
        return CommentRecord(**data)
