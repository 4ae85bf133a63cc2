"""Shared helpers for commands that work on the local store."""

from __future__ import annotations

import click

from rabbitlens_store.base import BaseStore
from rabbitlens_store.models import CommentRecord
from rabbitlens_store.noop import NoOpStore


def require_store(ctx: click.Context) -> BaseStore:
    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError(
            "No store configured. Add 'store: sqlite' to .rabbitlens.yml to keep synced comments locally."
        )
    return store


def require_comment(store: BaseStore, comment_id: int) -> CommentRecord:
    record = store.get_comment(comment_id)
    if record is None:
        raise click.ClickException(f"Comment {comment_id} is not in the store. Run `rabbitlens sync` first.")
    return record
