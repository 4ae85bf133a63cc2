"""CLI entry point for rabbitlens.

Commands:
  sync       — fetch and parse CodeRabbit review comments into the store
  comments   — list stored comments for a PR
  show       — print one stored comment with every extracted field
  reply      — post a threaded reply on GitHub
  resolve    — resolve the comment's review thread
  apply-fix  — apply a comment's patch with git and commit it
  agree      — record whether you agree with a comment
  report     — workflow progress for a PR
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from rabbitlens_cli.commands.apply_fix import apply_fix_cmd
from rabbitlens_cli.commands.comments import agree_cmd, comments_cmd, show_cmd
from rabbitlens_cli.commands.reply import reply_cmd
from rabbitlens_cli.commands.report import report_cmd
from rabbitlens_cli.commands.resolve import resolve_cmd
from rabbitlens_cli.commands.sync import sync_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .rabbitlens.yml settings.

    Store selection:
      store: sqlite → SQLiteStore (store_path or .rabbitlens/state.db)
      store: noop   → NoOpStore  (nothing persisted)

    This factory lives in cli.py so neither rabbitlens_core nor
    rabbitlens_store know about the CLI config format.
    """
    from rabbitlens_store.noop import NoOpStore

    store_type = config.get("store", "sqlite")

    if store_type == "sqlite":
        from rabbitlens_store.sqlite import SQLiteStore

        db_path = config.get("store_path", ".rabbitlens/state.db")
        return SQLiteStore(db_path=db_path)

    if store_type != "noop":
        console.print(f"[yellow]Unknown store {store_type!r}. Falling back to no store.[/yellow]")
    return NoOpStore()


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("rabbitlens"),
    prog_name="rabbitlens",
)
@click.option(
    "--config",
    "config_path",
    default=".rabbitlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="RABBITLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Sync, triage and act on CodeRabbit review comments."""
    from rabbitlens_core.config import load_config
    from rabbitlens_cli.auth import resolve_github_token

    ctx.ensure_object(dict)

    config = load_config(config_path)
    _configure_logging("DEBUG" if verbose else config.get("log_level", "WARNING"))

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.call_on_close(store.close)


main.add_command(sync_cmd)
main.add_command(comments_cmd)
main.add_command(show_cmd)
main.add_command(reply_cmd)
main.add_command(resolve_cmd)
main.add_command(apply_fix_cmd)
main.add_command(agree_cmd)
main.add_command(report_cmd)
