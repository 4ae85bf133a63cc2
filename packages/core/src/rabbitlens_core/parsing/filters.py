from __future__ import annotations

from rabbitlens_core.models import Comment, ParsedComment


def filter_bot_comments(items: list[Comment]) -> list[ParsedComment]:
    """Keep only comments that were parsed as CodeRabbit comments."""
    return [c for c in items if isinstance(c, ParsedComment)]


def filter_actionable(items: list[Comment]) -> list[ParsedComment]:
    """Keep parsed comments that carry an AI prompt, a suggestion, or a committable suggestion.

    Order is preserved and nothing is deduplicated. Unparsed comments are
    always dropped.
    """
    return [c for c in items if isinstance(c, ParsedComment) and c.is_actionable]
