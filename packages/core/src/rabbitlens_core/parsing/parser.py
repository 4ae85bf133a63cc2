"""Turn raw review comments into structured CodeRabbit comments.

parse_one() routes a single comment: CodeRabbit comments are run through
every extractor, everything else passes through untouched. parse_batch()
does the same over a list and records which items could not be parsed, so
one malformed comment never aborts the rest of a sync.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rabbitlens_core.exceptions import CommentParsingError
from rabbitlens_core.models import CODERABBIT_BOT, Comment, ParsedComment, RawComment
from rabbitlens_core.parsing.classifier import is_coderabbit_comment
from rabbitlens_core.parsing.extractors import (
    extract_ai_prompt,
    extract_committable_suggestion,
    extract_diff,
    extract_heading,
    extract_internal_id,
    extract_issue_type,
    extract_suggested_code,
    extract_summary,
    extract_tools,
)

logger = logging.getLogger(__name__)


@dataclass
class ParseFailure:
    """One comment that was classified as CodeRabbit but could not be parsed."""

    index: int
    comment_id: int | None
    error: str


@dataclass
class ParseBatch:
    """Result of parse_batch: the parsed list plus any per-item failures.

    `comments` always has the same length and order as the input; failed
    items appear there unchanged.
    """

    comments: list[Comment] = field(default_factory=list)
    failures: list[ParseFailure] = field(default_factory=list)

    @property
    def parsed_count(self) -> int:
        return sum(1 for c in self.comments if isinstance(c, ParsedComment))


def parse_coderabbit_comment(raw: RawComment) -> ParsedComment:
    """Run every extractor over the body and build a ParsedComment.

    Does not classify — callers use this when they already know the author.
    Raises CommentParsingError if the body is not a string.
    """
    body = raw.body
    parsed = ParsedComment(
        raw=raw,
        bot=CODERABBIT_BOT,
        issue_type=extract_issue_type(body),
        heading=extract_heading(body),
        summary=extract_summary(body),
        diff=extract_diff(body),
        suggested_code=extract_suggested_code(body),
        committable_suggestion=extract_committable_suggestion(body),
        ai_prompt=extract_ai_prompt(body),
        tools=extract_tools(body),
        internal_id=extract_internal_id(body),
    )
    logger.debug(
        "Parsed CodeRabbit comment %s (type=%s, ai_prompt=%s, suggestion=%s, tools=%d)",
        raw.id,
        parsed.issue_type,
        parsed.ai_prompt is not None,
        parsed.suggested_code is not None or parsed.committable_suggestion is not None,
        len(parsed.tools),
    )
    return parsed


def parse_one(raw: RawComment) -> Comment:
    """Parse a CodeRabbit comment, or return any other comment unchanged.

    Never raises: a CodeRabbit comment whose body is invalid is logged and
    returned as-is, same as a comment from any other author.
    """
    if not is_coderabbit_comment(raw):
        return raw
    try:
        return parse_coderabbit_comment(raw)
    except CommentParsingError as e:
        logger.warning("Could not parse comment %s: %s", getattr(raw, "id", None), e)
        return raw


def parse_batch(raws: list[RawComment]) -> ParseBatch:
    batch = ParseBatch()
    for index, raw in enumerate(raws):
        if not is_coderabbit_comment(raw):
            batch.comments.append(raw)
            continue
        try:
            batch.comments.append(parse_coderabbit_comment(raw))
        except CommentParsingError as e:
            comment_id = getattr(raw, "id", None)
            logger.warning("Could not parse comment %s: %s", comment_id, e)
            batch.failures.append(ParseFailure(index=index, comment_id=comment_id, error=str(e)))
            batch.comments.append(raw)

    logger.info(
        "Parsed %d comment(s): %d CodeRabbit, %d passed through, %d failed",
        len(raws),
        batch.parsed_count,
        len(raws) - batch.parsed_count - len(batch.failures),
        len(batch.failures),
    )
    return batch


def parse_many(raws: list[RawComment]) -> list[Comment]:
    """Element-wise parse_one; output has the same length and order as the input."""
    return parse_batch(raws).comments
