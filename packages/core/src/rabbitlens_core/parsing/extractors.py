"""Field extractors for CodeRabbit comment bodies.

Each extractor pulls one field out of the Markdown body and knows nothing
about the others. A missing marker is not an error: extractors return None
(or an empty list for tools). The only fault they raise is
CommentParsingError, when the body is not a string at all.

Fenced blocks are located with forward `str.find` scans instead of lazy
`[\\s\\S]*?` regexes, so an opened-but-never-closed fence costs one linear
pass rather than a backtracking search.
"""

from __future__ import annotations

import re

from rabbitlens_core.exceptions import CommentParsingError

FENCE = "```"

_TYPE_GLYPHS = "(?:⚠️|💡|❗|💬|🛠️)"

_ISSUE_TYPE_RE = re.compile(rf"^_({_TYPE_GLYPHS}.+?)_", re.MULTILINE)
_GLYPH_PREFIX_RE = re.compile(rf"^{_TYPE_GLYPHS}\s*")
_HEADING_RE = re.compile(r"^###\s+(.+)$", re.MULTILINE)
_SUMMARY_RE = re.compile(r"\*\*(.+?)\*\*")
_INTERNAL_ID_RE = re.compile(r"<!-- fingerprinting:([a-z:]+) -->")
_TOOL_RE = re.compile(r"<summary>🪛 ([^<]+)</summary>")

AI_PROMPT_MARKER = "<summary>🤖 Prompt for AI Agents</summary>"
COMMITTABLE_MARKER = "📝 Committable suggestion"


def _require_text(body) -> str:
    if not isinstance(body, str):
        raise CommentParsingError(f"Comment body must be a string, got {type(body).__name__}")
    return body


def _clean(text: str | None) -> str | None:
    """Trim a captured value; an all-whitespace capture counts as absent."""
    if text is None:
        return None
    return text.strip() or None


def _block_content(body: str, content_start: int) -> str | None:
    """Return the text from content_start up to the next fence, or None if unterminated.

    The content must be at least one character long, so the closing fence is
    searched for from content_start + 1.
    """
    end = body.find(FENCE, content_start + 1)
    if end == -1:
        return None
    return _clean(body[content_start:end])


def _tagged_block(body: str, tag: str) -> str | None:
    opener = f"{FENCE}{tag}\n"
    start = body.find(opener)
    if start == -1:
        return None
    return _block_content(body, start + len(opener))


def extract_issue_type(body: str) -> str | None:
    """Category label from the leading italic marker line, e.g. "Potential issue"."""
    match = _ISSUE_TYPE_RE.search(_require_text(body))
    if not match:
        return None
    return _clean(_GLYPH_PREFIX_RE.sub("", match.group(1).strip()))


def extract_heading(body: str) -> str | None:
    match = _HEADING_RE.search(_require_text(body))
    return _clean(match.group(1)) if match else None


def extract_summary(body: str) -> str | None:
    """First bold span in the body.

    This is a heuristic: a bold word in prose that precedes the real summary
    line wins. Callers get whatever is bolded first.
    """
    match = _SUMMARY_RE.search(_require_text(body))
    return _clean(match.group(1)) if match else None


def extract_diff(body: str) -> str | None:
    return _tagged_block(_require_text(body), "diff")


def extract_suggested_code(body: str) -> str | None:
    return _tagged_block(_require_text(body), "suggestion")


def extract_internal_id(body: str) -> str | None:
    """Fingerprint token, e.g. "memory:react:cleanup", used to dedupe across syncs."""
    match = _INTERNAL_ID_RE.search(_require_text(body))
    return match.group(1) if match else None


def extract_tools(body: str) -> list[str]:
    """Every static-analysis tool section, in document order, duplicates kept."""
    return [m.group(1).strip() for m in _TOOL_RE.finditer(_require_text(body))]


def extract_ai_prompt(body: str) -> str | None:
    """Text of the first bare fenced block after the "Prompt for AI Agents" marker.

    Fences that appear before the marker never match.
    """
    body = _require_text(body)
    marker = body.find(AI_PROMPT_MARKER)
    if marker == -1:
        return None
    opener = f"{FENCE}\n"
    start = body.find(opener, marker + len(AI_PROMPT_MARKER))
    if start == -1:
        return None
    return _block_content(body, start + len(opener))


def extract_committable_suggestion(body: str) -> str | None:
    """Code of the first fenced block after the committable-suggestion label.

    The fence may carry any language tag; everything up to the end of the
    fence line is skipped.
    """
    body = _require_text(body)
    marker = body.find(COMMITTABLE_MARKER)
    if marker == -1:
        return None
    fence = body.find(FENCE, marker + len(COMMITTABLE_MARKER))
    if fence == -1:
        return None
    line_end = body.find("\n", fence + len(FENCE))
    if line_end == -1:
        return None
    return _block_content(body, line_end + 1)
