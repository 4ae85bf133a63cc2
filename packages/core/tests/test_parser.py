"""Tests for comment classification, parsing and filtering."""

import logging

import pytest

from rabbitlens_core.exceptions import CommentParsingError
from rabbitlens_core.models import CODERABBIT_BOT, ParsedComment, RawComment, is_parsed
from rabbitlens_core.parsing import (
    filter_actionable,
    filter_bot_comments,
    is_coderabbit_comment,
    parse_batch,
    parse_coderabbit_comment,
    parse_many,
    parse_one,
)

BOT_BODY = """_⚠️ Potential issue_

**Memory leak detected**

```diff
-useEffect(() => subscribe());
+useEffect(() => subscribe(), []);
```

<details>
<summary>🤖 Prompt for AI Agents</summary>

```
Review this component and add a cleanup to the effect.
```

</details>

<details>
<summary>🪛 ESLint Plugin React Hooks</summary>

</details>

<!-- fingerprinting:memory:react:cleanup -->
"""


def _comment(comment_id=1, author="coderabbitai[bot]", body=BOT_BODY, **kwargs):
    return RawComment(
        id=comment_id,
        author=author,
        body=body,
        created_at="2024-05-01T10:00:00Z",
        url=f"https://github.com/owner/repo/pull/1#discussion_r{comment_id}",
        **kwargs,
    )


class TestClassifier:
    @pytest.mark.parametrize("login", ["coderabbitai", "coderabbitai[bot]"])
    def test_recognizes_both_logins(self, login):
        assert is_coderabbit_comment(_comment(author=login))

    @pytest.mark.parametrize("login", ["alice", "CodeRabbitAI", "coderabbitai[bot] ", "", None])
    def test_rejects_other_authors(self, login):
        assert not is_coderabbit_comment(_comment(author=login))

    def test_object_without_author_is_not_a_bot(self):
        assert is_coderabbit_comment(object()) is False


class TestParseOne:
    def test_full_bot_comment(self):
        parsed = parse_one(_comment())

        assert isinstance(parsed, ParsedComment)
        assert parsed.issue_type == "Potential issue"
        assert parsed.summary == "Memory leak detected"
        assert "Review this component" in parsed.ai_prompt
        assert parsed.tools == ["ESLint Plugin React Hooks"]
        assert parsed.internal_id == "memory:react:cleanup"
        assert parsed.diff.startswith("-useEffect")

    def test_human_comment_passes_through(self):
        raw = _comment(author="alice", body="This looks good to me!")

        assert parse_one(raw) is raw
        assert not is_coderabbit_comment(raw)
        assert filter_actionable([parse_one(raw)]) == []

    def test_suggestion_without_prompt_is_actionable(self):
        body = "_💡 Verification agent_\n\n```suggestion\nreturn value ?? fallback;\n```\n"
        parsed = parse_one(_comment(body=body))

        assert parsed.suggested_code == "return value ?? fallback;"
        assert parsed.ai_prompt is None
        assert parsed.is_actionable
        assert filter_actionable([parsed]) == [parsed]

    def test_plain_bot_comment_has_no_derived_fields(self):
        parsed = parse_one(_comment(body="Simple CodeRabbit comment without extras"))

        assert parsed.bot == CODERABBIT_BOT
        assert parsed.tools == []
        for name in (
            "issue_type",
            "heading",
            "summary",
            "diff",
            "suggested_code",
            "committable_suggestion",
            "ai_prompt",
            "internal_id",
        ):
            assert getattr(parsed, name) is None, name
        assert filter_actionable([parsed]) == []

    def test_unterminated_prompt_block(self):
        body = "<details>\n<summary>🤖 Prompt for AI Agents</summary>\n\n```\nIn app.py fix the"
        parsed = parse_one(_comment(body=body))

        assert isinstance(parsed, ParsedComment)
        assert parsed.ai_prompt is None

    def test_base_fields_are_carried_over(self):
        raw = _comment(author="coderabbitai", path="src/app.py", position=7, is_outdated=True, thread_id="PRRT_1")
        parsed = parse_one(raw)

        assert parsed.raw is raw
        assert (parsed.id, parsed.body, parsed.created_at, parsed.url) == (raw.id, raw.body, raw.created_at, raw.url)
        assert (parsed.path, parsed.position, parsed.thread_id) == ("src/app.py", 7, "PRRT_1")
        assert parsed.is_outdated is True
        assert parsed.author == "coderabbitai"

    def test_output_tagged_with_canonical_bot_login(self):
        assert parse_one(_comment(author="coderabbitai")).bot == "coderabbitai[bot]"

    def test_idempotent_on_same_raw(self):
        raw = _comment()
        assert parse_one(raw) == parse_one(raw)

    def test_parsed_comment_is_hashable(self):
        raw = _comment()
        first, second = parse_one(raw), parse_one(raw)

        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_invalid_body_returns_raw_and_logs(self, caplog):
        raw = _comment(body=None)
        with caplog.at_level(logging.WARNING, logger="rabbitlens_core.parsing.parser"):
            result = parse_one(raw)

        assert result is raw
        assert "Could not parse comment 1" in caplog.text

    def test_parse_coderabbit_comment_raises_on_invalid_body(self):
        with pytest.raises(CommentParsingError):
            parse_coderabbit_comment(_comment(body=42))


class TestBatch:
    def test_empty_input(self):
        assert parse_many([]) == []
        assert parse_batch([]).failures == []

    def test_mixed_batch_of_one_hundred(self):
        raws = [
            _comment(comment_id=i, author="coderabbitai[bot]")
            if i % 10 == 0
            else _comment(comment_id=i, author=f"dev{i}", body="Nice work")
            for i in range(100)
        ]

        result = parse_many(raws)

        assert len(result) == 100
        assert [c.id for c in result] == list(range(100))
        parsed = [c for c in result if is_parsed(c)]
        assert [c.id for c in parsed] == list(range(0, 100, 10))
        assert filter_actionable(result) == parsed
        assert filter_bot_comments(result) == parsed

    def test_failure_is_isolated(self):
        raws = [_comment(comment_id=1), _comment(comment_id=2, body=None), _comment(comment_id=3)]

        batch = parse_batch(raws)

        assert len(batch.comments) == 3
        assert batch.comments[1] is raws[1]
        assert batch.parsed_count == 2
        assert len(batch.failures) == 1
        failure = batch.failures[0]
        assert (failure.index, failure.comment_id) == (1, 2)
        assert "must be a string" in failure.error

    def test_human_comment_with_invalid_body_is_not_a_failure(self):
        batch = parse_batch([_comment(author="alice", body=None)])
        assert batch.failures == []


class TestFilterActionable:
    def test_preserves_order_and_identity(self):
        a = parse_one(_comment(comment_id=1))
        b = parse_one(_comment(comment_id=2, body="no extras"))
        c = parse_one(_comment(comment_id=3, body="📝 Committable suggestion\n```py\nx = 1\n```"))
        human = _comment(comment_id=4, author="alice")

        result = filter_actionable([c, human, b, a])

        assert result == [c, a]
        assert result[0] is c and result[1] is a

    def test_duplicates_are_kept(self):
        a = parse_one(_comment())
        assert filter_actionable([a, a]) == [a, a]
