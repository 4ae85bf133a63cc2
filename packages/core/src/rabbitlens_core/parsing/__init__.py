from rabbitlens_core.parsing.classifier import is_coderabbit_comment
from rabbitlens_core.parsing.filters import filter_actionable, filter_bot_comments
from rabbitlens_core.parsing.parser import (
    ParseBatch,
    ParseFailure,
    parse_batch,
    parse_coderabbit_comment,
    parse_many,
    parse_one,
)

__all__ = [
    "ParseBatch",
    "ParseFailure",
    "filter_actionable",
    "filter_bot_comments",
    "is_coderabbit_comment",
    "parse_batch",
    "parse_coderabbit_comment",
    "parse_many",
    "parse_one",
]
