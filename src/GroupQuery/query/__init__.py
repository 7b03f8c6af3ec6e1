"""Group query compilation: grammar parser and operator builder."""

from __future__ import annotations

from GroupQuery.query.builder import FIELD_OWNER, GroupQueryBuilder, QueryArguments
from GroupQuery.query.parser import QueryParser, tokenize

__all__ = [
    "FIELD_OWNER",
    "GroupQueryBuilder",
    "QueryArguments",
    "QueryParser",
    "tokenize",
]
