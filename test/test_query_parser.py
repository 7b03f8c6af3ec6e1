"""Tests for the query string grammar."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from GroupQuery.core.errors import ErrorKind, QueryFailure
from GroupQuery.core.models import Account, Group
from GroupQuery.core.predicates import (
    AndPredicate,
    FieldPredicate,
    LimitPredicate,
    MemberPredicate,
    NotPredicate,
    OrPredicate,
    SubgroupPredicate,
    VisibleToAllPredicate,
    effective_limit,
)
from GroupQuery.directory import AccountResolver, DirectoryStore, GroupBackend, GroupCache
from GroupQuery.index.schema import latest_schema
from GroupQuery.query import GroupQueryBuilder, QueryArguments, QueryParser, tokenize
from GroupQuery.query.parser import TokenType


def _parser() -> QueryParser:
    store = DirectoryStore.from_data(
        accounts=(
            Account(id=1001, username="alice", full_name="Alice Example", email="alice@example.com"),
            Account(id=1002, username="bob", full_name="Bob Builder", email="bob@example.com"),
        ),
        groups=(
            Group(uuid="dev-uuid", name="Developers", members=(1001, 1002)),
            Group(uuid="rm-uuid", name="Release Managers", members=(1002,)),
        ),
    )
    builder = GroupQueryBuilder(
        QueryArguments(
            schema=latest_schema(),
            group_cache=GroupCache(store),
            group_backend=GroupBackend(store),
            account_resolver=AccountResolver(store),
        )
    )
    return QueryParser(builder)


class TestTokenize(unittest.TestCase):
    def test_fields_terms_and_operators(self) -> None:
        tokens = tokenize('Name:foo bar OR -is:visibletoall "two words"')
        self.assertEqual(
            [t.type for t in tokens],
            [TokenType.FIELD, TokenType.TERM, TokenType.OR, TokenType.NOT, TokenType.FIELD, TokenType.TERM],
        )
        self.assertEqual((tokens[0].field, tokens[0].value), ("name", "foo"))
        self.assertEqual(tokens[5].value, "two words")

    def test_quoted_field_value(self) -> None:
        tokens = tokenize('name:"Release Managers"')
        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].value, "Release Managers")

    def test_escaped_quote(self) -> None:
        tokens = tokenize(r'description:"say \"hi\""')
        self.assertEqual(tokens[0].value, 'say "hi"')

    def test_unterminated_quote_is_syntax_error(self) -> None:
        result = _parser().parse('name:"Release')
        self.assertIsInstance(result, QueryFailure)
        self.assertEqual(result.kind, ErrorKind.SYNTAX)


class TestQueryParser(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = _parser()

    def test_single_field(self) -> None:
        self.assertEqual(self.parser.parse("name:foo"), FieldPredicate("name", "foo"))

    def test_implicit_and_with_limit(self) -> None:
        result = self.parser.parse("name:foo member:alice is:visibletoall limit:10")
        self.assertEqual(
            result,
            AndPredicate(
                (
                    FieldPredicate("name", "foo"),
                    MemberPredicate(1001),
                    VisibleToAllPredicate(),
                    LimitPredicate(10),
                )
            ),
        )
        self.assertEqual(effective_limit(result), 10)

    def test_or_binds_looser_than_and(self) -> None:
        result = self.parser.parse("name:a name:b OR name:c")
        self.assertEqual(
            result,
            OrPredicate(
                (
                    AndPredicate((FieldPredicate("name", "a"), FieldPredicate("name", "b"))),
                    FieldPredicate("name", "c"),
                )
            ),
        )

    def test_parentheses_and_negation(self) -> None:
        result = self.parser.parse("-(inname:dev OR subgroup:Release) AND NOT uuid:x")
        self.assertEqual(
            result,
            AndPredicate(
                (
                    NotPredicate(OrPredicate((FieldPredicate("inname", "dev"), SubgroupPredicate("rm-uuid")))),
                    NotPredicate(FieldPredicate("uuid", "x")),
                )
            ),
        )

    def test_bare_term_uses_default_field(self) -> None:
        result = self.parser.parse("dev")
        self.assertIsInstance(result, OrPredicate)
        self.assertEqual(len(result.operands), 4)

    def test_field_keyword_is_lowercased(self) -> None:
        self.assertEqual(self.parser.parse("IS:VisibleToAll"), VisibleToAllPredicate())

    def test_first_failure_aborts_query(self) -> None:
        result = self.parser.parse("name:foo member:nobody limit:abc")
        self.assertIsInstance(result, QueryFailure)
        self.assertEqual(result.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(result.message, "User nobody not found")

    def test_syntax_errors(self) -> None:
        for query in ("", "   ", "(name:foo", "name:foo)", "name:foo OR", "NOT", "name:(a b)"):
            result = self.parser.parse(query)
            self.assertIsInstance(result, QueryFailure, query)
            self.assertEqual(result.kind, ErrorKind.SYNTAX, query)

    def test_rendering_round_trips_through_str(self) -> None:
        result = self.parser.parse('name:"Release Managers" OR inname:dev')
        self.assertEqual(str(result), '(name:"Release Managers" OR inname:dev)')
        self.assertEqual(self.parser.parse(str(result)), result)


if __name__ == "__main__":
    unittest.main()
