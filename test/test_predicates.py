"""Tests for the predicate tree and index schema versions."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from GroupQuery.core.errors import QueryParseError
from GroupQuery.core.predicates import (
    AndPredicate,
    FieldPredicate,
    LimitPredicate,
    MemberPredicate,
    NotPredicate,
    OrPredicate,
    VisibleToAllPredicate,
    and_,
    effective_limit,
    or_,
)
from GroupQuery.index.schema import GroupField, get_schema, latest_schema


class TestCombinators(unittest.TestCase):
    def test_single_operand_is_identity(self) -> None:
        leaf = FieldPredicate("name", "foo")
        self.assertIs(or_(leaf), leaf)
        self.assertIs(and_(leaf), leaf)

    def test_empty_combinator_rejected(self) -> None:
        with self.assertRaises(ValueError):
            OrPredicate(())
        with self.assertRaises(ValueError):
            AndPredicate(())

    def test_predicates_are_immutable(self) -> None:
        leaf = MemberPredicate(1000)
        with self.assertRaises(AttributeError):
            leaf.account_id = 1001  # type: ignore[misc]


class TestRendering(unittest.TestCase):
    def test_str_uses_query_syntax(self) -> None:
        tree = and_(
            or_(FieldPredicate("inname", "dev ops"), VisibleToAllPredicate()),
            NotPredicate(MemberPredicate(1000)),
            LimitPredicate(5),
        )
        self.assertEqual(str(tree), '((inname:"dev ops" OR is:visibletoall) AND -member:1000 AND limit:5)')

    def test_empty_value_is_quoted(self) -> None:
        self.assertEqual(str(FieldPredicate("name", "")), 'name:""')

    def test_to_dict(self) -> None:
        tree = or_(FieldPredicate("description", "ci"), LimitPredicate(3))
        self.assertEqual(
            tree.to_dict(),
            {
                "type": "or",
                "children": [
                    {"type": "field", "field": "description", "match": "substring", "value": "ci"},
                    {"type": "limit", "limit": 3},
                ],
            },
        )


class TestLimit(unittest.TestCase):
    def test_limit_must_be_positive(self) -> None:
        with self.assertRaisesRegex(QueryParseError, "limit must be positive: 0"):
            LimitPredicate(0)

    def test_effective_limit_is_smallest(self) -> None:
        tree = and_(LimitPredicate(25), or_(FieldPredicate("name", "a"), LimitPredicate(7)))
        self.assertEqual(effective_limit(tree), 7)

    def test_effective_limit_absent(self) -> None:
        self.assertIsNone(effective_limit(FieldPredicate("name", "a")))


class TestSchemaVersions(unittest.TestCase):
    def test_member_and_subgroup_added_in_v4(self) -> None:
        self.assertFalse(get_schema(3).has_field(GroupField.MEMBER))
        self.assertFalse(get_schema(3).has_field(GroupField.SUBGROUP))
        self.assertTrue(get_schema(4).has_field(GroupField.MEMBER))
        self.assertTrue(get_schema(4).has_field(GroupField.SUBGROUP))

    def test_versions_only_add_fields(self) -> None:
        self.assertTrue(get_schema(2).fields <= get_schema(3).fields <= get_schema(4).fields)
        self.assertEqual(latest_schema().version, 5)

    def test_unknown_version(self) -> None:
        with self.assertRaisesRegex(ValueError, "schema version: 1"):
            get_schema(1)


if __name__ == "__main__":
    unittest.main()
