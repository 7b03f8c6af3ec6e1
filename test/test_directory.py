"""Tests for the YAML directory and the reference resolvers."""

from __future__ import annotations

import sys
import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from GroupQuery.core.models import Account, Group, GroupReference
from GroupQuery.directory import (
    AccountResolver,
    DirectoryStore,
    DirectoryUnavailableError,
    GroupBackend,
    GroupCache,
    find_best_suggestion,
)

_ACCOUNTS = (
    Account(id=1000, username="admin", full_name="Administrator", email="admin@example.com"),
    Account(id=1001, username="alice", full_name="Alice Example", email="alice@example.com"),
    Account(id=1002, username="bob", full_name="Bob Builder", email="Bob@Example.com"),
    Account(id=1003, username="abuilder", full_name="Alice Builder", email="alice.builder@example.com"),
    Account(id=1004, username="carol", full_name="Carol Retired", email="carol@example.com", active=False),
)

_GROUPS = (
    Group(uuid="admins-uuid", name="Administrators"),
    Group(uuid="dev-team-uuid", name="Dev"),
    Group(uuid="dev-uuid", name="Developers"),
    Group(uuid="devops-uuid", name="DevOps"),
    Group(uuid="rm-uuid", name="Release Managers"),
)


class TestAccountResolver(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = AccountResolver(DirectoryStore.from_data(_ACCOUNTS, _GROUPS))

    def test_account_id(self) -> None:
        self.assertEqual(self.resolver.find_all("1002"), {1002})
        self.assertEqual(self.resolver.find_all("9999"), set())

    def test_email_is_case_insensitive(self) -> None:
        self.assertEqual(self.resolver.find_all("bob@example.com"), {1002})

    def test_name_with_email(self) -> None:
        self.assertEqual(self.resolver.find_all("Someone Else <alice@example.com>"), {1001})

    def test_username_wins_over_full_name(self) -> None:
        self.assertEqual(self.resolver.find_all("alice"), {1001})

    def test_full_name_may_be_ambiguous(self) -> None:
        self.assertEqual(self.resolver.find_all("builder"), {1002, 1003})

    def test_exact_full_name(self) -> None:
        self.assertEqual(self.resolver.find_all("Alice Builder"), {1003})

    def test_inactive_accounts_never_match(self) -> None:
        self.assertEqual(self.resolver.find_all("carol"), set())
        self.assertEqual(self.resolver.find_all("1004"), set())

    def test_blank_reference(self) -> None:
        self.assertEqual(self.resolver.find_all("  "), set())


class TestGroupLookup(unittest.TestCase):
    def setUp(self) -> None:
        store = DirectoryStore.from_data(_ACCOUNTS, _GROUPS)
        self.cache = GroupCache(store)
        self.backend = GroupBackend(store)

    def test_cache_by_uuid(self) -> None:
        self.assertEqual(self.cache.get("dev-uuid").name, "Developers")
        self.assertIsNone(self.cache.get("Developers"))

    def test_cache_index_is_built_once_across_threads(self) -> None:
        store = DirectoryStore.from_data(_ACCOUNTS, _GROUPS)
        cache = GroupCache(store)
        with patch.object(store, "groups", wraps=store.groups) as groups:
            threads = [threading.Thread(target=cache.get, args=("dev-uuid",)) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
            self.assertEqual(cache.get("rm-uuid").name, "Release Managers")
        self.assertEqual(groups.call_count, 1)

    def test_suggest_by_prefix(self) -> None:
        names = [ref.name for ref in self.backend.suggest("dev")]
        self.assertEqual(names, ["Dev", "Developers", "DevOps"])

    def test_single_suggestion_wins(self) -> None:
        self.assertEqual(find_best_suggestion(self.backend, "rel"), GroupReference("rm-uuid", "Release Managers"))

    def test_exact_name_among_several(self) -> None:
        self.assertEqual(find_best_suggestion(self.backend, "DEV").uuid, "dev-team-uuid")

    def test_ambiguous_prefix_has_no_best_suggestion(self) -> None:
        self.assertIsNone(find_best_suggestion(self.backend, "de"))

    def test_unknown_name(self) -> None:
        self.assertIsNone(find_best_suggestion(self.backend, "nothing"))


class TestDirectoryStore(unittest.TestCase):
    def test_loads_sample_directory(self) -> None:
        store = DirectoryStore(REPO_ROOT / "config" / "directory.yml")
        self.assertTrue(any(account.username == "alice" for account in store.accounts()))
        self.assertIn("Developers", {group.name for group in store.groups()})

    def test_missing_file_is_unavailable(self) -> None:
        store = DirectoryStore(REPO_ROOT / "does-not-exist.yml")
        with self.assertRaises(DirectoryUnavailableError):
            store.accounts()

    def test_invalid_data_is_unavailable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "directory.yml"
            path.write_text("accounts:\n  - id: 1\n  - id: 1\n", encoding="utf-8")
            with self.assertRaisesRegex(DirectoryUnavailableError, "accounts\\.id"):
                DirectoryStore(path).groups()

    def test_malformed_yaml_is_unavailable(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "directory.yml"
            path.write_text("accounts: [\n", encoding="utf-8")
            with self.assertRaises(DirectoryUnavailableError):
                DirectoryStore(path).accounts()


if __name__ == "__main__":
    unittest.main()
