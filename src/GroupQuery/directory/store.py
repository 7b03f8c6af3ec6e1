"""YAML-backed account and group directory."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Mapping

import yaml

from GroupQuery.config.common import (
    expect_bool,
    expect_int,
    expect_optional_str,
    expect_str,
    get_optional_value,
    get_required_value,
)
from GroupQuery.core.models import Account, Group
from GroupQuery.utils.log import log


class DirectoryUnavailableError(RuntimeError):
    """Raised when the directory cannot be read or holds invalid data."""


class DirectoryStore:
    """Accounts and groups loaded from a YAML file.

    The file is read lazily on first access and then kept in memory. All
    readers share the loaded snapshot; nothing writes to it afterwards.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Path to the directory YAML file.
        """
        self.path = path
        self._lock = threading.Lock()
        self._accounts: tuple[Account, ...] | None = None
        self._groups: tuple[Group, ...] | None = None

    @classmethod
    def from_data(cls, accounts: tuple[Account, ...], groups: tuple[Group, ...]) -> DirectoryStore:
        """Build an already-loaded store from in-memory records."""
        store = cls(Path("<memory>"))
        store._accounts = tuple(accounts)
        store._groups = tuple(groups)
        return store

    def accounts(self) -> tuple[Account, ...]:
        self._ensure_loaded()
        assert self._accounts is not None
        return self._accounts

    def groups(self) -> tuple[Group, ...]:
        self._ensure_loaded()
        assert self._groups is not None
        return self._groups

    def _ensure_loaded(self) -> None:
        if self._accounts is not None:
            return
        with self._lock:
            if self._accounts is not None:
                return
            accounts, groups = self._load()
            self._groups = groups
            self._accounts = accounts

    def _load(self) -> tuple[tuple[Account, ...], tuple[Group, ...]]:
        log.debug("Loading directory from %s", self.path)
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except OSError as error:
            raise DirectoryUnavailableError(f"Cannot read directory {self.path}: {error}") from error
        except yaml.YAMLError as error:
            raise DirectoryUnavailableError(f"Cannot parse directory {self.path}: {error}") from error

        try:
            accounts, groups = parse_directory(raw)
        except (TypeError, ValueError) as error:
            raise DirectoryUnavailableError(f"Invalid directory {self.path}: {error}") from error

        log.debug("Directory loaded: accounts=%d groups=%d", len(accounts), len(groups))
        return accounts, groups


def parse_directory(raw: Any) -> tuple[tuple[Account, ...], tuple[Group, ...]]:
    """Parse a raw directory mapping into account and group records.

    Raises:
        TypeError: If the shape or value types are invalid.
        ValueError: If required keys are missing or ids are duplicated.
    """
    if not isinstance(raw, Mapping):
        raise TypeError("directory root must be an object")

    accounts = tuple(
        _parse_account(item, f"accounts[{idx}]") for idx, item in enumerate(_as_list(raw, "accounts"))
    )
    groups = tuple(_parse_group(item, f"groups[{idx}]") for idx, item in enumerate(_as_list(raw, "groups")))

    _check_unique([account.id for account in accounts], "accounts.id")
    _check_unique([group.uuid for group in groups], "groups.uuid")
    _check_unique([group.name.casefold() for group in groups], "groups.name")
    return accounts, groups


def _as_list(raw: Mapping[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{key} must be a list")
    return value


def _parse_account(value: Any, key: str) -> Account:
    if not isinstance(value, Mapping):
        raise TypeError(f"{key} must be an object")
    account_id = expect_int(get_required_value(value, "id", f"{key}.id"), f"{key}.id")
    if account_id <= 0:
        raise ValueError(f"{key}.id must be positive")
    return Account(
        id=account_id,
        username=expect_optional_str(get_optional_value(value, "username", None), f"{key}.username"),
        full_name=expect_optional_str(get_optional_value(value, "full_name", None), f"{key}.full_name"),
        email=expect_optional_str(get_optional_value(value, "email", None), f"{key}.email"),
        active=expect_bool(get_optional_value(value, "active", True), f"{key}.active"),
    )


def _parse_group(value: Any, key: str) -> Group:
    if not isinstance(value, Mapping):
        raise TypeError(f"{key} must be an object")
    members = get_optional_value(value, "members", [])
    subgroups = get_optional_value(value, "subgroups", [])
    if not isinstance(members, list):
        raise TypeError(f"{key}.members must be a list")
    if not isinstance(subgroups, list):
        raise TypeError(f"{key}.subgroups must be a list")
    return Group(
        uuid=expect_str(get_required_value(value, "uuid", f"{key}.uuid"), f"{key}.uuid"),
        name=expect_str(get_required_value(value, "name", f"{key}.name"), f"{key}.name"),
        description=expect_optional_str(get_optional_value(value, "description", None), f"{key}.description"),
        owner_uuid=expect_optional_str(get_optional_value(value, "owner_uuid", None), f"{key}.owner_uuid"),
        visible_to_all=expect_bool(get_optional_value(value, "visible_to_all", False), f"{key}.visible_to_all"),
        members=tuple(expect_int(item, f"{key}.members[{idx}]") for idx, item in enumerate(members)),
        subgroups=tuple(expect_str(item, f"{key}.subgroups[{idx}]") for idx, item in enumerate(subgroups)),
    )


def _check_unique(values: list[Any], key: str) -> None:
    seen: set[Any] = set()
    for value in values:
        if value in seen:
            raise ValueError(f"{key} has duplicate value: {value}")
        seen.add(value)
