"""Account reference resolution."""

from __future__ import annotations

import re
from typing import Iterable, Protocol

from GroupQuery.core.models import Account
from GroupQuery.directory.store import DirectoryStore
from GroupQuery.utils.log import log

_RE_ACCOUNT_ID = re.compile(r"^[1-9][0-9]*$")
_RE_NAME_WITH_EMAIL = re.compile(r"^.*<([^<>\s]+@[^<>\s]+)>$")


class AccountLookup(Protocol):
    """Protocol for resolving a free-text account reference."""

    def find_all(self, name_or_email: str) -> set[int]:
        """Return ids of all active accounts matching the reference."""
        raise NotImplementedError


class AccountResolver:
    """Resolve account ids, emails, usernames, and full names against a directory.

    Resolution stops at the first rule that applies:

    1. a positive integer is an account id;
    2. ``Full Name <email>`` is resolved by the bracketed email;
    3. anything containing ``@`` is an email;
    4. an exact username match;
    5. a full-name match, which may be ambiguous and return several ids.

    Inactive accounts never match.
    """

    def __init__(self, store: DirectoryStore) -> None:
        self.store = store

    def find_all(self, name_or_email: str) -> set[int]:
        reference = (name_or_email or "").strip()
        if not reference:
            return set()

        active = [account for account in self.store.accounts() if account.active]

        if _RE_ACCOUNT_ID.match(reference):
            account_id = int(reference)
            return {account.id for account in active if account.id == account_id}

        match = _RE_NAME_WITH_EMAIL.match(reference)
        if match:
            return _by_email(active, match.group(1))

        if "@" in reference:
            return _by_email(active, reference)

        key = reference.casefold()
        by_username = {account.id for account in active if (account.username or "").casefold() == key}
        if by_username:
            log.debug("Account %r resolved by username: %s", reference, sorted(by_username))
            return by_username

        found = _by_full_name(active, key)
        log.debug("Account %r resolved by full name: %s", reference, sorted(found))
        return found


def _by_email(accounts: Iterable[Account], email: str) -> set[int]:
    key = email.casefold()
    return {account.id for account in accounts if (account.email or "").casefold() == key}


def _by_full_name(accounts: list[Account], key: str) -> set[int]:
    exact = {account.id for account in accounts if (account.full_name or "").casefold() == key}
    if exact:
        return exact
    return {
        account.id
        for account in accounts
        if any(word.startswith(key) for word in (account.full_name or "").casefold().split())
    }
