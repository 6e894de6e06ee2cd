# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime
from itertools import count
from threading import Lock

from library_backend.domain.users.entities import Account
from library_backend.domain.users.exceptions import UserAlreadyExistsError
from library_backend.domain.users.repositories import AccountRepository


class InMemoryAccountRepository(AccountRepository):
    """Process-local account store.

    Ids come from a monotonic counter and are never reused. add checks
    uniqueness and inserts under one lock, so concurrent registrations of the
    same username cannot both succeed.
    """

    def __init__(self) -> None:
        self._by_username: dict[str, Account] = {}
        self._by_id: dict[int, Account] = {}
        self._ids = count(1)
        self._lock = Lock()

    def find_by_username(self, username: str) -> Account | None:
        with self._lock:
            return self._by_username.get(username)

    def add(self, username: str, password_hash: str) -> Account:
        with self._lock:
            if username in self._by_username:
                raise UserAlreadyExistsError()
            account = Account(
                id=next(self._ids),
                username=username,
                password_hash=password_hash,
                created_at=datetime.now(UTC),
            )
            self._by_username[username] = account
            self._by_id[account.id] = account
            return account

    def count(self) -> int:
        with self._lock:
            return len(self._by_id)
