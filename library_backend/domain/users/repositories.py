# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from concurrent.futures import Future
from typing import Protocol

from .entities import Account, AuthContext, IssuedToken


class AccountRepository(Protocol):
    def find_by_username(self, username: str) -> Account | None: ...
    def add(self, username: str, password_hash: str) -> Account: ...
    def count(self) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class AsyncPasswordHasher(Protocol):
    def hash(self, password: str) -> Future[str]: ...
    def verify(self, password: str, hashed: str) -> Future[bool]: ...


class TokenService(Protocol):
    def issue(self, account: Account) -> IssuedToken: ...
    def verify(self, token: str) -> AuthContext: ...
