# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from library_backend.domain.users.entities import Account, IssuedToken
from library_backend.domain.users.exceptions import InvalidCredentialsError
from library_backend.domain.users.repositories import (
    AccountRepository,
    AsyncPasswordHasher,
    TokenService,
)
from library_backend.shared.errors import InfrastructureError, ValidationError
from library_backend.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        tokens: TokenService,
        password_hasher: AsyncPasswordHasher,
    ) -> None:
        self._accounts = accounts
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._decoy_hash: str | None = None

    def execute(self, username: str, password: str) -> tuple[Account, IssuedToken]:
        if not username or not password:
            raise ValidationError("Username and password are required")

        account = self._accounts.find_by_username(username)
        try:
            # unknown usernames verify against a decoy hash
            hashed = account.password_hash if account else self._decoy()
            password_valid = self._password_hasher.verify(password, hashed).result()
        except Exception as exc:
            logger.exception("login: password verification failed")
            raise InfrastructureError(
                "password_hashing_failed", message="Server error during login"
            ) from exc

        if account is None or not password_valid:
            raise InvalidCredentialsError()

        return account, self._tokens.issue(account)

    def _decoy(self) -> str:
        if self._decoy_hash is None:
            self._decoy_hash = self._password_hasher.hash("decoy-password").result()
        return self._decoy_hash
