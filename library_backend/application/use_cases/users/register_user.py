# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from library_backend.domain.users.entities import Account
from library_backend.domain.users.exceptions import UserAlreadyExistsError
from library_backend.domain.users.repositories import AccountRepository, AsyncPasswordHasher
from library_backend.shared.errors import InfrastructureError, ValidationError
from library_backend.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        password_hasher: AsyncPasswordHasher,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str) -> Account:
        if not username or not password:
            raise ValidationError("Username and password are required")

        # The repository re-checks under its lock.
        if self._accounts.find_by_username(username) is not None:
            raise UserAlreadyExistsError()

        try:
            hashed = self._password_hasher.hash(password).result()
        except Exception as exc:
            logger.exception(f"register: password hashing failed for username={username}")
            raise InfrastructureError(
                "password_hashing_failed", message="Server error during registration"
            ) from exc

        return self._accounts.add(username, hashed)
