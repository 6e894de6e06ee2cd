# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless HS256 session tokens.

Tokens carry id, username, iat and exp. Nothing is stored
server side: a token is valid exactly while its signature checks out and
exp lies in the future, and there is no revocation.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from library_backend.domain.users.entities import Account, AuthContext, IssuedToken
from library_backend.domain.users.exceptions import InvalidTokenError, TokenExpiredError
from library_backend.domain.users.repositories import TokenService
from library_backend.shared.config.settings import TOKEN_TTL_SECONDS
from library_backend.shared.logging import logger

_REQUIRED_CLAIMS = ["id", "username", "iat", "exp"]


class MissingSigningSecretError(RuntimeError):
    pass


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    def __init__(
        self,
        secret: str | None,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(seconds=TOKEN_TTL_SECONDS),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise MissingSigningSecretError(
                "JWT_SECRET is not set; refusing to sign tokens with a built-in default"
            )
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, account: Account) -> IssuedToken:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload = {
            "id": account.id,
            "username": account.username,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        logger.debug(f"tokens.issue: account_id={account.id} exp={expires_at.isoformat()}")
        return IssuedToken(
            token=token,
            account_id=account.id,
            username=account.username,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def verify(self, token: str) -> AuthContext:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            logger.debug(f"tokens.verify: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        account_id = payload["id"]
        username = payload["username"]
        if isinstance(account_id, bool) or not isinstance(account_id, int):
            raise InvalidTokenError()
        if not isinstance(username, str) or not username:
            raise InvalidTokenError()
        return AuthContext(account_id=account_id, username=username)


__all__ = ["JwtTokenService", "MissingSigningSecretError"]
