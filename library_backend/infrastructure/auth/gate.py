# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import wraps
from typing import cast

from flask import current_app, g, request

from library_backend.domain.users.entities import AuthContext
from library_backend.domain.users.exceptions import MalformedAuthHeaderError, MissingTokenError
from library_backend.domain.users.repositories import TokenService
from library_backend.infrastructure.observability import TOKEN_REJECTIONS
from library_backend.shared.logging import logger

TOKEN_SERVICE_KEY = "library_backend.token_service"
_BEARER_PREFIX = "Bearer "


def install_token_service(app, tokens: TokenService) -> None:
    app.extensions[TOKEN_SERVICE_KEY] = tokens


def _token_service() -> TokenService:
    return cast(TokenService, current_app.extensions[TOKEN_SERVICE_KEY])


def extract_bearer_token(header: str | None) -> str:
    """Return the token from an Authorization header value.

    Raises MissingTokenError when the header is absent and
    MalformedAuthHeaderError when it is not Bearer <token>.
    """

    if not header:
        raise MissingTokenError()
    if not header.startswith(_BEARER_PREFIX):
        raise MalformedAuthHeaderError()
    token = header[len(_BEARER_PREFIX):].strip()
    if not token or " " in token:
        raise MalformedAuthHeaderError()
    return token


def current_auth() -> AuthContext:
    """Return the identity attached by auth_required for this request."""

    return cast(AuthContext, g.auth)


def auth_required(f):
    @wraps(f)
    def inner(*a, **kw):
        try:
            token = extract_bearer_token(request.headers.get("Authorization"))
            context = _token_service().verify(token)
        except Exception as exc:
            TOKEN_REJECTIONS.labels(reason=getattr(exc, "code", type(exc).__name__)).inc()
            logger.warning(
                f"Auth rejected ({type(exc).__name__}) on {request.method} {request.path} "
                f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
            )
            raise

        g.auth = context
        g.user_id = context.account_id
        logger.debug(f"Auth OK: account={context.account_id} {request.method} {request.path}")
        return f(*a, **kw)

    return inner
