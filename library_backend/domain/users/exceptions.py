# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from library_backend.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "User already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    message = "Invalid credentials"


class MissingTokenError(DomainError):
    code = "no_token"
    status = HTTPStatus.UNAUTHORIZED
    message = "Access Denied: No token provided"


class MalformedAuthHeaderError(DomainError):
    code = "malformed_auth_header"
    status = HTTPStatus.UNAUTHORIZED
    message = "Access Denied: Token format invalid"


class InvalidTokenError(DomainError):
    code = "invalid_token"
    message = "Invalid Token"


class TokenExpiredError(DomainError):
    code = "token_expired"
    message = "Token expired"
