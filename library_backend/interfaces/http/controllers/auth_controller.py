# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from library_backend.application.use_cases.users.login_user import LoginUserUseCase
from library_backend.application.use_cases.users.register_user import RegisterUserUseCase
from library_backend.domain.users.exceptions import InvalidCredentialsError
from library_backend.infrastructure.audit import AuditAction, audit_log
from library_backend.interfaces.http.dto.auth import (
    LoginRequestDTO,
    LoginSuccessDTO,
    PublicAccountDTO,
    RegisterRequestDTO,
    RegisterSuccessDTO,
)
from library_backend.shared.errors import AppError
from library_backend.shared.errors.validation import raise_validation_error
from library_backend.shared.logging import logger
from library_backend.shared.middleware.rate_limit import rate_limit

_REQUIRED_MESSAGE = "Username and password are required"


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case

    @rate_limit()
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc, _REQUIRED_MESSAGE)

        try:
            account = self._register_use_case.execute(dto.username, dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=_get_client_ip(),
                details={"username": dto.username, "error": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER,
            account_id=account.id,
            ip_address=_get_client_ip(),
            details={"username": account.username},
        )
        logger.info(f"auth.register: ok account_id={account.id}")
        return jsonify(RegisterSuccessDTO().model_dump()), HTTPStatus.CREATED

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc, _REQUIRED_MESSAGE)

        ip_address = _get_client_ip()

        try:
            account, issued = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            account_id=account.id,
            ip_address=ip_address,
            details={"username": account.username},
        )

        payload = LoginSuccessDTO(
            token=issued.token,
            user=PublicAccountDTO(id=account.id, username=account.username),
        )
        logger.info(
            f"auth.login: ok account_id={account.id} exp={issued.expires_at.isoformat()}"
        )
        return jsonify(payload.model_dump()), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        return bp
