# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .gate import auth_required, current_auth, extract_bearer_token, install_token_service
from .tokens import JwtTokenService, MissingSigningSecretError

__all__ = [
    "JwtTokenService",
    "MissingSigningSecretError",
    "auth_required",
    "current_auth",
    "extract_bearer_token",
    "install_token_service",
]
