# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Account:

    id: int
    username: str
    password_hash: str
    created_at: datetime

    def public(self) -> dict[str, object]:
        return {"id": self.id, "username": self.username}


@dataclass(slots=True, frozen=True)
class IssuedToken:

    token: str
    account_id: int
    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class AuthContext:
    """Identity resolved from a verified bearer token for one request."""

    account_id: int
    username: str
