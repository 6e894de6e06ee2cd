# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .books.entities import Book, NewBook, Review
from .exceptions import InvariantViolation
from .users.entities import Account, AuthContext, IssuedToken

__all__ = [
    "Account",
    "AuthContext",
    "Book",
    "InvariantViolation",
    "IssuedToken",
    "NewBook",
    "Review",
]
