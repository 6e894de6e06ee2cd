# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from library_backend.shared.errors.base import DomainError


class BookNotFoundError(DomainError):
    code = "book_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "Book not found"

    def __init__(self, book_id: int) -> None:
        super().__init__(context={"book_id": book_id})


class BookAlreadyIssuedError(DomainError):
    code = "book_unavailable"
    message = "Book already issued or not found"

    def __init__(self, book_id: int) -> None:
        super().__init__(context={"book_id": book_id})


class BookNotIssuedError(DomainError):
    code = "book_not_issued"
    message = "Book not issued"

    def __init__(self, book_id: int) -> None:
        super().__init__(context={"book_id": book_id})
