# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from library_backend.domain.books.entities import Book
from library_backend.domain.books.exceptions import BookAlreadyIssuedError
from library_backend.domain.books.repositories import BookRepository


class IssueBookUseCase:
    def __init__(self, *, books: BookRepository) -> None:
        self._books = books

    def execute(self, book_id: int) -> Book:
        book = self._books.update(book_id, lambda current: current.issue())
        if book is None:
            raise BookAlreadyIssuedError(book_id)
        return book
