# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from library_backend.domain.books.entities import Book
from library_backend.domain.books.repositories import BookRepository


class ListBooksUseCase:
    def __init__(self, *, books: BookRepository) -> None:
        self._books = books

    def execute(
        self,
        *,
        title: str | None = None,
        author: str | None = None,
        category: str | None = None,
    ) -> list[Book]:
        return self._books.search(title=title, author=author, category=category)
