# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterable
from itertools import count
from threading import Lock

from library_backend.domain.books.entities import Book, NewBook
from library_backend.domain.books.repositories import BookRepository


class InMemoryBookRepository(BookRepository):
    """Ordered in-process catalogue; every mutation runs under one lock."""

    def __init__(self, seed: Iterable[NewBook] = ()) -> None:
        self._books: dict[int, Book] = {}
        self._ids = count(1)
        self._lock = Lock()
        for draft in seed:
            self.add(draft)

    def search(
        self,
        *,
        title: str | None = None,
        author: str | None = None,
        category: str | None = None,
    ) -> list[Book]:
        with self._lock:
            books = list(self._books.values())
        return [
            book
            for book in books
            if book.matches(title=title, author=author, category=category)
        ]

    def get(self, book_id: int) -> Book | None:
        with self._lock:
            return self._books.get(book_id)

    def add(self, book: NewBook) -> Book:
        with self._lock:
            stored = Book(
                id=next(self._ids),
                title=book.title,
                author=book.author,
                category=book.category,
                cover=book.cover,
            )
            self._books[stored.id] = stored
            return stored

    def update(self, book_id: int, change: Callable[[Book], Book | None]) -> Book | None:
        """Apply change atomically; None from either lookup or change leaves state as is."""

        with self._lock:
            current = self._books.get(book_id)
            if current is None:
                return None
            updated = change(current)
            if updated is None:
                return None
            self._books[book_id] = updated
            return updated

    def count(self) -> int:
        with self._lock:
            return len(self._books)
