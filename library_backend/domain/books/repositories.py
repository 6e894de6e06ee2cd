# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from .entities import Book, NewBook


class BookRepository(Protocol):
    def search(
        self,
        *,
        title: str | None = None,
        author: str | None = None,
        category: str | None = None,
    ) -> list[Book]: ...
    def get(self, book_id: int) -> Book | None: ...
    def add(self, book: NewBook) -> Book: ...
    def update(self, book_id: int, change: Callable[[Book], Book | None]) -> Book | None: ...
    def count(self) -> int: ...


class BookNotifier(Protocol):
    def notify_new_book(self, email: str, book: Book) -> None: ...
