# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from library_backend.domain.books.entities import Book, NewBook
from library_backend.domain.books.repositories import BookNotifier, BookRepository
from library_backend.domain.exceptions import InvariantViolation
from library_backend.shared.errors import ValidationError
from library_backend.shared.logging import logger


class AddBookUseCase:
    def __init__(self, *, books: BookRepository, notifier: BookNotifier) -> None:
        self._books = books
        self._notifier = notifier

    def execute(
        self,
        *,
        title: str,
        author: str,
        category: str,
        cover: str,
        notification_email: str | None = None,
    ) -> Book:
        try:
            draft = NewBook(title=title, author=author, category=category, cover=cover)
        except InvariantViolation as exc:
            raise ValidationError("Missing book fields", context={"field": exc.field}) from exc

        book = self._books.add(draft)

        if notification_email:
            try:
                self._notifier.notify_new_book(notification_email, book)
            except Exception:
                # the book stays stored either way
                logger.exception(f"books.add: notification dispatch failed (book_id={book.id})")
        else:
            logger.debug(f"books.add: no notification email for book_id={book.id}")

        return book
