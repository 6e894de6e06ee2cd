# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Review use cases.

The author of a review is always the authenticated identity; request
bodies never get a say in it.
"""

from __future__ import annotations

from library_backend.domain.books.entities import Book, Review
from library_backend.domain.books.exceptions import BookNotFoundError
from library_backend.domain.books.repositories import BookRepository
from library_backend.domain.exceptions import InvariantViolation
from library_backend.domain.users.entities import AuthContext
from library_backend.shared.errors import ValidationError


class AddReviewUseCase:
    def __init__(self, *, books: BookRepository) -> None:
        self._books = books

    def require_book(self, book_id: int) -> Book:
        """Raise BookNotFoundError before anything looks at the review body."""

        book = self._books.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def execute(
        self, book_id: int, *, rating: int, comment: str, author: AuthContext
    ) -> list[Review]:
        self.require_book(book_id)

        try:
            review = Review(user=author.username, rating=rating, comment=comment)
        except InvariantViolation as exc:
            raise ValidationError("Missing review fields", context={"field": exc.field}) from exc

        book = self._books.update(book_id, lambda current: current.with_review(review))
        if book is None:
            raise BookNotFoundError(book_id)
        return list(book.reviews)


class ListReviewsUseCase:
    def __init__(self, *, books: BookRepository) -> None:
        self._books = books

    def execute(self, book_id: int) -> list[Review]:
        book = self._books.get(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return list(book.reviews)
