# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus
from time import perf_counter

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from library_backend.application.use_cases.books.add_book import AddBookUseCase
from library_backend.application.use_cases.books.issue_book import IssueBookUseCase
from library_backend.application.use_cases.books.list_books import ListBooksUseCase
from library_backend.application.use_cases.books.return_book import ReturnBookUseCase
from library_backend.application.use_cases.books.reviews import (
    AddReviewUseCase,
    ListReviewsUseCase,
)
from library_backend.infrastructure.audit import AuditAction, audit_log
from library_backend.infrastructure.auth import auth_required, current_auth
from library_backend.interfaces.http.dto.books import (
    AddBookRequestDTO,
    BookQueryDTO,
    ReviewRequestDTO,
)
from library_backend.shared.errors.validation import raise_validation_error
from library_backend.shared.logging import logger


class BooksController:
    def __init__(
        self,
        *,
        list_books: ListBooksUseCase,
        add_book: AddBookUseCase,
        issue_book: IssueBookUseCase,
        return_book: ReturnBookUseCase,
        add_review: AddReviewUseCase,
        list_reviews: ListReviewsUseCase,
    ) -> None:
        self._list_books = list_books
        self._add_book = add_book
        self._issue_book = issue_book
        self._return_book = return_book
        self._add_review = add_review
        self._list_reviews = list_reviews

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("books", __name__)
        bp.add_url_rule("/books", view_func=self.list_books, methods=["GET"])
        bp.add_url_rule("/books", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/books/<int:book_id>/issue", view_func=self.issue, methods=["PUT"])
        bp.add_url_rule("/books/<int:book_id>/return", view_func=self.give_back, methods=["PUT"])
        bp.add_url_rule("/books/<int:book_id>/review", view_func=self.review, methods=["POST"])
        bp.add_url_rule("/books/<int:book_id>/reviews", view_func=self.reviews, methods=["GET"])
        return bp

    @auth_required
    def list_books(self):
        t0 = perf_counter()
        try:
            query = BookQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc, "Invalid search filters")
        items = self._list_books.execute(
            title=query.title, author=query.author, category=query.category
        )
        dt = (perf_counter() - t0) * 1000
        logger.info(
            f"books.list: ok (account_id={current_auth().account_id}, n={len(items)}, dt_ms={dt:.0f})"
        )
        return jsonify([book.to_dict() for book in items])

    @auth_required
    def create(self):
        try:
            dto = AddBookRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc, "Missing book fields")

        book = self._add_book.execute(
            title=dto.title,
            author=dto.author,
            category=dto.category,
            cover=dto.cover,
            notification_email=dto.notification_email,
        )
        audit_log(
            AuditAction.BOOK_ADDED,
            account_id=current_auth().account_id,
            details={"book_id": book.id, "title": book.title},
        )
        return jsonify({"message": "Book added", "book": book.to_dict()}), HTTPStatus.CREATED

    @auth_required
    def issue(self, book_id: int):
        book = self._issue_book.execute(book_id)
        audit_log(
            AuditAction.BOOK_ISSUED,
            account_id=current_auth().account_id,
            details={"book_id": book.id},
        )
        return jsonify({"message": "Book issued", "book": book.to_dict()})

    @auth_required
    def give_back(self, book_id: int):
        book = self._return_book.execute(book_id)
        audit_log(
            AuditAction.BOOK_RETURNED,
            account_id=current_auth().account_id,
            details={"book_id": book.id},
        )
        return jsonify({"message": "Book returned", "book": book.to_dict()})

    @auth_required
    def review(self, book_id: int):
        self._add_review.require_book(book_id)
        try:
            dto = ReviewRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc, "Missing review fields")

        auth = current_auth()
        reviews = self._add_review.execute(
            book_id, rating=dto.rating, comment=dto.comment, author=auth
        )
        audit_log(
            AuditAction.REVIEW_ADDED,
            account_id=auth.account_id,
            details={"book_id": book_id, "rating": dto.rating},
        )
        return jsonify({"message": "Review added", "reviews": [r.to_dict() for r in reviews]})

    @auth_required
    def reviews(self, book_id: int):
        reviews = self._list_reviews.execute(book_id)
        return jsonify([r.to_dict() for r in reviews])
