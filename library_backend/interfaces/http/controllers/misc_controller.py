# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify

from library_backend.domain.books.repositories import BookRepository
from library_backend.domain.users.repositories import AccountRepository


class MiscController:
    def __init__(self, *, accounts: AccountRepository, books: BookRepository) -> None:
        self._accounts = accounts
        self._books = books

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        return jsonify(
            {
                "ok": True,
                "accounts": self._accounts.count(),
                "books": self._books.count(),
            }
        )
