# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from library_backend.application.use_cases.users.register_user import RegisterUserUseCase
from library_backend.domain.books.entities import NewBook
from library_backend.domain.users.exceptions import UserAlreadyExistsError
from library_backend.shared.config import AuthConfig
from library_backend.shared.logging import logger

DEFAULT_BOOKS: tuple[NewBook, ...] = (
    NewBook(
        title="The Automobile Handbook 2024",
        author="Jack Gillis",
        category="Automobile",
        cover="https://placehold.co/300x200?text=Automobile+Handbook",
    ),
    NewBook(
        title="Understanding Automobiles",
        author="Tom Newton",
        category="Automobile",
        cover="https://placehold.co/300x200?text=Understanding+Automobiles",
    ),
    NewBook(
        title="The Complete Train Manual",
        author="Rail Works",
        category="Train",
        cover="https://placehold.co/300x200?text=Train+Manual",
    ),
    NewBook(
        title="Flight Basics for Beginners",
        author="Amelia Earhart",
        category="Flight",
        cover="https://placehold.co/300x200?text=Flight+Basics",
    ),
    NewBook(
        title="The Art of Flight",
        author="Leonardo da Vinci",
        category="Flight",
        cover="https://placehold.co/300x200?text=Art+of+Flight",
    ),
)


def ensure_default_account(register: RegisterUserUseCase, config: AuthConfig) -> None:
    """Create the configured default account unless it already exists."""

    try:
        account = register.execute(
            config.default_username, config.default_password.get_secret_value()
        )
    except UserAlreadyExistsError:
        logger.info(f"seed: default account '{config.default_username}' already present")
        return
    logger.info(f"seed: created default account '{account.username}' (id={account.id})")


__all__ = ["DEFAULT_BOOKS", "ensure_default_account"]
