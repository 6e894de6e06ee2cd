"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from library_backend.application.services.password_hashing import (
    ThreadPoolPasswordHasher,
    WerkzeugPasswordHasher,
)
from library_backend.application.use_cases.books.add_book import AddBookUseCase
from library_backend.application.use_cases.books.issue_book import IssueBookUseCase
from library_backend.application.use_cases.books.list_books import ListBooksUseCase
from library_backend.application.use_cases.books.return_book import ReturnBookUseCase
from library_backend.application.use_cases.books.reviews import (
    AddReviewUseCase,
    ListReviewsUseCase,
)
from library_backend.application.use_cases.users.login_user import LoginUserUseCase
from library_backend.application.use_cases.users.register_user import RegisterUserUseCase
from library_backend.domain.books.repositories import BookNotifier
from library_backend.infrastructure.auth import JwtTokenService
from library_backend.infrastructure.notifications import build_book_notifier
from library_backend.infrastructure.repositories.books.memory_book_repository import (
    InMemoryBookRepository,
)
from library_backend.infrastructure.repositories.users.memory_account_repository import (
    InMemoryAccountRepository,
)
from library_backend.infrastructure.seed import DEFAULT_BOOKS
from library_backend.interfaces.http.controllers.auth_controller import AuthController
from library_backend.interfaces.http.controllers.books_controller import BooksController
from library_backend.interfaces.http.controllers.misc_controller import MiscController
from library_backend.shared.config import AppConfig


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @cached_property
    def password_hasher(self) -> ThreadPoolPasswordHasher:
        return ThreadPoolPasswordHasher(
            WerkzeugPasswordHasher(method=self.config.auth.password_hash_method),
            max_workers=self.config.auth.hash_workers,
        )

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(
            self.config.jwt_secret_value(),
            algorithm=self.config.auth.jwt_algorithm,
        )

    @cached_property
    def account_repository(self) -> InMemoryAccountRepository:
        return InMemoryAccountRepository()

    @cached_property
    def book_repository(self) -> InMemoryBookRepository:
        return InMemoryBookRepository(seed=DEFAULT_BOOKS)

    @cached_property
    def book_notifier(self) -> BookNotifier:
        return build_book_notifier(self.config.mail)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            accounts=self.account_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            accounts=self.account_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
        )

    # Books

    @cached_property
    def books_controller(self) -> BooksController:
        books = self.book_repository
        return BooksController(
            list_books=ListBooksUseCase(books=books),
            add_book=AddBookUseCase(books=books, notifier=self.book_notifier),
            issue_book=IssueBookUseCase(books=books),
            return_book=ReturnBookUseCase(books=books),
            add_review=AddReviewUseCase(books=books),
            list_reviews=ListReviewsUseCase(books=books),
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(accounts=self.account_repository, books=self.book_repository)
