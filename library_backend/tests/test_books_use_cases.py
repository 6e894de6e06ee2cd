from __future__ import annotations

import threading
from http import HTTPStatus

import pytest

from library_backend.application.use_cases.books.add_book import AddBookUseCase
from library_backend.application.use_cases.books.issue_book import IssueBookUseCase
from library_backend.application.use_cases.books.list_books import ListBooksUseCase
from library_backend.application.use_cases.books.return_book import ReturnBookUseCase
from library_backend.application.use_cases.books.reviews import (
    AddReviewUseCase,
    ListReviewsUseCase,
)
from library_backend.domain.books.exceptions import (
    BookAlreadyIssuedError,
    BookNotFoundError,
    BookNotIssuedError,
)
from library_backend.domain.users.entities import AuthContext
from library_backend.infrastructure.repositories.books.memory_book_repository import (
    InMemoryBookRepository,
)
from library_backend.infrastructure.seed import DEFAULT_BOOKS
from library_backend.shared.errors import ValidationError

from .conftest import RecordingNotifier

ALICE = AuthContext(account_id=2, username="alice")


@pytest.fixture()
def books() -> InMemoryBookRepository:
    return InMemoryBookRepository(seed=DEFAULT_BOOKS)


def _titles(items) -> list[str]:
    return [book.title for book in items]


def test_seeded_catalogue_is_in_insertion_order(books: InMemoryBookRepository) -> None:
    items = ListBooksUseCase(books=books).execute()

    assert [book.id for book in items] == [1, 2, 3, 4, 5]
    assert all(not book.issued and book.reviews == () for book in items)


def test_title_filter_is_case_insensitive_substring(books: InMemoryBookRepository) -> None:
    items = ListBooksUseCase(books=books).execute(title="FLIGHT")

    assert _titles(items) == ["Flight Basics for Beginners", "The Art of Flight"]


def test_category_filter_is_exact_match(books: InMemoryBookRepository) -> None:
    use_case = ListBooksUseCase(books=books)

    assert len(use_case.execute(category="automobile")) == 2
    assert use_case.execute(category="Auto") == []


def test_filters_combine(books: InMemoryBookRepository) -> None:
    items = ListBooksUseCase(books=books).execute(title="the", category="Flight")

    assert _titles(items) == ["The Art of Flight"]


def test_add_book_starts_shelved_and_notifies(books: InMemoryBookRepository) -> None:
    notifier = RecordingNotifier()
    use_case = AddBookUseCase(books=books, notifier=notifier)

    book = use_case.execute(
        title="Rail Atlas",
        author="B. Smith",
        category="Train",
        cover="https://example.org/rail.png",
        notification_email="reader@example.org",
    )

    assert book.id == 6
    assert book.issued is False
    assert book.reviews == ()
    assert notifier.sent == [("reader@example.org", book)]


def test_add_book_without_email_skips_notification(books: InMemoryBookRepository) -> None:
    notifier = RecordingNotifier()

    AddBookUseCase(books=books, notifier=notifier).execute(
        title="Rail Atlas", author="B. Smith", category="Train", cover="c"
    )

    assert notifier.sent == []


def test_add_book_survives_notifier_failure(books: InMemoryBookRepository) -> None:
    use_case = AddBookUseCase(books=books, notifier=RecordingNotifier(fail=True))

    book = use_case.execute(
        title="Rail Atlas",
        author="B. Smith",
        category="Train",
        cover="c",
        notification_email="reader@example.org",
    )

    assert books.get(book.id) == book


def test_add_book_requires_all_fields(books: InMemoryBookRepository) -> None:
    use_case = AddBookUseCase(books=books, notifier=RecordingNotifier())

    with pytest.raises(ValidationError) as excinfo:
        use_case.execute(title="Rail Atlas", author=" ", category="Train", cover="c")

    assert excinfo.value.message == "Missing book fields"
    assert books.count() == 5


def test_issue_then_issue_again_fails(books: InMemoryBookRepository) -> None:
    use_case = IssueBookUseCase(books=books)

    assert use_case.execute(1).issued is True
    with pytest.raises(BookAlreadyIssuedError):
        use_case.execute(1)


def test_issue_missing_book_fails(books: InMemoryBookRepository) -> None:
    with pytest.raises(BookAlreadyIssuedError) as excinfo:
        IssueBookUseCase(books=books).execute(99)

    assert excinfo.value.status == HTTPStatus.BAD_REQUEST


def test_return_requires_issued_book(books: InMemoryBookRepository) -> None:
    use_case = ReturnBookUseCase(books=books)

    with pytest.raises(BookNotIssuedError):
        use_case.execute(2)

    IssueBookUseCase(books=books).execute(2)
    assert use_case.execute(2).issued is False


def test_concurrent_issue_succeeds_once(books: InMemoryBookRepository) -> None:
    use_case = IssueBookUseCase(books=books)
    barrier = threading.Barrier(6)
    results: list[bool] = []
    results_lock = threading.Lock()

    def attempt() -> None:
        barrier.wait()
        try:
            use_case.execute(3)
            ok = True
        except BookAlreadyIssuedError:
            ok = False
        with results_lock:
            results.append(ok)

    threads = [threading.Thread(target=attempt) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1


def test_review_author_comes_from_auth_context(books: InMemoryBookRepository) -> None:
    reviews = AddReviewUseCase(books=books).execute(1, rating=4, comment="Solid", author=ALICE)

    assert [r.to_dict() for r in reviews] == [{"user": "alice", "rating": 4, "comment": "Solid"}]
    assert ListReviewsUseCase(books=books).execute(1) == reviews


def test_reviews_accumulate_in_order(books: InMemoryBookRepository) -> None:
    use_case = AddReviewUseCase(books=books)
    use_case.execute(1, rating=4, comment="first", author=ALICE)

    reviews = use_case.execute(
        1, rating=2, comment="second", author=AuthContext(account_id=3, username="bob")
    )

    assert [(r.user, r.comment) for r in reviews] == [("alice", "first"), ("bob", "second")]


def test_review_missing_book_is_404(books: InMemoryBookRepository) -> None:
    with pytest.raises(BookNotFoundError) as excinfo:
        AddReviewUseCase(books=books).execute(42, rating=4, comment="x", author=ALICE)

    assert excinfo.value.status == HTTPStatus.NOT_FOUND


@pytest.mark.parametrize(("rating", "comment"), [(0, "ok"), (6, "ok"), (3, "   ")])
def test_review_rejects_bad_input(
    books: InMemoryBookRepository, rating: int, comment: str
) -> None:
    with pytest.raises(ValidationError):
        AddReviewUseCase(books=books).execute(1, rating=rating, comment=comment, author=ALICE)

    assert books.get(1).reviews == ()


def test_list_reviews_missing_book_is_404(books: InMemoryBookRepository) -> None:
    with pytest.raises(BookNotFoundError):
        ListReviewsUseCase(books=books).execute(42)
