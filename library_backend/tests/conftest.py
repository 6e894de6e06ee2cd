from __future__ import annotations

from collections.abc import Iterator
from functools import cached_property

import pytest
from flask import Flask
from flask.testing import FlaskClient

from library_backend.app import create_app
from library_backend.application.services.password_hashing import (
    ThreadPoolPasswordHasher,
    WerkzeugPasswordHasher,
)
from library_backend.container import Container
from library_backend.domain import Book
from library_backend.shared.config import AppConfig, AuthConfig, SecurityConfig

TEST_SECRET = "test-signing-secret-0123456789abcdef"


class RecordingNotifier:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[str, Book]] = []

    def notify_new_book(self, email: str, book: Book) -> None:
        if self.fail:
            raise RuntimeError("smtp relay down")
        self.sent.append((email, book))


class StubContainer(Container):
    """Container with a cheap salted hash and a recording notifier."""

    @cached_property
    def password_hasher(self) -> ThreadPoolPasswordHasher:
        return ThreadPoolPasswordHasher(
            WerkzeugPasswordHasher(method="pbkdf2:sha256:1000"),
            max_workers=2,
        )

    @cached_property
    def book_notifier(self) -> RecordingNotifier:
        return RecordingNotifier()


def make_config(**security: object) -> AppConfig:
    security.setdefault("enable_rate_limit", False)
    return AppConfig(
        auth=AuthConfig(jwt_secret=TEST_SECRET, default_password="admin123"),
        security=SecurityConfig(**security),
    )


@pytest.fixture(autouse=True)
def _no_log_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FILE", "")


@pytest.fixture()
def config() -> AppConfig:
    return make_config()


@pytest.fixture()
def container(config: AppConfig) -> Iterator[StubContainer]:
    container = StubContainer(config)
    yield container
    container.password_hasher.shutdown()


@pytest.fixture()
def app(container: StubContainer) -> Flask:
    app = create_app(container=container)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(app: Flask) -> Iterator[FlaskClient]:
    with app.test_client() as client:
        yield client


def login(client: FlaskClient, username: str, password: str) -> str:
    response = client.post("/api/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.get_json()
    return response.get_json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(client: FlaskClient) -> dict[str, str]:
    return bearer(login(client, "admin", "admin123"))
