from __future__ import annotations

import threading
from concurrent.futures import Future
from http import HTTPStatus

import pytest

from library_backend.application.use_cases.users.login_user import LoginUserUseCase
from library_backend.application.use_cases.users.register_user import RegisterUserUseCase
from library_backend.domain.users.exceptions import (
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from library_backend.domain.users.repositories import PasswordHasher
from library_backend.infrastructure.auth import JwtTokenService
from library_backend.infrastructure.repositories.users.memory_account_repository import (
    InMemoryAccountRepository,
)
from library_backend.infrastructure.seed import ensure_default_account
from library_backend.shared.config import AuthConfig
from library_backend.shared.errors import InfrastructureError, ValidationError

SECRET = "use-case-secret-0123456789abcdefghij"


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.verified: list[tuple[str, str]] = []

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verified.append((password, hashed))
        return hashed == f"hashed:{password}"


class ImmediateHasher:
    """Runs the wrapped hasher inline and hands back completed futures."""

    def __init__(self, hasher: PasswordHasher) -> None:
        self._hasher = hasher

    def hash(self, password: str) -> Future[str]:
        return self._resolve(self._hasher.hash, password)

    def verify(self, password: str, hashed: str) -> Future[bool]:
        return self._resolve(self._hasher.verify, password, hashed)

    @staticmethod
    def _resolve(fn, *args) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args))
        except Exception as exc:
            future.set_exception(exc)
        return future


class BrokenHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        raise RuntimeError("hash backend unavailable")

    def verify(self, password: str, hashed: str) -> bool:
        raise RuntimeError("hash backend unavailable")


@pytest.fixture()
def accounts() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def register(accounts: InMemoryAccountRepository, hasher: DeterministicHasher) -> RegisterUserUseCase:
    return RegisterUserUseCase(accounts=accounts, password_hasher=ImmediateHasher(hasher))


@pytest.fixture()
def login(accounts: InMemoryAccountRepository, hasher: DeterministicHasher) -> LoginUserUseCase:
    return LoginUserUseCase(
        accounts=accounts,
        tokens=JwtTokenService(SECRET),
        password_hasher=ImmediateHasher(hasher),
    )


def test_register_user_success(
    register: RegisterUserUseCase, accounts: InMemoryAccountRepository
) -> None:
    account = register.execute("alice", "secret1")

    assert account.id == 1
    assert account.username == "alice"
    assert account.password_hash == "hashed:secret1"
    assert accounts.find_by_username("alice") == account


def test_register_user_duplicate_raises_and_keeps_one_account(
    register: RegisterUserUseCase, accounts: InMemoryAccountRepository
) -> None:
    register.execute("alice", "secret1")

    with pytest.raises(UserAlreadyExistsError) as excinfo:
        register.execute("alice", "other")

    assert excinfo.value.status == HTTPStatus.CONFLICT
    assert accounts.count() == 1
    assert accounts.find_by_username("alice").password_hash == "hashed:secret1"


def test_usernames_are_case_sensitive(
    register: RegisterUserUseCase, accounts: InMemoryAccountRepository
) -> None:
    register.execute("alice", "secret1")
    register.execute("Alice", "secret2")

    assert accounts.count() == 2


@pytest.mark.parametrize(("username", "password"), [("", "secret1"), ("alice", "")])
def test_register_requires_both_fields(
    register: RegisterUserUseCase,
    accounts: InMemoryAccountRepository,
    username: str,
    password: str,
) -> None:
    with pytest.raises(ValidationError):
        register.execute(username, password)

    assert accounts.count() == 0


def test_register_hashing_failure_is_infrastructure_error(
    accounts: InMemoryAccountRepository,
) -> None:
    use_case = RegisterUserUseCase(
        accounts=accounts, password_hasher=ImmediateHasher(BrokenHasher())
    )

    with pytest.raises(InfrastructureError) as excinfo:
        use_case.execute("alice", "secret1")

    assert excinfo.value.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert excinfo.value.code == "password_hashing_failed"
    assert "hash backend" not in (excinfo.value.message or "")
    assert accounts.count() == 0


def test_concurrent_registration_of_same_username_admits_one(
    register: RegisterUserUseCase, accounts: InMemoryAccountRepository
) -> None:
    barrier = threading.Barrier(8)
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()

    def attempt() -> None:
        barrier.wait()
        try:
            register.execute("alice", "secret1")
            result = "ok"
        except UserAlreadyExistsError:
            result = "duplicate"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("duplicate") == 7
    assert accounts.count() == 1


def test_login_user_success_token_round_trips(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    created = register.execute("alice", "secret1")

    account, issued = login.execute("alice", "secret1")
    context = JwtTokenService(SECRET).verify(issued.token)

    assert account == created
    assert context.account_id == created.id
    assert context.username == "alice"
    assert (issued.expires_at - issued.issued_at).total_seconds() == 3600


def test_login_wrong_password_and_unknown_user_look_identical(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute("alice", "secret1")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("alice", "wrong")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        login.execute("mallory", "secret1")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    assert wrong_password.value.status == unknown_user.value.status == HTTPStatus.BAD_REQUEST


def test_login_unknown_user_still_verifies_a_password(
    login: LoginUserUseCase, hasher: DeterministicHasher
) -> None:
    with pytest.raises(InvalidCredentialsError):
        login.execute("mallory", "secret1")

    assert len(hasher.verified) == 1
    assert hasher.verified[0][0] == "secret1"


def test_login_requires_both_fields(login: LoginUserUseCase) -> None:
    with pytest.raises(ValidationError):
        login.execute("alice", "")


def test_login_hashing_failure_is_infrastructure_error(
    accounts: InMemoryAccountRepository,
) -> None:
    accounts.add("alice", "hashed:secret1")
    use_case = LoginUserUseCase(
        accounts=accounts,
        tokens=JwtTokenService(SECRET),
        password_hasher=ImmediateHasher(BrokenHasher()),
    )

    with pytest.raises(InfrastructureError) as excinfo:
        use_case.execute("alice", "secret1")

    assert excinfo.value.status == HTTPStatus.INTERNAL_SERVER_ERROR


def test_default_account_seeding_is_idempotent(
    register: RegisterUserUseCase, accounts: InMemoryAccountRepository
) -> None:
    config = AuthConfig(default_username="admin", default_password="admin123")

    ensure_default_account(register, config)
    ensure_default_account(register, config)

    assert accounts.count() == 1
    assert accounts.find_by_username("admin").password_hash == "hashed:admin123"
