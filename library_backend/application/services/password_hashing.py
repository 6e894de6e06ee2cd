"""Password hashing strategies."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from werkzeug.security import check_password_hash, generate_password_hash

from library_backend.domain.users.repositories import PasswordHasher
from library_backend.shared.config.settings import PASSWORD_HASH_METHOD


class WerkzeugPasswordHasher(PasswordHasher):
    def __init__(self, method: str = PASSWORD_HASH_METHOD, salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        return str(generate_password_hash(password, method=self._method, salt_length=self._salt_length))

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bool(check_password_hash(hashed, password))
        except ValueError:
            # unknown or corrupt hash format
            return False


class ThreadPoolPasswordHasher:
    """Runs a blocking hasher on worker threads and hands back futures.

    hashlib's scrypt and pbkdf2 release the GIL, so request threads waiting
    on a future do not stall each other.
    """

    def __init__(self, hasher: PasswordHasher, *, max_workers: int = 4) -> None:
        self._hasher = hasher
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="password-hash"
        )

    def hash(self, password: str) -> Future[str]:
        return self._executor.submit(self._hasher.hash, password)

    def verify(self, password: str, hashed: str) -> Future[bool]:
        return self._executor.submit(self._hasher.verify, password, hashed)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
