# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import smtplib
import threading
from email.message import EmailMessage

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from library_backend.domain.books.entities import Book
from library_backend.domain.books.repositories import BookNotifier
from library_backend.shared.config import MailConfig
from library_backend.shared.logging import logger


def _render_new_book(book: Book) -> tuple[str, str]:
    subject = f"New book added: {book.title}"
    body = (
        "A new book was added to the library.\n\n"
        f"Title:    {book.title}\n"
        f"Author:   {book.author}\n"
        f"Category: {book.category}\n"
    )
    return subject, body


class LoggingBookNotifier(BookNotifier):
    """Used when no SMTP relay is configured."""

    def notify_new_book(self, email: str, book: Book) -> None:
        logger.warning(
            f"notify.new_book: email service not configured, skipping (book_id={book.id})"
        )


class SmtpBookNotifier(BookNotifier):
    """Sends new-book emails on a daemon thread; failures are only logged."""

    def __init__(self, config: MailConfig) -> None:
        if not config.smtp_host:
            raise ValueError("SmtpBookNotifier requires SMTP_HOST")
        self._config = config

    def notify_new_book(self, email: str, book: Book) -> None:
        subject, body = _render_new_book(book)
        message = EmailMessage()
        message["From"] = self._config.mail_from
        message["To"] = email
        message["Subject"] = subject
        message.set_content(body)

        threading.Thread(
            target=self._send,
            args=(message, book.id),
            name=f"notify-book-{book.id}",
            daemon=True,
        ).start()

    def _deliver(self, message: EmailMessage) -> None:
        cfg = self._config
        with smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=cfg.smtp_timeout) as server:
            if cfg.smtp_use_tls:
                server.starttls()
            if cfg.smtp_username and cfg.smtp_password:
                server.login(cfg.smtp_username, cfg.smtp_password.get_secret_value())
            server.send_message(message)

    def _send(self, message: EmailMessage, book_id: int) -> None:
        cfg = self._config
        retrying = Retrying(
            stop=stop_after_attempt(cfg.max_retries + 1),
            wait=wait_exponential(multiplier=cfg.backoff_base, max=cfg.backoff_cap),
            retry=retry_if_exception_type((smtplib.SMTPException, OSError)),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.debug(
                            f"notify.new_book: retry {attempt.retry_state.attempt_number} (book_id={book_id})"
                        )
                    self._deliver(message)
        except Exception:
            logger.exception(f"notify.new_book: delivery failed (book_id={book_id})")
            return
        logger.info(f"notify.new_book: sent (book_id={book_id})")


def build_book_notifier(config: MailConfig) -> BookNotifier:
    if config.enabled:
        return SmtpBookNotifier(config)
    return LoggingBookNotifier()


__all__ = ["LoggingBookNotifier", "SmtpBookNotifier", "build_book_notifier"]
