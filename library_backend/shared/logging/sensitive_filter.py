# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

_REDACTED = "***REDACTED***"

# (pattern, replacement); applied in order, so specific forms come first.
_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    # Signing secret echoed from config dumps
    (re.compile(r"(jwt[_-]?secret\s*[:=]\s*['\"]?)([^'\"\s]{6,})", re.IGNORECASE), rf"\1{_REDACTED}"),
    # Authorization header values and bearer tokens
    (re.compile(r"(authorization\s*:\s*['\"]?)([^'\"\n]{10,})", re.IGNORECASE), rf"\1{_REDACTED}"),
    (re.compile(r"(bearer\s+)([\w\-.]{20,})", re.IGNORECASE), rf"\1{_REDACTED}"),
    (re.compile(r"(token\s*[:=]\s*['\"]?)([\w\-.]{20,})"), rf"\1{_REDACTED}"),
    # Bare compact JWS (header.payload.signature)
    (re.compile(r"\beyJ[\w\-]+\.[\w\-]+\.[\w\-]+"), "***JWT***"),
    # Plaintext passwords in key=value form
    (re.compile(r"((?:password|passwd|pwd)\s*[:=]\s*['\"]?)([^'\"]{6,})", re.IGNORECASE), rf"\1{_REDACTED}"),
    # werkzeug hash strings: method$salt$hexdigest
    (re.compile(r"\b(?:scrypt|pbkdf2):[^\s$]+\$[^\s$]+\$[0-9a-f]+"), "***HASH***"),
    # Notification addresses keep only their domain
    (re.compile(r"[\w.%+-]+@([\w-]+(?:\.[\w-]+)*\.[a-zA-Z]{2,})"), r"***@\1"),
)


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """loguru filter: scrub the message in place and always keep the record."""

    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True
