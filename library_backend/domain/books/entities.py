# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Book catalogue entities and the rules they enforce."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from library_backend.domain.exceptions import InvariantViolation

MIN_RATING = 1
MAX_RATING = 5


@dataclass(slots=True, frozen=True)
class Review:
    """A rating left by an authenticated reader."""

    user: str
    rating: int
    comment: str

    def __post_init__(self) -> None:
        if not self.user:
            raise InvariantViolation("review author is required", field="user")
        if not MIN_RATING <= self.rating <= MAX_RATING:
            raise InvariantViolation(
                f"rating must be between {MIN_RATING} and {MAX_RATING}", field="rating"
            )
        if not self.comment.strip():
            raise InvariantViolation("comment must not be empty", field="comment")

    def to_dict(self) -> dict[str, Any]:
        return {"user": self.user, "rating": self.rating, "comment": self.comment}


@dataclass(slots=True, frozen=True)
class NewBook:
    title: str
    author: str
    category: str
    cover: str

    def __post_init__(self) -> None:
        for fld in ("title", "author", "category", "cover"):
            if not getattr(self, fld).strip():
                raise InvariantViolation("must not be empty", field=fld)


@dataclass(slots=True, frozen=True)
class Book:
    id: int
    title: str
    author: str
    category: str
    cover: str
    issued: bool = False
    reviews: tuple[Review, ...] = field(default_factory=tuple)

    def issue(self) -> Book | None:
        """Return the issued copy, or None when the book is already out."""

        if self.issued:
            return None
        return replace(self, issued=True)

    def give_back(self) -> Book | None:
        """Return the shelved copy, or None when the book was never issued."""

        if not self.issued:
            return None
        return replace(self, issued=False)

    def with_review(self, review: Review) -> Book:
        return replace(self, reviews=(*self.reviews, review))

    def matches(
        self,
        *,
        title: str | None = None,
        author: str | None = None,
        category: str | None = None,
    ) -> bool:
        if title and title.lower() not in self.title.lower():
            return False
        if author and author.lower() not in self.author.lower():
            return False
        if category and category.lower() != self.category.lower():
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "category": self.category,
            "issued": self.issued,
            "cover": self.cover,
            "reviews": [review.to_dict() for review in self.reviews],
        }
