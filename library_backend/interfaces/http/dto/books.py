from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError


class BookQueryDTO(BaseModel):
    title: str | None = None
    author: str | None = None
    category: str | None = None

    @field_validator("title", "author", "category", mode="after")
    @classmethod
    def _blank_is_absent(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class AddBookRequestDTO(BaseModel):
    title: str = Field(min_length=1, max_length=256)
    author: str = Field(min_length=1, max_length=256)
    category: str = Field(min_length=1, max_length=64)
    cover: str = Field(min_length=1, max_length=2048)
    notification_email: EmailStr | None = Field(None, alias="notificationEmail")

    model_config = ConfigDict(validate_by_name=True)

    @field_validator("notification_email", mode="before")
    @classmethod
    def _blank_email_is_absent(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value


class ReviewRequestDTO(BaseModel):
    # Any "user" field in the body is ignored; the author comes from the token.
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=2000)

    @field_validator("comment", mode="after")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("comment_blank", "Comment must not be blank")
        return value
