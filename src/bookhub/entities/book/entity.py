"""Entity: Book."""

from datetime import date
from enum import StrEnum
from typing import Annotated, Any

from pydantic import ConfigDict, Field, StringConstraints, field_validator, model_validator

from src.bookhub.core.models import ApiModel
from src.bookhub.entities._base import Entity

DEFAULT_COVER_IMAGE = "https://via.placeholder.com/200x300?text=No+Cover"


class Genre(StrEnum):
    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    SCIENCE_FICTION = "Science Fiction"
    FANTASY = "Fantasy"
    THRILLER = "Thriller"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    SELF_HELP = "Self-Help"
    BUSINESS = "Business"
    TECHNOLOGY = "Technology"
    COOKING = "Cooking"
    TRAVEL = "Travel"
    POETRY = "Poetry"


Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Author = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Description = Annotated[str, StringConstraints(min_length=1, max_length=1000)]
Isbn = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=32)]
TrimmedText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Rating = Annotated[float, Field(ge=0, le=5)]
Price = Annotated[float, Field(ge=0)]
Pages = Annotated[int, Field(ge=1)]


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    """Trim tags, drop empty ones and duplicates while keeping first-seen order."""
    if tags is None:
        return None
    cleaned: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class BookFields(ApiModel):
    """Catalog attributes shared by stored books and create payloads."""

    model_config = ConfigDict(use_enum_values=True)

    title: Title
    author: Author
    description: Description
    genre: Genre
    publication_date: date
    isbn: Isbn
    cover_image: str = DEFAULT_COVER_IMAGE
    rating: Rating = 0
    price: Price
    pages: Pages
    language: TrimmedText = "English"
    publisher: TrimmedText
    in_stock: bool = True
    featured: bool = False
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value) or []


class BookCreate(BookFields):
    """Payload for creating a book."""


class Book(Entity, BookFields):
    """Book entity representing a catalog title.

    Favorites, wishlists and reviews reference books by ``id``; nothing is
    owned by a book, so deleting one leaves those references dangling.
    """

    def __eq__(self, other: Any) -> bool:
        """Compare books by identity and ISBN, ignoring timestamps."""
        if not isinstance(other, Book):
            return False
        return self.id == other.id and self.isbn == other.isbn

    def __hash__(self) -> int:
        return hash((self.id, self.isbn))


class BookUpdate(ApiModel):
    """Partial update payload; only the fields a client sends are applied."""

    model_config = ConfigDict(use_enum_values=True)

    title: Title | None = None
    author: Author | None = None
    description: Description | None = None
    genre: Genre | None = None
    publication_date: date | None = None
    isbn: Isbn | None = None
    cover_image: str | None = None
    rating: Rating | None = None
    price: Price | None = None
    pages: Pages | None = None
    language: TrimmedText | None = None
    publisher: TrimmedText | None = None
    in_stock: bool | None = None
    featured: bool | None = None
    tags: list[str] | None = None

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return _clean_tags(value)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "BookUpdate":
        nulled = sorted(
            name for name in self.model_fields_set if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Return the fields the client actually supplied."""
        return self.model_dump(exclude_unset=True)
