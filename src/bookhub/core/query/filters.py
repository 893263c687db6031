"""Translate listing and search parameters into SQL conditions and orderings.

Every optional criterion is an explicit, typed field; a ``None`` field adds
no condition. The produced expressions target ``BookTable`` and are handed
to ``BookRepository.find``/``count`` unchanged.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError
from pydantic.alias_generators import to_camel, to_snake
from sqlalchemy import ColumnElement, or_

from src.bookhub.core.errors import ValidationFailedError
from src.bookhub.entities.book.table import BookTable

SortOrder = Literal["asc", "desc"]

SORTABLE_FIELDS: dict[str, Any] = {
    "title": BookTable.title,
    "author": BookTable.author,
    "genre": BookTable.genre,
    "publication_date": BookTable.publication_date,
    "rating": BookTable.rating,
    "price": BookTable.price,
    "pages": BookTable.pages,
    "language": BookTable.language,
    "publisher": BookTable.publisher,
    "isbn": BookTable.isbn,
    "in_stock": BookTable.in_stock,
    "featured": BookTable.featured,
    "created_at": BookTable.created_at,
    "updated_at": BookTable.updated_at,
}


def contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally anywhere in a value."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def icontains(column: Any, text: str) -> ColumnElement[bool]:
    """Case-insensitive substring match."""
    return column.ilike(contains_pattern(text), escape="\\")


class BookFilter(BaseModel):
    """Optional criteria for the book listing; all present criteria must hold."""

    genre: str | None = None
    author: str | None = None
    min_rating: float | None = Field(default=None, allow_inf_nan=False)
    min_price: float | None = Field(default=None, allow_inf_nan=False)
    max_price: float | None = Field(default=None, allow_inf_nan=False)

    @classmethod
    def from_params(cls, **params: Any) -> "BookFilter":
        """Build a filter from request values, rejecting non-finite numbers."""
        try:
            return cls(**params)
        except ValidationError as e:
            raise ValidationFailedError(
                "Invalid filter parameters",
                errors=[
                    {"field": to_camel(str(err["loc"][0])), "message": err["msg"]}
                    for err in e.errors()
                ],
            ) from None

    def conditions(self) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if self.genre:
            conditions.append(BookTable.genre == self.genre)
        if self.author:
            conditions.append(icontains(BookTable.author, self.author))
        if self.min_rating is not None:
            conditions.append(BookTable.rating >= self.min_rating)
        if self.min_price is not None:
            conditions.append(BookTable.price >= self.min_price)
        if self.max_price is not None:
            conditions.append(BookTable.price <= self.max_price)
        return conditions


class SortSpec(BaseModel):
    """Ordering for the listing.

    ``sort_order == "desc"`` sorts descending and any other value sorts
    ascending. Without a field the newest books come first.
    """

    field: str | None = None
    sort_order: str | None = None

    @property
    def descending(self) -> bool:
        if self.field is None:
            return True
        return self.sort_order == "desc"

    def column(self) -> Any:
        if self.field is None:
            return BookTable.created_at
        key = to_snake(self.field)
        if key not in SORTABLE_FIELDS:
            raise ValidationFailedError(
                f"Cannot sort by '{self.field}'",
                errors=[
                    {
                        "field": "sortBy",
                        "message": f"Must be one of: {', '.join(sorted(SORTABLE_FIELDS))}",
                    }
                ],
            )
        return SORTABLE_FIELDS[key]

    def order_by(self) -> list[Any]:
        column = self.column()
        primary = column.desc() if self.descending else column.asc()
        # Tie-break on id so page boundaries are deterministic.
        return [primary, BookTable.id.asc()]  # type: ignore[union-attr]


class SearchQuery(BaseModel):
    """Free-text search over title, author, description and genre."""

    text: str

    @classmethod
    def from_param(cls, q: str | None) -> "SearchQuery":
        text = (q or "").strip()
        if not text:
            raise ValidationFailedError(
                "Search query is required",
                errors=[{"field": "q", "message": "Must not be empty"}],
            )
        return cls(text=text)

    def conditions(self) -> list[ColumnElement[bool]]:
        return [
            or_(
                icontains(BookTable.title, self.text),
                icontains(BookTable.author, self.text),
                icontains(BookTable.description, self.text),
                icontains(BookTable.genre, self.text),
            )
        ]

    @staticmethod
    def order_by() -> list[Any]:
        return SortSpec().order_by()


def genre_conditions(genre: str) -> list[ColumnElement[bool]]:
    return [icontains(BookTable.genre, genre)]


def author_conditions(author: str) -> list[ColumnElement[bool]]:
    return [icontains(BookTable.author, author)]
