"""Book database table model."""

from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from src.bookhub.entities._base import EntityTable
from src.bookhub.entities.book.entity import DEFAULT_COVER_IMAGE


class BookTable(EntityTable, table=True):
    """Database persistence model for books.

    ``tags`` is an embedded list stored as JSON on the row.
    """

    __tablename__ = "books"
    __table_args__ = (
        sa.Index("ix_books_genre_rating_price", "genre", "rating", "price"),
    )

    title: str = Field(max_length=200, index=True)
    author: str = Field(max_length=100, index=True)
    description: str = Field(max_length=1000)
    genre: str = Field(max_length=32)
    publication_date: date
    isbn: str = Field(max_length=32, unique=True, index=True)
    cover_image: str = Field(default=DEFAULT_COVER_IMAGE)
    rating: float = Field(default=0)
    price: float
    pages: int
    language: str = Field(default="English")
    publisher: str
    in_stock: bool = Field(default=True)
    featured: bool = Field(default=False)
    tags: list[str] = Field(
        default_factory=list, sa_column=sa.Column(sa.JSON, nullable=False)
    )
