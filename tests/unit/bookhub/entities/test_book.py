"""Unit tests for the book entity package.

Covers field validation on the domain models and the repository's
persistence rules (unique ISBN, partial update, delete).
"""

from datetime import date
from uuid import UUID

import pytest
from pydantic import ValidationError

from src.bookhub.core.errors import ConflictError
from src.bookhub.core.query.filters import SortSpec
from src.bookhub.entities.book import (
    DEFAULT_COVER_IMAGE,
    Book,
    BookCreate,
    BookRepository,
    BookUpdate,
    Genre,
)
from tests.fixtures.catalog import book_fields


class TestBookModels:
    def test_defaults(self):
        book = Book(**book_fields())

        UUID(book.id)
        assert book.cover_image == DEFAULT_COVER_IMAGE
        assert book.language == "English"
        assert book.in_stock is True
        assert book.featured is False
        assert book.tags == []

    def test_there_are_fifteen_genres(self):
        assert len(Genre) == 15
        assert Genre("Self-Help") is Genre.SELF_HELP

    def test_unknown_genre_is_rejected(self):
        with pytest.raises(ValidationError):
            BookCreate(**book_fields(genre="Horror"))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": "x" * 201},
            {"author": "y" * 101},
            {"description": "z" * 1001},
            {"rating": 5.1},
            {"rating": -0.1},
            {"price": -1},
            {"pages": 0},
        ],
    )
    def test_field_limits(self, overrides):
        with pytest.raises(ValidationError):
            BookCreate(**book_fields(**overrides))

    def test_title_and_author_are_trimmed(self):
        book = BookCreate(**book_fields(title="  Dune  ", author=" Frank Herbert "))
        assert book.title == "Dune"
        assert book.author == "Frank Herbert"

    def test_tags_are_deduplicated_in_order(self):
        book = BookCreate(**book_fields(tags=["space", " classic ", "space", ""]))
        assert book.tags == ["space", "classic"]

    def test_accepts_camel_case_payload(self):
        payload = {
            "title": "Dune",
            "author": "Frank Herbert",
            "description": "Spice.",
            "genre": "Science Fiction",
            "publicationDate": "1965-08-01",
            "isbn": "979-0-1",
            "price": 9.99,
            "pages": 412,
            "publisher": "Chilton Books",
            "inStock": False,
        }
        book = BookCreate.model_validate(payload)

        assert book.publication_date == date(1965, 8, 1)
        assert book.in_stock is False

    def test_update_tracks_only_sent_fields(self):
        update = BookUpdate.model_validate({"price": 5, "inStock": False})
        assert update.changes() == {"price": 5, "in_stock": False}

    def test_update_rejects_explicit_null(self):
        with pytest.raises(ValidationError, match="Fields cannot be null: title"):
            BookUpdate.model_validate({"title": None})

    def test_update_validates_with_create_rules(self):
        with pytest.raises(ValidationError):
            BookUpdate.model_validate({"rating": 7})


class TestBookRepository:
    def test_create_and_get(self, session):
        repository = BookRepository(session)
        created = repository.create(Book(**book_fields()))
        session.commit()

        fetched = repository.get(created.id)

        assert fetched == created
        assert fetched.title == "The Left Hand of Darkness"
        assert fetched.genre == "Science Fiction"

    def test_get_with_malformed_id_returns_none(self, session):
        assert BookRepository(session).get("not-a-uuid") is None

    def test_duplicate_isbn_is_a_conflict(self, session, book_factory):
        book_factory(isbn="979-0-42")

        with pytest.raises(ConflictError, match="979-0-42"):
            BookRepository(session).create(Book(**book_fields(isbn="979-0-42")))

    def test_create_many_skips_known_isbns(self, session, book_factory):
        book_factory(isbn="979-0-1")
        books = [
            Book(**book_fields(isbn="979-0-1")),
            Book(**book_fields(isbn="979-0-2")),
            Book(**book_fields(isbn="979-0-2")),
            Book(**book_fields(isbn="979-0-3")),
        ]

        created = BookRepository(session).create_many(books)

        assert sorted(book.isbn for book in created) == ["979-0-2", "979-0-3"]
        assert BookRepository(session).count() == 3

    def test_update_changes_only_given_fields(self, session, book_factory):
        book = book_factory(price=10, rating=3)

        updated = BookRepository(session).update(book.id, {"price": 12.5})

        assert updated.price == 12.5
        assert updated.rating == 3
        assert updated.title == book.title

    def test_update_to_taken_isbn_is_a_conflict(self, session, book_factory):
        book_factory(isbn="979-0-1")
        other = book_factory(isbn="979-0-2")

        with pytest.raises(ConflictError):
            BookRepository(session).update(other.id, {"isbn": "979-0-1"})

    def test_update_missing_book_returns_none(self, session):
        assert BookRepository(session).update("9b2f9a4e-3f7c-4d8e-8a55-0f9c1c0b7e11", {}) is None

    def test_delete(self, session, book_factory):
        book = book_factory()
        repository = BookRepository(session)

        assert repository.delete(book.id) is True
        assert repository.get(book.id) is None
        assert repository.delete(book.id) is False

    def test_get_many_ignores_unknown_and_malformed_ids(self, session, book_factory):
        book = book_factory()

        found = BookRepository(session).get_many(
            [book.id, "bogus", "9b2f9a4e-3f7c-4d8e-8a55-0f9c1c0b7e11"]
        )

        assert list(found) == [book.id]

    def test_find_with_offset_and_limit(self, session, book_factory):
        books = [book_factory() for _ in range(5)]
        repository = BookRepository(session)

        page = repository.find(order_by=SortSpec().order_by(), offset=1, limit=2)

        assert [book.id for book in page] == [books[3].id, books[2].id]
