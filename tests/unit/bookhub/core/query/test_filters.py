"""Unit tests for the listing and search query builder."""

import pytest

from src.bookhub.core.errors import ValidationFailedError
from src.bookhub.core.query.filters import (
    BookFilter,
    SearchQuery,
    SortSpec,
    contains_pattern,
)
from src.bookhub.entities.book import BookRepository


class TestContainsPattern:
    def test_wraps_text_in_wildcards(self):
        assert contains_pattern("tolkien") == "%tolkien%"

    def test_escapes_like_metacharacters(self):
        assert contains_pattern("100%_\\") == "%100\\%\\_\\\\%"


class TestBookFilter:
    def test_no_criteria_means_no_conditions(self):
        assert BookFilter().conditions() == []

    def test_each_criterion_adds_one_condition(self):
        book_filter = BookFilter(
            genre="Fantasy", author="le guin", min_rating=4, min_price=10, max_price=20
        )
        assert len(book_filter.conditions()) == 5

    def test_from_params_rejects_non_finite_numbers(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            BookFilter.from_params(min_price=float("nan"))

        assert exc_info.value.errors[0]["field"] == "minPrice"

    def test_price_range_is_inclusive(self, session, book_factory):
        for price in (5, 10, 15, 20, 25):
            book_factory(price=price)

        conditions = BookFilter(min_price=10, max_price=20).conditions()
        prices = sorted(book.price for book in BookRepository(session).find(conditions))

        assert prices == [10, 15, 20]

    def test_author_matches_case_insensitive_substring(self, session, book_factory):
        book_factory(author="Ursula K. Le Guin")
        book_factory(author="Frank Herbert")

        found = BookRepository(session).find(BookFilter(author="LE GUIN").conditions())

        assert [book.author for book in found] == ["Ursula K. Le Guin"]

    def test_author_wildcards_are_literal(self, session, book_factory):
        book_factory(author="Frank Herbert")

        found = BookRepository(session).find(BookFilter(author="%").conditions())

        assert found == []

    def test_genre_is_exact(self, session, book_factory):
        book_factory(genre="Fiction")
        book_factory(genre="Science Fiction")

        found = BookRepository(session).find(BookFilter(genre="Fiction").conditions())

        assert [book.genre for book in found] == ["Fiction"]

    def test_min_rating(self, session, book_factory):
        book_factory(rating=3.9)
        book_factory(rating=4.0)
        book_factory(rating=4.8)

        found = BookRepository(session).find(BookFilter(min_rating=4).conditions())

        assert sorted(book.rating for book in found) == [4.0, 4.8]


class TestSortSpec:
    def test_default_is_newest_first(self, session, book_factory):
        first = book_factory()
        second = book_factory()

        found = BookRepository(session).find(order_by=SortSpec().order_by())

        assert [book.id for book in found] == [second.id, first.id]

    def test_desc_sorts_descending(self, session, book_factory):
        for price in (12, 30, 7):
            book_factory(price=price)

        order_by = SortSpec(field="price", sort_order="desc").order_by()
        found = BookRepository(session).find(order_by=order_by)

        assert [book.price for book in found] == [30, 12, 7]

    @pytest.mark.parametrize("sort_order", [None, "asc", "ascending", "DESC"])
    def test_anything_but_desc_sorts_ascending(self, session, book_factory, sort_order):
        for price in (12, 30, 7):
            book_factory(price=price)

        order_by = SortSpec(field="price", sort_order=sort_order).order_by()
        found = BookRepository(session).find(order_by=order_by)

        assert [book.price for book in found] == [7, 12, 30]

    def test_featured_books_first(self, session, book_factory):
        plain = book_factory()
        featured = book_factory(featured=True)

        order_by = SortSpec(field="featured", sort_order="desc").order_by()
        found = BookRepository(session).find(order_by=order_by)

        assert [book.id for book in found] == [featured.id, plain.id]

    @pytest.mark.parametrize(
        ("field", "column"), [("isbn", "isbn"), ("inStock", "in_stock"), ("featured", "featured")]
    )
    def test_catalog_flags_are_sortable(self, field, column):
        assert SortSpec(field=field).column().key == column

    def test_accepts_camel_case_field_names(self):
        assert SortSpec(field="publicationDate").column().key == "publication_date"

    def test_unknown_field_is_rejected(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            SortSpec(field="password").order_by()

        assert exc_info.value.status_code == 400
        assert exc_info.value.errors[0]["field"] == "sortBy"


class TestSearchQuery:
    @pytest.mark.parametrize("q", [None, "", "   "])
    def test_empty_query_is_rejected(self, q):
        with pytest.raises(ValidationFailedError, match="Search query is required"):
            SearchQuery.from_param(q)

    def test_query_is_trimmed(self):
        assert SearchQuery.from_param("  dune ").text == "dune"

    def test_matches_any_text_field(self, session, book_factory):
        by_title = book_factory(title="Dune")
        by_author = book_factory(author="Dune Fan")
        by_description = book_factory(description="Sand dunes everywhere")
        book_factory(title="Unrelated", description="Nothing here")

        query = SearchQuery.from_param("DUNE")
        found = BookRepository(session).find(query.conditions(), query.order_by())

        assert {book.id for book in found} == {by_title.id, by_author.id, by_description.id}

    def test_matches_genre(self, session, book_factory):
        poetry = book_factory(genre="Poetry")
        book_factory(genre="History")

        query = SearchQuery.from_param("poe")
        found = BookRepository(session).find(query.conditions())

        assert [book.id for book in found] == [poetry.id]
