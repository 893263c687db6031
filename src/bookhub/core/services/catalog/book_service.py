"""Catalog operations: listing, search, lookups and book CRUD."""

from dataclasses import dataclass

from loguru import logger
from sqlmodel import Session

from src.bookhub.core.errors import NotFoundError
from src.bookhub.core.query.filters import (
    BookFilter,
    SearchQuery,
    SortSpec,
    author_conditions,
    genre_conditions,
)
from src.bookhub.core.query.pagination import PageRequest, Pagination
from src.bookhub.entities._base import parse_entity_id
from src.bookhub.entities.book import Book, BookCreate, BookRepository, BookUpdate


@dataclass
class BookPage:
    items: list[Book]
    pagination: Pagination


class BookService:
    """Application service over the book catalog.

    Queries go through ``BookRepository`` with conditions built by the query
    builder; every write commits the session on success.
    """

    def __init__(self, session: Session):
        self._session = session
        self._books = BookRepository(session)

    def list_books(
        self, book_filter: BookFilter, sort: SortSpec, page: PageRequest
    ) -> BookPage:
        conditions = book_filter.conditions()
        order_by = sort.order_by()
        total = self._books.count(conditions)
        items = self._page_items(conditions, order_by, page, total)
        return BookPage(items=items, pagination=Pagination.compute(page, total))

    def search_books(self, query: SearchQuery, page: PageRequest) -> BookPage:
        conditions = query.conditions()
        total = self._books.count(conditions)
        items = self._page_items(conditions, query.order_by(), page, total)
        logger.debug("Search for {!r} matched {} books", query.text, total)
        return BookPage(items=items, pagination=Pagination.compute(page, total))

    def _page_items(
        self, conditions: list, order_by: list, page: PageRequest, total: int
    ) -> list[Book]:
        if page.is_past(total):
            return []
        return self._books.find(conditions, order_by, offset=page.skip, limit=page.sql_limit)

    def books_by_genre(self, genre: str) -> list[Book]:
        return self._books.find(genre_conditions(genre), SortSpec().order_by())

    def books_by_author(self, author: str) -> list[Book]:
        return self._books.find(author_conditions(author), SortSpec().order_by())

    def get_book(self, book_id: str) -> Book:
        """Fetch one book. Any id that does not resolve, malformed or not, is NotFound."""
        book = self._books.get(book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    def create_book(self, payload: BookCreate) -> Book:
        book = Book(**payload.model_dump())
        created = self._books.create(book)
        self._session.commit()
        logger.info("Created book {} ({})", created.id, created.isbn)
        return created

    def create_books(self, payloads: list[BookCreate]) -> list[Book]:
        """Bulk insert used by seeding; ISBNs already present are skipped."""
        created = self._books.create_many(Book(**p.model_dump()) for p in payloads)
        self._session.commit()
        logger.info("Seeded {} of {} books", len(created), len(payloads))
        return created

    def update_book(self, book_id: str, payload: BookUpdate) -> Book:
        book_id = parse_entity_id(book_id, "book ID")
        updated = self._books.update(book_id, payload.changes())
        if updated is None:
            raise NotFoundError("Book not found")
        self._session.commit()
        logger.info("Updated book {} fields {}", book_id, sorted(payload.changes()))
        return updated

    def delete_book(self, book_id: str) -> None:
        book_id = parse_entity_id(book_id, "book ID")
        if not self._books.delete(book_id):
            raise NotFoundError("Book not found")
        self._session.commit()
        logger.info("Deleted book {}", book_id)
