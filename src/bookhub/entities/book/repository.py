"""Book repository for data access operations."""

from collections.abc import Iterable, Sequence
from typing import Any

from loguru import logger
from sqlalchemy import ColumnElement, exc
from sqlmodel import Session, func, select

from src.bookhub.core.errors import ConflictError
from src.bookhub.entities._base import canonical_id, is_entity_id, utcnow
from src.bookhub.entities.book.entity import Book
from src.bookhub.entities.book.table import BookTable


class BookRepository:
    """Data-access layer for books.

    Query methods take SQLAlchemy conditions and orderings produced by the
    query builder so that filtering, sorting and paging run in the database.
    Writes are flushed, never committed; committing is the caller's job.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, book_id: str) -> Book | None:
        book_id = canonical_id(book_id)
        if book_id is None:
            return None
        row = self._session.get(BookTable, book_id)
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def exists(self, book_id: str) -> bool:
        book_id = canonical_id(book_id)
        if book_id is None:
            return False
        statement = select(BookTable.id).where(BookTable.id == book_id)
        return self._session.exec(statement).first() is not None

    def get_many(self, book_ids: Iterable[str]) -> dict[str, Book]:
        """Fetch several books at once, keyed by id. Unknown ids are skipped."""
        ids = [book_id for book_id in set(book_ids) if is_entity_id(book_id)]
        if not ids:
            return {}
        statement = select(BookTable).where(BookTable.id.in_(ids))  # type: ignore[attr-defined]
        return {
            row.id: Book.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement).all()
        }

    def get_by_isbn(self, isbn: str) -> Book | None:
        statement = select(BookTable).where(BookTable.isbn == isbn)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def find(
        self,
        conditions: Sequence[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Book]:
        statement = select(BookTable).where(*conditions).order_by(*order_by)
        if offset:
            statement = statement.offset(offset)
        if limit is not None:
            statement = statement.limit(limit)
        rows = self._session.exec(statement).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def count(self, conditions: Sequence[ColumnElement[bool]] = ()) -> int:
        statement = select(func.count()).select_from(BookTable).where(*conditions)
        return self._session.exec(statement).one()

    def create(self, book: Book) -> Book:
        """Insert ``book``. Raises ConflictError when the ISBN is taken."""
        if self.get_by_isbn(book.isbn) is not None:
            raise ConflictError(f"A book with ISBN {book.isbn} already exists")

        row = BookTable.model_validate(book.model_dump())
        self._session.add(row)
        self._flush_unique(book.isbn)
        self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def create_many(self, books: Iterable[Book]) -> list[Book]:
        """Bulk insert, skipping ISBNs that already exist or repeat in the batch."""
        seen: set[str] = set()
        rows: list[BookTable] = []
        for book in books:
            if book.isbn in seen or self.get_by_isbn(book.isbn) is not None:
                logger.debug("Skipping book with existing ISBN {}", book.isbn)
                continue
            seen.add(book.isbn)
            rows.append(BookTable.model_validate(book.model_dump()))

        self._session.add_all(rows)
        self._session.flush()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def update(self, book_id: str, changes: dict[str, Any]) -> Book | None:
        """Apply a partial update. Returns None when the book does not exist."""
        row = self._session.get(BookTable, book_id) if is_entity_id(book_id) else None
        if row is None:
            return None

        new_isbn = changes.get("isbn")
        if new_isbn is not None and new_isbn != row.isbn:
            existing = self.get_by_isbn(new_isbn)
            if existing is not None and existing.id != book_id:
                raise ConflictError(f"A book with ISBN {new_isbn} already exists")

        for field, value in changes.items():
            setattr(row, field, value)
        row.updated_at = utcnow()

        self._session.add(row)
        self._flush_unique(row.isbn)
        self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def delete(self, book_id: str) -> bool:
        row = self._session.get(BookTable, book_id) if is_entity_id(book_id) else None
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def _flush_unique(self, isbn: str) -> None:
        # Another writer can claim the ISBN between the lookup and the flush.
        try:
            self._session.flush()
        except exc.IntegrityError as e:
            self._session.rollback()
            raise ConflictError(f"A book with ISBN {isbn} already exists") from e
