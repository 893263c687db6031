"""Favorites and wishlist management.

Both shelves are ordered lists of book ids stored on the user record. Every
mutation is a version-checked write: the user is re-read, the change is
recomputed and written only if nobody else wrote in between.
"""

from collections.abc import Callable
from enum import StrEnum

from loguru import logger
from sqlmodel import Session

from src.bookhub.core.errors import (
    ConcurrentUpdateError,
    ConflictError,
    NotFoundError,
)
from src.bookhub.entities._base import parse_entity_id
from src.bookhub.entities.book import Book, BookRepository
from src.bookhub.entities.user import User, UserRepository


class Shelf(StrEnum):
    FAVORITES = "favorites"
    WISHLIST = "wishlist"


class ShelfService:
    def __init__(self, session: Session, max_update_attempts: int = 3):
        self._session = session
        self._users = UserRepository(session)
        self._books = BookRepository(session)
        self._max_update_attempts = max_update_attempts

    def _load_user(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_books(self, user_id: str, shelf: Shelf) -> list[Book]:
        """Resolve the shelf into books, in shelf order.

        Ids whose book has since been deleted are skipped.
        """
        user = self._load_user(user_id)
        book_ids: list[str] = getattr(user, shelf.value)
        found = self._books.get_many(book_ids)
        return [found[book_id] for book_id in book_ids if book_id in found]

    def add(self, user_id: str, shelf: Shelf, book_id: str) -> list[str]:
        """Append ``book_id`` to the shelf and return the updated id list."""
        book_id = parse_entity_id(book_id, "book ID")
        if not self._books.exists(book_id):
            raise NotFoundError("Book not found")

        def append(current: list[str]) -> list[str]:
            if book_id in current:
                raise ConflictError(f"Book already in {shelf.value}")
            return [*current, book_id]

        updated = self._mutate(user_id, shelf, append)
        logger.info("Added book {} to {} of user {}", book_id, shelf.value, user_id)
        return updated

    def remove(self, user_id: str, shelf: Shelf, book_id: str) -> list[str]:
        """Drop ``book_id`` from the shelf. Removing an absent id is a no-op."""
        book_id = parse_entity_id(book_id, "book ID")

        def drop(current: list[str]) -> list[str]:
            return [existing for existing in current if existing != book_id]

        updated = self._mutate(user_id, shelf, drop)
        logger.info("Removed book {} from {} of user {}", book_id, shelf.value, user_id)
        return updated

    def _mutate(
        self, user_id: str, shelf: Shelf, change: Callable[[list[str]], list[str]]
    ) -> list[str]:
        for attempt in range(1, self._max_update_attempts + 1):
            user = self._load_user(user_id)
            current: list[str] = getattr(user, shelf.value)
            updated = change(list(current))
            if updated == current:
                return current

            if self._users.compare_and_set(user, **{shelf.value: updated}):
                self._session.commit()
                return updated

            self._session.rollback()
            logger.debug(
                "Version conflict on {} of user {} (attempt {}/{})",
                shelf.value,
                user_id,
                attempt,
                self._max_update_attempts,
            )

        logger.warning(
            "Giving up on {} update for user {} after {} attempts",
            shelf.value,
            user_id,
            self._max_update_attempts,
        )
        raise ConcurrentUpdateError()
