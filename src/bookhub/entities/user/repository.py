"""User repository for data access operations."""

from typing import Any

import sqlalchemy as sa
from sqlalchemy import exc, update
from sqlmodel import Session, select

from src.bookhub.core.errors import ConflictError
from src.bookhub.entities._base import is_entity_id, utcnow
from src.bookhub.entities.user.entity import Review, User
from src.bookhub.entities.user.table import UserTable


def _to_entity(row: UserTable) -> User:
    return User.model_validate(row, from_attributes=True)


class UserRepository:
    """Data-access layer for users and their embedded lists."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        if not is_entity_id(user_id):
            return None
        # Always reload: compare_and_set writes around the identity map.
        row = self._session.get(UserTable, user_id, populate_existing=True)
        if row is None:
            return None
        return _to_entity(row)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(UserTable.email == email.strip().lower())
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return _to_entity(row)

    def create(self, user: User) -> User:
        """Insert ``user``. Raises ConflictError when the email is taken."""
        email = user.email.strip().lower()
        if self.get_by_email(email) is not None:
            raise ConflictError(f"A user with email {email} already exists")

        row = UserTable(
            id=user.id,
            name=user.name,
            email=email,
            password_hash=user.password_hash,
            favorites=list(user.favorites),
            wishlist=list(user.wishlist),
            reviews=self._dump_reviews(user.reviews),
            version=user.version,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        self._session.add(row)
        try:
            self._session.flush()
        except exc.IntegrityError as e:
            self._session.rollback()
            raise ConflictError(f"A user with email {email} already exists") from e
        return _to_entity(row)

    def find_reviewers(self, book_id: str) -> list[User]:
        """Users whose review list mentions ``book_id``.

        This is a textual prefilter on the JSON column; callers still have to
        match the review entries exactly.
        """
        statement = select(UserTable).where(
            sa.cast(UserTable.reviews, sa.String).contains(book_id, autoescape=True)
        )
        return [_to_entity(row) for row in self._session.exec(statement).all()]

    def compare_and_set(
        self,
        user: User,
        *,
        favorites: list[str] | None = None,
        wishlist: list[str] | None = None,
        reviews: list[Review] | None = None,
    ) -> bool:
        """Write the given lists only if the stored version still equals ``user.version``.

        Returns False when another writer got there first; nothing is written
        in that case.
        """
        values: dict[str, Any] = {}
        if favorites is not None:
            values["favorites"] = list(favorites)
        if wishlist is not None:
            values["wishlist"] = list(wishlist)
        if reviews is not None:
            values["reviews"] = self._dump_reviews(reviews)

        statement = (
            update(UserTable)
            .where(UserTable.id == user.id, UserTable.version == user.version)
            .values(**values, version=user.version + 1, updated_at=utcnow())
        )
        result = self._session.connection().execute(statement)
        return result.rowcount == 1

    @staticmethod
    def _dump_reviews(reviews: list[Review]) -> list[dict[str, Any]]:
        return [review.model_dump(mode="json") for review in reviews]
