"""User domain entity and its embedded review records."""

from datetime import datetime
from typing import Any

from pydantic import Field

from src.bookhub.core.models import ApiModel
from src.bookhub.entities._base import Entity, new_id, utcnow


class Review(ApiModel):
    """A user's rating and comment for one book, embedded in the user record."""

    id: str = Field(default_factory=new_id)
    book: str = Field(description="Referenced book id")
    rating: int = Field(ge=1, le=5)
    comment: str
    created_at: datetime = Field(default_factory=utcnow)


class User(Entity):
    """User entity representing a reader.

    The user exclusively owns its favorites, wishlist and reviews lists; books
    are only referenced by id. ``version`` increases with every list mutation
    and guards concurrent writers.
    """

    name: str = Field(description="Display name")
    email: str = Field(description="Unique, lower-cased email address")
    password_hash: str = Field(default="", exclude=True, repr=False)
    favorites: list[str] = Field(default_factory=list)
    wishlist: list[str] = Field(default_factory=list)
    reviews: list[Review] = Field(default_factory=list)
    version: int = Field(default=1)

    def review_for(self, book_id: str) -> Review | None:
        return next((review for review in self.reviews if review.book == book_id), None)

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False
        return (
            self.id == other.id
            and self.email == other.email
            and self.favorites == other.favorites
            and self.wishlist == other.wishlist
            and self.reviews == other.reviews
        )

    def __hash__(self) -> int:
        return hash((self.id, self.email))
