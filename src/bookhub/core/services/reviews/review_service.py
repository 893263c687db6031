"""Review submission and per-book review aggregation.

Reviews live inside user records, so reading a book's reviews means scanning
the users that mention the book. There is no reviews table and no index by
book id; this is fine for a small user base only.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from loguru import logger
from pydantic import Field, StringConstraints
from sqlmodel import Session

from src.bookhub.core.errors import (
    ConcurrentUpdateError,
    NotFoundError,
    ValidationFailedError,
)
from src.bookhub.core.models import ApiModel
from src.bookhub.entities._base import canonical_id, parse_entity_id, utcnow
from src.bookhub.entities.book import BookRepository
from src.bookhub.entities.user import Review, User, UserRepository


class ReviewCreate(ApiModel):
    """Request body for submitting a review."""

    rating: int = Field(ge=1, le=5)
    comment: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class BookReview(ApiModel):
    """One user's review of a book, as shown on the book page."""

    id: str
    user_id: str
    user_name: str
    rating: int
    comment: str
    created_at: datetime


class ReviewSummary(ApiModel):
    reviews: list[BookReview]
    average_rating: float
    review_count: int


def average_rating(ratings: list[int]) -> float:
    """Mean of ``ratings`` rounded half-up to one decimal; 0 when empty."""
    if not ratings:
        return 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class ReviewService:
    def __init__(
        self,
        session: Session,
        max_update_attempts: int = 3,
        max_comment_length: int = 2000,
    ):
        self._session = session
        self._users = UserRepository(session)
        self._books = BookRepository(session)
        self._max_update_attempts = max_update_attempts
        self._max_comment_length = max_comment_length

    def submit(self, user_id: str, book_id: str, payload: ReviewCreate) -> list[Review]:
        """Add the user's review of a book, replacing any earlier one.

        A replaced review keeps its id but gets a fresh ``created_at``.
        Returns the user's full review list.
        """
        book_id = parse_entity_id(book_id, "book ID")
        if len(payload.comment) > self._max_comment_length:
            raise ValidationFailedError(
                "Review comment is too long",
                errors=[
                    {
                        "field": "comment",
                        "message": f"Must be at most {self._max_comment_length} characters",
                    }
                ],
            )
        if not self._books.exists(book_id):
            raise NotFoundError("Book not found")

        for attempt in range(1, self._max_update_attempts + 1):
            user = self._users.get(user_id)
            if user is None:
                raise NotFoundError("User not found")

            reviews = self._apply(user, book_id, payload)
            if self._users.compare_and_set(user, reviews=reviews):
                self._session.commit()
                logger.info(
                    "User {} reviewed book {} with rating {}",
                    user_id,
                    book_id,
                    payload.rating,
                )
                return reviews

            self._session.rollback()
            logger.debug(
                "Version conflict on reviews of user {} (attempt {}/{})",
                user_id,
                attempt,
                self._max_update_attempts,
            )

        logger.warning(
            "Giving up on review update for user {} after {} attempts",
            user_id,
            self._max_update_attempts,
        )
        raise ConcurrentUpdateError()

    @staticmethod
    def _apply(user: User, book_id: str, payload: ReviewCreate) -> list[Review]:
        existing = user.review_for(book_id)
        if existing is None:
            return [
                *user.reviews,
                Review(book=book_id, rating=payload.rating, comment=payload.comment),
            ]

        replacement = existing.model_copy(
            update={
                "rating": payload.rating,
                "comment": payload.comment,
                "created_at": utcnow(),
            }
        )
        return [replacement if review.id == existing.id else review for review in user.reviews]

    def summary(self, book_id: str) -> ReviewSummary:
        """All reviews of a book, newest first, with count and average."""
        book_id = canonical_id(book_id) or book_id
        if not self._books.exists(book_id):
            raise NotFoundError("Book not found")

        reviews: list[BookReview] = []
        for user in self._users.find_reviewers(book_id):
            review = user.review_for(book_id)
            if review is None:
                continue
            reviews.append(
                BookReview(
                    id=review.id,
                    user_id=user.id,
                    user_name=user.name,
                    rating=review.rating,
                    comment=review.comment,
                    created_at=review.created_at,
                )
            )

        reviews.sort(key=lambda review: review.created_at, reverse=True)
        return ReviewSummary(
            reviews=reviews,
            average_rating=average_rating([review.rating for review in reviews]),
            review_count=len(reviews),
        )
