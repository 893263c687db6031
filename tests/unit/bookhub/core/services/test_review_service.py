"""Unit tests for review submission and aggregation."""

import pytest
from pydantic import ValidationError

from src.bookhub.core.errors import NotFoundError, ValidationFailedError
from src.bookhub.core.services import ReviewCreate, ReviewService
from src.bookhub.core.services.reviews.review_service import average_rating

MISSING_ID = "9b2f9a4e-3f7c-4d8e-8a55-0f9c1c0b7e11"


@pytest.fixture
def reviews(session) -> ReviewService:
    return ReviewService(session, max_update_attempts=3, max_comment_length=50)


def _review(rating: int, comment: str = "Worth reading") -> ReviewCreate:
    return ReviewCreate(rating=rating, comment=comment)


class TestAverageRating:
    @pytest.mark.parametrize(
        ("ratings", "expected"),
        [
            ([5, 4, 3], 4.0),
            ([], 0),
            ([4, 4, 4, 5], 4.3),
            ([1, 2], 1.5),
            ([5, 5, 4], 4.7),
            ([1, 1, 2], 1.3),
        ],
    )
    def test_rounds_half_up_to_one_decimal(self, ratings, expected):
        assert average_rating(ratings) == expected


class TestReviewCreate:
    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError):
            ReviewCreate(rating=rating, comment="x")

    def test_comment_is_trimmed_and_required(self):
        assert ReviewCreate(rating=3, comment="  fine  ").comment == "fine"
        with pytest.raises(ValidationError):
            ReviewCreate(rating=3, comment="   ")


class TestSubmit:
    def test_first_review_is_appended(self, reviews, user_factory, book_factory):
        user = user_factory()
        book = book_factory()

        result = reviews.submit(user.id, book.id, _review(4))

        assert len(result) == 1
        assert result[0].book == book.id
        assert result[0].rating == 4

    def test_second_review_replaces_the_first(self, reviews, user_factory, book_factory):
        user = user_factory()
        book, other = book_factory(), book_factory()
        first = reviews.submit(user.id, book.id, _review(2, "Meh"))[0]
        reviews.submit(user.id, other.id, _review(5))

        result = reviews.submit(user.id, book.id, _review(5, "Grew on me"))

        assert [review.book for review in result] == [book.id, other.id]
        replaced = result[0]
        assert replaced.id == first.id
        assert replaced.rating == 5
        assert replaced.comment == "Grew on me"
        assert replaced.created_at >= first.created_at
        assert reviews.summary(book.id).review_count == 1

    def test_unknown_book_is_not_found(self, reviews, user_factory):
        user = user_factory()

        with pytest.raises(NotFoundError):
            reviews.submit(user.id, MISSING_ID, _review(3))

    def test_malformed_book_id_is_rejected(self, reviews, user_factory):
        user = user_factory()

        with pytest.raises(ValidationFailedError, match="Invalid book ID format"):
            reviews.submit(user.id, "xyz", _review(3))

    def test_comment_length_is_capped(self, reviews, user_factory, book_factory):
        user = user_factory()
        book = book_factory()

        with pytest.raises(ValidationFailedError) as exc_info:
            reviews.submit(user.id, book.id, _review(3, "x" * 51))

        assert exc_info.value.errors[0]["field"] == "comment"


class TestSummary:
    def test_no_reviews(self, reviews, book_factory):
        book = book_factory()

        summary = reviews.summary(book.id)

        assert summary.reviews == []
        assert summary.average_rating == 0
        assert summary.review_count == 0

    def test_aggregates_across_users_newest_first(self, reviews, user_factory, book_factory):
        book = book_factory()
        readers = [user_factory(name=f"Reader {rating}") for rating in (5, 4, 3)]
        for reader, rating in zip(readers, (5, 4, 3), strict=True):
            reviews.submit(reader.id, book.id, _review(rating))

        summary = reviews.summary(book.id)

        assert summary.review_count == 3
        assert summary.average_rating == 4.0
        assert [review.user_name for review in summary.reviews] == [
            "Reader 3",
            "Reader 4",
            "Reader 5",
        ]
        assert summary.reviews[0].user_id == readers[2].id

    def test_reviews_of_other_books_are_ignored(self, reviews, user_factory, book_factory):
        book, other = book_factory(), book_factory()
        user = user_factory()
        reviews.submit(user.id, other.id, _review(1))

        assert reviews.summary(book.id).review_count == 0

    def test_unknown_book_is_not_found(self, reviews):
        with pytest.raises(NotFoundError):
            reviews.summary(MISSING_ID)
