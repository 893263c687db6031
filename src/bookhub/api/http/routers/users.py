"""Reader endpoints: favorites, wishlist and reviews."""

from fastapi import APIRouter, Depends

from src.bookhub.api.http.deps import (
    get_current_user,
    get_review_service,
    get_shelf_service,
)
from src.bookhub.api.http.responses import Envelope, success
from src.bookhub.core.services import (
    ReviewCreate,
    ReviewService,
    ReviewSummary,
    Shelf,
    ShelfService,
)
from src.bookhub.entities.book import Book
from src.bookhub.entities.user import Review, User

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/favorites", response_model=Envelope[list[Book]], response_model_exclude_none=True)
def get_favorites(
    user: User = Depends(get_current_user),
    shelves: ShelfService = Depends(get_shelf_service),
):
    return success(shelves.list_books(user.id, Shelf.FAVORITES))


@router.post(
    "/favorites/{book_id}",
    response_model=Envelope[list[str]],
    response_model_exclude_none=True,
)
def add_to_favorites(
    book_id: str,
    user: User = Depends(get_current_user),
    shelves: ShelfService = Depends(get_shelf_service),
):
    favorites = shelves.add(user.id, Shelf.FAVORITES, book_id)
    return success(favorites, message="Book added to favorites")


@router.delete(
    "/favorites/{book_id}",
    response_model=Envelope[list[str]],
    response_model_exclude_none=True,
)
def remove_from_favorites(
    book_id: str,
    user: User = Depends(get_current_user),
    shelves: ShelfService = Depends(get_shelf_service),
):
    favorites = shelves.remove(user.id, Shelf.FAVORITES, book_id)
    return success(favorites, message="Book removed from favorites")


@router.get("/wishlist", response_model=Envelope[list[Book]], response_model_exclude_none=True)
def get_wishlist(
    user: User = Depends(get_current_user),
    shelves: ShelfService = Depends(get_shelf_service),
):
    return success(shelves.list_books(user.id, Shelf.WISHLIST))


@router.post(
    "/wishlist/{book_id}",
    response_model=Envelope[list[str]],
    response_model_exclude_none=True,
)
def add_to_wishlist(
    book_id: str,
    user: User = Depends(get_current_user),
    shelves: ShelfService = Depends(get_shelf_service),
):
    wishlist = shelves.add(user.id, Shelf.WISHLIST, book_id)
    return success(wishlist, message="Book added to wishlist")


@router.delete(
    "/wishlist/{book_id}",
    response_model=Envelope[list[str]],
    response_model_exclude_none=True,
)
def remove_from_wishlist(
    book_id: str,
    user: User = Depends(get_current_user),
    shelves: ShelfService = Depends(get_shelf_service),
):
    wishlist = shelves.remove(user.id, Shelf.WISHLIST, book_id)
    return success(wishlist, message="Book removed from wishlist")


@router.post(
    "/reviews/{book_id}",
    response_model=Envelope[list[Review]],
    response_model_exclude_none=True,
)
def add_review(
    book_id: str,
    payload: ReviewCreate,
    user: User = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    """Add a review, or replace the caller's earlier review of the same book."""
    return success(reviews.submit(user.id, book_id, payload), message="Review added successfully")


@router.get(
    "/reviews/{book_id}",
    response_model=Envelope[ReviewSummary],
    response_model_exclude_none=True,
)
def get_book_reviews(book_id: str, reviews: ReviewService = Depends(get_review_service)):
    """Public: every review of a book, newest first, with the average rating."""
    return success(reviews.summary(book_id))
