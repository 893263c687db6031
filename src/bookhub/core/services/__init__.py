"""Core services exports."""

# Auth
from .auth.token_service import AccessTokenService

# Catalog
from .catalog.book_service import BookPage, BookService

# Database
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# Reviews
from .reviews.review_service import (
    BookReview,
    ReviewCreate,
    ReviewService,
    ReviewSummary,
)

# Favorites and wishlist
from .shelves.shelf_service import Shelf, ShelfService

__all__ = [
    "AccessTokenService",
    "BookPage",
    "BookService",
    "DbManageService",
    "DbSessionService",
    "BookReview",
    "ReviewCreate",
    "ReviewService",
    "ReviewSummary",
    "Shelf",
    "ShelfService",
]
