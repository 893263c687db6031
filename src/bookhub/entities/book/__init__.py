"""Entity package: Book."""

from .entity import DEFAULT_COVER_IMAGE, Book, BookCreate, BookUpdate, Genre
from .repository import BookRepository
from .table import BookTable

__all__ = [
    "DEFAULT_COVER_IMAGE",
    "Book",
    "BookCreate",
    "BookUpdate",
    "Genre",
    "BookRepository",
    "BookTable",
]
