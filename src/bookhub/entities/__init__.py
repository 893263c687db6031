"""Entities organized by business concept.

Each entity has its own package containing:
- entity.py: Domain model with validation
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .book import Book, BookCreate, BookRepository, BookTable, BookUpdate, Genre
from .user import Review, User, UserRepository, UserTable

__all__ = [
    "Book",
    "BookCreate",
    "BookUpdate",
    "BookTable",
    "BookRepository",
    "Genre",
    "User",
    "Review",
    "UserTable",
    "UserRepository",
]
