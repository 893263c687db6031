"""User entity module.

This module contains all User-related classes organized by responsibility:
- User: Domain entity with the embedded favorites, wishlist and reviews lists
- Review: Embedded review record
- UserTable: Database persistence model
- UserRepository: Data access layer
"""

from .entity import Review, User
from .repository import UserRepository
from .table import UserTable

__all__ = ["User", "Review", "UserTable", "UserRepository"]
