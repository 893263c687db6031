"""User database table model."""

from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.bookhub.entities._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    The favorites, wishlist and reviews lists are embedded in the row as JSON,
    so one row is the whole user document. ``version`` backs the optimistic
    concurrency check used when those lists change.
    """

    __tablename__ = "users"

    name: str = Field(max_length=100)
    email: str = Field(max_length=254, unique=True, index=True)
    password_hash: str = Field(default="")
    favorites: list[str] = Field(
        default_factory=list, sa_column=sa.Column(sa.JSON, nullable=False)
    )
    wishlist: list[str] = Field(
        default_factory=list, sa_column=sa.Column(sa.JSON, nullable=False)
    )
    reviews: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=sa.Column(sa.JSON, nullable=False)
    )
    version: int = Field(default=1, nullable=False)
