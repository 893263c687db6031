import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel

from src.bookhub.core.errors import ValidationFailedError
from src.bookhub.core.models import ApiModel


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid.uuid4())


def canonical_id(value: str) -> str | None:
    """Canonical form of a UUID string, or None when ``value`` is not one."""
    try:
        return str(uuid.UUID(value))
    except (ValueError, AttributeError, TypeError):
        return None


def parse_entity_id(value: str, label: str = "id") -> str:
    """Return ``value`` in canonical form, or raise if it is not a UUID."""
    canonical = canonical_id(value)
    if canonical is None:
        raise ValidationFailedError(f"Invalid {label} format")
    return canonical


def is_entity_id(value: str) -> bool:
    return canonical_id(value) is not None


class Entity(ApiModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = PydanticField(
        default_factory=new_id,
        description="Unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)


class EntityTable(SQLModel, table=False):
    """Base persistence model with auto-generated UUID identifier."""

    id: str = Field(
        primary_key=True,
        default_factory=new_id,
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
