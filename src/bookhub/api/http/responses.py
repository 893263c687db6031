"""Uniform response envelope.

Every endpoint answers with ``{success, data?, message?, pagination?,
totalResults?, errors?}``. Members left as ``None`` are dropped from the JSON,
so routes declare ``response_model_exclude_none=True``.
"""

from typing import Any, Generic, TypeVar

from src.bookhub.core.models import ApiModel
from src.bookhub.core.query.pagination import Pagination

T = TypeVar("T")


class FieldError(ApiModel):
    field: str
    message: str


class Envelope(ApiModel, Generic[T]):
    success: bool = True
    data: T | None = None
    message: str | None = None
    pagination: Pagination | None = None
    total_results: int | None = None
    errors: list[FieldError] | None = None


def success(
    data: Any = None, *, message: str | None = None, total_results: int | None = None
) -> Envelope:
    return Envelope(data=data, message=message, total_results=total_results)


def paginated(
    data: list[Any], pagination: Pagination, *, total_results: int | None = None
) -> Envelope:
    return Envelope(data=data, pagination=pagination, total_results=total_results)


def failure(message: str, *, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """JSON-ready body for an error response."""
    envelope = Envelope(
        success=False,
        message=message,
        errors=[FieldError.model_validate(error) for error in errors] if errors else None,
    )
    return envelope.model_dump(mode="json", by_alias=True, exclude_none=True)
