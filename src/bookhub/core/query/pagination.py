"""Page windows and navigation metadata for listing endpoints."""

from dataclasses import dataclass

from src.bookhub.core.models import ApiModel

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 12

# Largest OFFSET/LIMIT value the database drivers accept
MAX_SQL_INTEGER = 2**63 - 1


@dataclass(frozen=True)
class PageRequest:
    """A normalized page window.

    ``page`` is always >= 1 and ``limit`` always >= 1, so computing the skip
    or the page count can never fail. There is no upper bound on either; a
    window past the last item is simply empty.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_params(
        cls,
        page: int | None,
        limit: int | None,
        *,
        default_page: int = DEFAULT_PAGE,
        default_limit: int = DEFAULT_LIMIT,
    ) -> "PageRequest":
        """Fall back to the defaults for missing, zero or negative values."""
        return cls(
            page=page if page is not None and page >= 1 else default_page,
            limit=limit if limit is not None and limit >= 1 else default_limit,
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def is_past(self, total: int) -> bool:
        """True when the window starts after the last of ``total`` items."""
        return self.skip >= total

    @property
    def sql_limit(self) -> int:
        return min(self.limit, MAX_SQL_INTEGER)


class Pagination(ApiModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def compute(cls, request: PageRequest, total: int) -> "Pagination":
        total_pages = -(-total // request.limit)
        return cls(
            current_page=request.page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=request.limit,
            has_next_page=request.page < total_pages,
            has_prev_page=request.page > 1,
        )
