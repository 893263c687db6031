"""Book catalog endpoints."""

from fastapi import APIRouter, Depends, Query, status

from src.bookhub.api.http.deps import get_app_config, get_book_service
from src.bookhub.api.http.responses import Envelope, paginated, success
from src.bookhub.core.query.filters import BookFilter, SearchQuery, SortSpec
from src.bookhub.core.query.pagination import PageRequest
from src.bookhub.core.services import BookService
from src.bookhub.entities.book import Book, BookCreate, BookUpdate
from src.bookhub.runtime.config.config_data import ConfigData

router = APIRouter(prefix="/books", tags=["books"])


def _page_request(page: int | None, limit: int | None, config: ConfigData) -> PageRequest:
    return PageRequest.from_params(
        page,
        limit,
        default_page=config.pagination.default_page,
        default_limit=config.pagination.default_limit,
    )


@router.get("", response_model=Envelope[list[Book]], response_model_exclude_none=True)
def list_books(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    genre: str | None = Query(None),
    author: str | None = Query(None),
    min_rating: float | None = Query(None, alias="minRating"),
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    books: BookService = Depends(get_book_service),
    config: ConfigData = Depends(get_app_config),
):
    """List books with optional filters, sorting and pagination."""
    book_filter = BookFilter.from_params(
        genre=genre,
        author=author,
        min_rating=min_rating,
        min_price=min_price,
        max_price=max_price,
    )
    sort = SortSpec(field=sort_by, sort_order=sort_order)
    result = books.list_books(book_filter, sort, _page_request(page, limit, config))
    return paginated(result.items, result.pagination)


@router.get("/search", response_model=Envelope[list[Book]], response_model_exclude_none=True)
def search_books(
    q: str | None = Query(None),
    page: int | None = Query(None),
    limit: int | None = Query(None),
    books: BookService = Depends(get_book_service),
    config: ConfigData = Depends(get_app_config),
):
    """Case-insensitive search over title, author, description and genre."""
    query = SearchQuery.from_param(q)
    result = books.search_books(query, _page_request(page, limit, config))
    return paginated(
        result.items, result.pagination, total_results=result.pagination.total_items
    )


@router.get(
    "/genre/{genre}", response_model=Envelope[list[Book]], response_model_exclude_none=True
)
def books_by_genre(genre: str, books: BookService = Depends(get_book_service)):
    items = books.books_by_genre(genre)
    return success(items, total_results=len(items))


@router.get(
    "/author/{author}", response_model=Envelope[list[Book]], response_model_exclude_none=True
)
def books_by_author(author: str, books: BookService = Depends(get_book_service)):
    items = books.books_by_author(author)
    return success(items, total_results=len(items))


@router.get("/{book_id}", response_model=Envelope[Book], response_model_exclude_none=True)
def get_book(book_id: str, books: BookService = Depends(get_book_service)):
    return success(books.get_book(book_id))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Envelope[Book],
    response_model_exclude_none=True,
)
def create_book(payload: BookCreate, books: BookService = Depends(get_book_service)):
    return success(books.create_book(payload), message="Book created successfully")


@router.put("/{book_id}", response_model=Envelope[Book], response_model_exclude_none=True)
def update_book(
    book_id: str, payload: BookUpdate, books: BookService = Depends(get_book_service)
):
    """Apply a partial update; only the fields sent are changed."""
    return success(books.update_book(book_id, payload), message="Book updated successfully")


@router.delete("/{book_id}", response_model=Envelope[None], response_model_exclude_none=True)
def delete_book(book_id: str, books: BookService = Depends(get_book_service)):
    books.delete_book(book_id)
    return success(message="Book deleted successfully")
