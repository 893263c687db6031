"""FastAPI application setup."""

import time
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.bookhub import __version__
from src.bookhub.api.http.app_data import ApplicationDependencies
from src.bookhub.api.http.responses import failure
from src.bookhub.api.http.routers import books, health, users
from src.bookhub.api.utils.app_startup import configure_logging
from src.bookhub.core.errors import BookHubError
from src.bookhub.core.services import (
    AccessTokenService,
    DbManageService,
    DbSessionService,
)
from src.bookhub.runtime.context import get_config

# Initialize logging
configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


async def startup() -> None:
    config = get_config()
    database_service = DbSessionService(config)
    if config.app.environment != "production":
        DbManageService(database_service.engine).create_all()

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        token_service=AccessTokenService(config),
    )
    logger.info("Book Hub API ready at {}", config.app.base_url)


async def shutdown() -> None:
    app_deps: ApplicationDependencies | None = getattr(app.state, "app_dependencies", None)
    if app_deps is not None:
        app_deps.database_service.dispose()
    logger.info("Book Hub API stopped")


app = FastAPI(
    title="Book Hub API",
    description="Book discovery and management API",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

__all__ = ["app", "startup", "shutdown"]

# --- CORS configuration ---
if get_config().app.environment == "production" and "*" in get_config().app.cors.origins:
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            # Details stay in the log; the client gets a generic envelope.
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content=failure("Internal Server Error"),
                headers={"X-Request-ID": request_id},
            )


# --- Exception handlers ---
@app.exception_handler(BookHubError)
async def handle_domain_error(request: Request, exc: BookHubError) -> JSONResponse:
    logger.bind(status_code=exc.status_code, error_type=type(exc).__name__).info(
        "request.rejected: {}", exc.message
    )
    return JSONResponse(
        status_code=exc.status_code, content=failure(exc.message, errors=exc.errors)
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            # Drop the leading "body"/"query"/"path" segment
            "field": ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.bind(status_code=400).info("request.validation_error: {}", errors)
    return JSONResponse(status_code=400, content=failure("Validation error", errors=errors))


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = f"Route {request.url.path} not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(message),
        headers=getattr(exc, "headers", None),
    )


# --- Router registration ---
app.include_router(books.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(health.router)


@app.get("/", tags=["meta"])
def root() -> dict:
    """Service banner with the main endpoints."""
    return {
        "message": "Book Hub API is running",
        "version": __version__,
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "endpoints": {
            "books": "/api/books",
            "search": "/api/books/search",
            "genre": "/api/books/genre/{genre}",
            "author": "/api/books/author/{author}",
            "favorites": "/api/users/favorites",
            "wishlist": "/api/users/wishlist",
            "reviews": "/api/users/reviews/{bookId}",
            "health": "/health",
        },
    }
