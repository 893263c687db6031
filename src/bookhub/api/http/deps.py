"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from src.bookhub.api.http.app_data import ApplicationDependencies
from src.bookhub.core.errors import AuthenticationError
from src.bookhub.core.services import (
    AccessTokenService,
    BookService,
    ReviewService,
    ShelfService,
)
from src.bookhub.entities.user import User, UserRepository
from src.bookhub.runtime.config.config_data import ConfigData
from src.bookhub.runtime.context import get_config

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_config() -> ConfigData:
    """Get the active configuration."""
    return get_config()


def get_db_session(request: Request) -> Iterator[Session]:
    """Open a database session for the duration of one request."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_token_service(request: Request) -> AccessTokenService:
    """Get the access token service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.token_service


def get_book_service(session: Session = Depends(get_db_session)) -> BookService:
    return BookService(session)


def get_shelf_service(
    session: Session = Depends(get_db_session),
    config: ConfigData = Depends(get_app_config),
) -> ShelfService:
    return ShelfService(session, max_update_attempts=config.users.max_update_attempts)


def get_review_service(
    session: Session = Depends(get_db_session),
    config: ConfigData = Depends(get_app_config),
) -> ReviewService:
    return ReviewService(
        session,
        max_update_attempts=config.users.max_update_attempts,
        max_comment_length=config.reviews.max_comment_length,
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    token_service: AccessTokenService = Depends(get_token_service),
    session: Session = Depends(get_db_session),
) -> User:
    """Resolve the bearer token to a stored user.

    Raises:
        AuthenticationError: No token, an invalid token, or an unknown user
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token")

    user_id = token_service.verify_access_token(credentials.credentials)
    user = UserRepository(session).get(user_id)
    if user is None:
        raise AuthenticationError("Not authorized, user not found")
    return user
