"""Password hashing for locally created users."""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password with bcrypt and a random salt."""
    return pwd_context.hash(password)
