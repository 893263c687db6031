"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from sqlmodel import Session

from src.bookhub.core.services import DbSessionService
from src.bookhub.entities.book import BookCreate

console = Console()

SAMPLE_CATALOG = Path(__file__).resolve().parents[1] / "bookhub" / "data" / "sample_books.yaml"


@contextmanager
def database_session() -> Iterator[Session]:
    """Session bound to the configured database, disposed on exit."""
    database_service = DbSessionService()
    try:
        with database_service.session_scope() as session:
            yield session
    finally:
        database_service.dispose()


def load_sample_catalog(path: Path = SAMPLE_CATALOG) -> list[BookCreate]:
    """Read and validate the bundled sample books."""
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return [BookCreate.model_validate(entry) for entry in raw.get("books", [])]
    except (OSError, yaml.YAMLError, ValidationError) as e:
        console.print(f"[red]❌ Cannot load sample catalog {path}: {e}[/red]")
        raise typer.Exit(1) from e
