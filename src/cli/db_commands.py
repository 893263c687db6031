"""Database CLI commands."""

import typer
from rich.panel import Panel

from src.bookhub.core.services import BookService, DbManageService, DbSessionService

from .utils import console, database_session, load_sample_catalog

db_app = typer.Typer(help="🗄️  Database commands")


@db_app.command("init")
def init() -> None:
    """Create all tables in the configured database."""
    database_service = DbSessionService()
    try:
        DbManageService(database_service.engine).create_all()
    finally:
        database_service.dispose()
    console.print("[green]✅ Database tables created[/green]")


@db_app.command("seed")
def seed(
    reset: bool = typer.Option(
        False, "--reset", help="Drop and recreate all tables before seeding"
    ),
) -> None:
    """
    🌱 Load the bundled sample catalog.

    Books whose ISBN is already present are skipped, so seeding twice is safe.
    """
    console.print(Panel.fit("[bold green]Seeding Book Catalog[/bold green]", border_style="green"))

    books = load_sample_catalog()

    database_service = DbSessionService()
    try:
        manager = DbManageService(database_service.engine)
        if reset:
            manager.drop_all()
        manager.create_all()
    finally:
        database_service.dispose()

    with database_session() as session:
        created = BookService(session).create_books(books)

    console.print(f"[green]✅ Inserted {len(created)} of {len(books)} sample books[/green]")
    if len(created) < len(books):
        console.print("[dim]Existing ISBNs were skipped[/dim]")
