"""Book catalog CLI commands."""

import typer
from rich.table import Table

from src.bookhub.core.query.filters import BookFilter, SortSpec
from src.bookhub.core.query.pagination import PageRequest
from src.bookhub.core.services import BookService

from .utils import console, database_session

books_app = typer.Typer(help="📖 Catalog commands")


@books_app.command("list")
def list_books(
    genre: str | None = typer.Option(None, "--genre", "-g", help="Only this genre"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum number of books to show"),
) -> None:
    """📋 Show the newest books in the catalog."""
    with database_session() as session:
        result = BookService(session).list_books(
            BookFilter(genre=genre), SortSpec(), PageRequest.from_params(1, limit)
        )

    if not result.items:
        console.print("[yellow]No books found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Author", style="green")
    table.add_column("Genre", style="blue")
    table.add_column("Rating", justify="right", style="yellow")
    table.add_column("Price", justify="right")

    for book in result.items:
        table.add_row(
            book.id,
            book.title,
            book.author,
            book.genre,
            f"{book.rating:.1f}",
            f"{book.price:.2f}",
        )

    console.print(table)
    console.print(
        f"\n[dim]Showing {len(result.items)} of {result.pagination.total_items} books[/dim]"
    )
