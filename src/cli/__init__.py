"""Book Hub developer CLI."""

import typer

from .book_commands import books_app
from .db_commands import db_app
from .dev_commands import serve
from .user_commands import users_app

app = typer.Typer(
    help="📚 Book Hub developer CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(db_app, name="db")
app.add_typer(users_app, name="users")
app.add_typer(books_app, name="books")
app.command(name="serve")(serve)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
