"""Local user management CLI commands."""

import typer
from rich.panel import Panel

from src.bookhub.core.errors import ConflictError
from src.bookhub.core.security import hash_password
from src.bookhub.core.services import AccessTokenService
from src.bookhub.entities.user import User, UserRepository

from .utils import console, database_session

users_app = typer.Typer(help="👥 Local user commands")


@users_app.command("create")
def create_user(
    name: str = typer.Argument(..., help="Display name"),
    email: str = typer.Argument(..., help="Email address, must be unique"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Password for the user"
    ),
) -> None:
    """➕ Create a reader account in the configured database."""
    user = User(name=name.strip(), email=email.strip().lower(), password_hash=hash_password(password))

    try:
        with database_session() as session:
            created = UserRepository(session).create(user)
    except ConflictError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(1) from None

    console.print(f"[green]✅ User '{created.name}' created[/green]")
    console.print(f"[blue]ID:[/blue] {created.id}")
    console.print(f"[blue]Email:[/blue] {created.email}")


@users_app.command("token")
def issue_token(
    email: str = typer.Argument(..., help="Email of an existing user"),
    expires_in: int | None = typer.Option(
        None, "--expires-in", help="Token lifetime in seconds"
    ),
) -> None:
    """
    🔑 Mint a bearer token for local testing.

    The token is signed with the configured session signing secret, so it is
    only accepted by an API running with the same configuration.
    """
    with database_session() as session:
        user = UserRepository(session).get_by_email(email)

    if user is None:
        console.print(f"[red]❌ No user with email {email}[/red]")
        raise typer.Exit(1)

    token = AccessTokenService().generate_access_token(user.id, expires_in_seconds=expires_in)
    console.print(Panel.fit(f"[bold]{user.name}[/bold] <{user.email}>", border_style="cyan"))
    # Printed bare so it can be captured with $(bookhub-dev users token ...)
    typer.echo(token)
