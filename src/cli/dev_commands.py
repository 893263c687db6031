"""Development server command."""

import typer
import uvicorn
from rich.panel import Panel

from .utils import console


def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind the server to"),
    port: int = typer.Option(8000, help="Port to bind the server to"),
    reload: bool = typer.Option(True, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option(
        "info", help="Log level (debug, info, warning, error, critical)"
    ),
) -> None:
    """
    🚀 Start the API with uvicorn.

    Tables are created on startup outside production, so a fresh SQLite file
    works without running ``db init`` first.
    """
    console.print(Panel.fit("[bold green]Starting Book Hub API[/bold green]", border_style="green"))
    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.bookhub.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        reload_dirs=["src"] if reload else None,
        log_level=log_level,
    )
