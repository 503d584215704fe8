"""Database CLI commands."""

import typer
from rich.panel import Panel

from src.product_api.core.services import DatabaseInitializationError
from src.product_api.entities.service.product import ProductRepository

from .utils import build_database_service, console

db_app = typer.Typer(help="🗄️ Database commands")


@db_app.command(name="init")
def init_db() -> None:
    """
    🏗️ Create the products table if it does not exist.
    """
    database_service = build_database_service()
    try:
        database_service.ensure_schema()
    except DatabaseInitializationError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1) from e
    finally:
        database_service.dispose()

    console.print("[green]✅ Products table is ready[/green]")


@db_app.command(name="clear")
def clear_db(
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Do not ask for confirmation"
    ),
) -> None:
    """
    🧹 Delete every product and restart the ID sequence at 1.
    """
    if not yes:
        typer.confirm("Delete every product?", abort=True)

    database_service = build_database_service()
    try:
        with database_service.session_scope() as session:
            deleted = ProductRepository(session).clear()
    finally:
        database_service.dispose()

    console.print(
        Panel.fit(
            f"[bold green]Deleted {deleted} product(s)[/bold green]",
            border_style="green",
        )
    )
