"""Shared helpers for the CLI commands."""

from rich.console import Console

from src.product_api.core.services import DbSessionService
from src.product_api.runtime.config.config_template import validate_config_env_vars
from src.product_api.runtime.context import get_config

# Initialize Rich console for colored output
console = Console()


def build_database_service() -> DbSessionService:
    """Create the database service from the loaded configuration.

    Missing database environment variables are reported but not fatal, since
    config.yaml carries development defaults for each of them.
    """
    missing = validate_config_env_vars()
    for var, description in missing.items():
        console.print(f"[yellow]⚠ {var} is not set ({description}); using default[/yellow]")

    return DbSessionService(get_config())
