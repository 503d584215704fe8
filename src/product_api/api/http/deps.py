"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request
from sqlmodel import Session

from src.product_api.api.http.app_data import ApplicationDependencies
from src.product_api.core.services import DbSessionService
from src.product_api.runtime.config.config_data import ConfigData


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the application dependencies built at startup."""
    return request.app.state.app_dependencies


def get_app_config(request: Request) -> ConfigData:
    """Get the configuration the application was started with."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.config


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session scoped to the request.

    The session is closed when the response is done, which rolls back
    anything the handler did not commit.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()
