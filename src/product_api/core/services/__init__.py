"""Core services exports."""

from .database.db_session import DatabaseInitializationError, DbSessionService

__all__ = [
    "DatabaseInitializationError",
    "DbSessionService",
]
