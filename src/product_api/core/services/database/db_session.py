"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from src.product_api.runtime.config.config_data import ConfigData
from src.product_api.runtime.context import get_config


class DatabaseInitializationError(RuntimeError):
    """Raised when the products table cannot be created at startup."""


class DbSessionService:
    def __init__(self, config: ConfigData | None = None):
        """Initialize the shared database engine and session factory."""

        main_config = config or get_config()
        db_config = main_config.database
        self._environment = main_config.app.environment

        logger.info(
            "Configuring database engine for environment: {}", self._environment
        )

        engine_kwargs = {
            # Logging - disable SQL echo for cleaner logs
            "echo": False,
            "echo_pool": False,
            "connect_args": self._get_connect_args(main_config),
        }

        if db_config.is_sqlite:
            # One shared in-memory connection; pool sizing does not apply
            engine_kwargs["poolclass"] = StaticPool
            if self._environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,  # Validate connections before use
                }
            )

        # The URL object is logged masked; never log the raw connection string
        logger.info("Initializing database engine for {}", db_config.url_object)
        self._engine = create_engine(db_config.connection_string, **engine_kwargs)

    def _get_connect_args(self, config: ConfigData) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if config.database.backend == "postgresql":
            connect_args.update(
                {
                    # Application name for connection tracking
                    "application_name": f"{config.app.environment}_product_api",
                    "connect_timeout": 30,
                }
            )
        elif config.database.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,  # Sessions cross threadpool workers
                    "timeout": 20,  # Lock timeout
                }
            )

        return connect_args

    @property
    def engine(self):
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for scripts and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise
        finally:
            db.close()

    def ensure_schema(self) -> None:
        """Create the products table if it does not exist.

        Raises:
            DatabaseInitializationError: The table could not be created.
        """
        # Register the table with the metadata before create_all
        from src.product_api.entities.service.product import ProductTable  # noqa: F401

        try:
            SQLModel.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            logger.error("Failed to create database tables: {}", type(e).__name__)
            raise DatabaseInitializationError(
                "Could not create the products table"
            ) from e
        logger.info("Database initialized with tables.")

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.error(
                "Database health check failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return False

    def dispose(self) -> None:
        """Release every pooled connection."""
        logger.info("Disposing database engine")
        self._engine.dispose()
