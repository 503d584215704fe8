"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field, field_validator
from sqlalchemy.engine import URL, make_url


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )

    @field_validator("file", mode="before")
    @classmethod
    def _empty_file_is_none(cls, value: str | None) -> str | None:
        # An unset ${APP_LOG_FILE:-} substitutes to an empty string
        return value or None


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="postgresql://localhost:5432",
        description="Base database URL (driver, host and port)",
    )
    user: str | None = Field(default=None, description="Database username")
    password: str | None = Field(
        default=None, description="Password for the database user"
    )
    name: str | None = Field(default=None, description="Database name")
    sslmode: str | None = Field(
        default="disable", description="PostgreSQL sslmode query parameter"
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")

    @property
    def backend(self) -> str:
        """Name of the SQLAlchemy backend, e.g. ``postgresql`` or ``sqlite``."""
        return make_url(self.url).get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    @property
    def url_object(self) -> URL:
        """The resolved SQLAlchemy URL with credentials and database applied."""
        base_url = make_url(self.url)

        if self.is_sqlite:
            # SQLite has no credentials; the URL already names the file.
            return base_url

        if self.user and self.user != base_url.username:
            if base_url.username:
                logger.warning(
                    "Database user '{}' does not match the one in the URL '{}'. Using '{}'.",
                    self.user,
                    base_url.username,
                    self.user,
                )
            base_url = base_url.set(username=self.user)

        if self.password and self.password != base_url.password:
            if base_url.password:
                logger.warning(
                    "Database password from configuration does not match the one in the URL. "
                    "Using password from configuration."
                )
            base_url = base_url.set(password=self.password)

        if self.name and self.name != base_url.database:
            if base_url.database:
                logger.warning(
                    "Database name '{}' does not match the one in the URL '{}'. Using '{}'.",
                    self.name,
                    base_url.database,
                    self.name,
                )
            base_url = base_url.set(database=self.name)

        if self.sslmode and self.backend == "postgresql" and "sslmode" not in base_url.query:
            base_url = base_url.update_query_dict({"sslmode": self.sslmode})

        return base_url

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with credentials if provided."""
        # render_as_string keeps the password; str(URL) masks it
        return self.url_object.render_as_string(hide_password=False)


class ProductsConfig(BaseModel):
    """Listing defaults for the products endpoints."""

    default_count: int = Field(
        default=10, description="Page size used when count is missing or invalid"
    )
    max_count: int = Field(
        default=10, description="Largest page size a client may request"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=8000, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    products: ProductsConfig = Field(
        default_factory=ProductsConfig, description="Products endpoint configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
