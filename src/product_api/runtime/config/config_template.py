"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.product_api.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """
    def replacer(match):
        var_expr = match.group(1)

        # Handle default values: ${VAR:-default}
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        # Handle error messages: ${VAR:?message}
        elif ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        # Handle required variables: ${VAR}
        else:
            var_name = var_expr
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name} not set")
            return value

    return _PLACEHOLDER.sub(replacer, text)


def substitute_config_values(node: Any) -> Any:
    """Substitute placeholders in every string value of a parsed YAML tree.

    Substitution runs after parsing so environment values are taken verbatim:
    quotes and backslashes in a password are never interpreted by YAML.
    """
    if isinstance(node, dict):
        return {key: substitute_config_values(value) for key, value in node.items()}
    if isinstance(node, list):
        return [substitute_config_values(item) for item in node]
    if isinstance(node, str):
        return substitute_env_vars(node)
    return node


def apply_environment_overrides(env_mode: str) -> list[str]:
    """Promote ``<ENV>_VAR`` variables to ``VAR`` for the active environment.

    ``TEST_APP_DB_NAME=products_test`` becomes ``APP_DB_NAME=products_test``
    when running with ``APP_ENVIRONMENT=test``.

    Returns:
        The names of the variables that were set.
    """
    prefix = f"{env_mode.upper()}_"
    applied = []
    for var_name, var_value in list(os.environ.items()):
        if not var_name.startswith(prefix):
            continue
        new_var_name = var_name[len(prefix):]
        os.environ[new_var_name] = var_value
        applied.append(new_var_name)
        logger.debug("Set environment variable {} from {}", new_var_name, var_name)
    return applied


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed YAML with environment variables substituted

    Raises:
        ValueError: If required environment variables are missing
        FileNotFoundError: If the YAML file doesn't exist
    """
    with open(file_path) as f:
        content = f.read()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration for environment: {}", env_mode)

    applied = apply_environment_overrides(env_mode)
    if applied:
        # Values may be secrets, only the names are logged
        logger.info("Applied environment-specific overrides: {}", sorted(applied))

    try:
        loaded = yaml.safe_load(content)
        if not loaded:
            raise ValueError("Failed to parse YAML")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    # Comments are gone after parsing, only values are substituted
    loaded = substitute_config_values(loaded)

    try:
        # Extract the 'config' section from the YAML structure
        config_data = loaded.get("config", {})
        config = ConfigData(**config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    if config.app.environment == "production" and config.database.is_sqlite:
        logger.warning(
            "SQLite is not recommended for production use. "
            "Consider PostgreSQL for better performance and reliability."
        )

    return config


def validate_config_env_vars() -> dict[str, str]:
    """
    Validate that all required environment variables are set.

    Returns:
        Dictionary of missing variables and their descriptions
    """
    required_vars = {
        "APP_DB_USERNAME": "Database username",
        "APP_DB_PASSWORD": "Database password",
        "APP_DB_NAME": "Database name",
    }

    missing = {}
    for var, description in required_vars.items():
        if not os.getenv(var):
            missing[var] = description

    return missing
