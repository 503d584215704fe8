"""Product catalogue HTTP API.

This package contains a small CRUD service over a single ``products`` table:
configuration, database access, the FastAPI application and a developer CLI.
"""

__version__ = "0.1.0"
