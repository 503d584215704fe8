"""Entity package: Product."""

from .entity import Product, ProductPayload
from .repository import ProductRepository
from .table import ProductTable

__all__ = ["Product", "ProductPayload", "ProductRepository", "ProductTable"]
