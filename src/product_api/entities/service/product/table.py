"""Product database table model."""

from decimal import Decimal

from sqlalchemy import Column, Numeric, Text, text
from sqlmodel import Field

from src.product_api.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    This represents how the Product entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "products"

    name: str = Field(sa_column=Column(Text, nullable=False))
    price: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(
            Numeric(10, 2), nullable=False, server_default=text("0.00")
        ),
    )
