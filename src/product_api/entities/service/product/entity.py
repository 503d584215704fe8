"""Entity: Product."""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, Field, field_serializer

from src.product_api.entities.core._base import Entity

# NUMERIC(10,2): at most 8 integer digits and 2 fractional digits
Price = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class ProductPayload(BaseModel):
    """Request body accepted when creating or updating a product.

    Extra keys (including an ``id``) are ignored: the id always comes from
    the database or the URL.
    """

    name: str = Field(min_length=1, description="Name")
    price: Price = Field(description="Price with two decimal places")


class Product(Entity):
    """Product entity representing a product in the system.

    This is the domain model returned to API clients. The id is assigned by
    the database on insert and never changes afterwards. Stored rows are
    returned as they are; input rules live on ``ProductPayload``.
    """

    name: str = Field(description="Name")
    price: Price = Field(description="Price with two decimal places")

    @field_serializer("price")
    def _serialize_price(self, price: Decimal) -> float:
        # JSON clients expect a number, not the string pydantic emits for Decimal
        return float(price)

    def __eq__(self, other: Any) -> bool:
        """Compare products by id and business attributes."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.price == other.price
        )

    def __hash__(self) -> int:
        return hash((
            self.id,
            self.name,
            self.price,
        ))
