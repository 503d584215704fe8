"""Product repository for data access operations."""

from sqlalchemy import delete, text, update
from sqlmodel import Session, select

from .entity import Product, ProductPayload
from .table import ProductTable

DEFAULT_LIMIT = 10


class ProductRepository:
    """Data-access layer for products.

    Every method issues a single statement through the session it was built
    with. Committing is left to the caller.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, product_id: int) -> Product | None:
        """Get a product by ID."""
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def list_all(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> list[Product]:
        """List products ordered by ID.

        A negative offset is treated as 0 and a non-positive limit falls back
        to ``DEFAULT_LIMIT``.
        """
        if offset < 0:
            offset = 0
        if limit <= 0:
            limit = DEFAULT_LIMIT

        statement = (
            select(ProductTable)
            .order_by(ProductTable.id)
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    def create(self, payload: ProductPayload) -> Product:
        """Insert a new product and return it with its assigned ID."""
        row = ProductTable(name=payload.name, price=payload.price)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def update(self, product_id: int, payload: ProductPayload) -> Product | None:
        """Update name and price of a product.

        Returns:
            The updated product, or None when no row has that ID.
        """
        statement = (
            update(ProductTable)
            .where(ProductTable.id == product_id)
            .values(name=payload.name, price=payload.price)
        )
        result = self._session.exec(statement)
        if result.rowcount == 0:
            return None
        return Product(id=product_id, name=payload.name, price=payload.price)

    def delete(self, product_id: int) -> bool:
        """Delete a product by ID. Returns False when no row has that ID."""
        statement = delete(ProductTable).where(ProductTable.id == product_id)
        result = self._session.exec(statement)
        return result.rowcount > 0

    def clear(self) -> int:
        """Delete every product and restart the ID sequence.

        Returns:
            The number of deleted rows.
        """
        result = self._session.exec(delete(ProductTable))
        bind = self._session.get_bind()
        if bind.dialect.name == "postgresql":
            self._session.exec(text("ALTER SEQUENCE products_id_seq RESTART WITH 1"))
        return result.rowcount
