"""Product API router with CRUD operations."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlmodel import Session

from src.product_api.api.http.deps import get_db_session
from src.product_api.api.http.params import Page, page_params, product_id_param
from src.product_api.entities.service.product import (
    Product,
    ProductPayload,
    ProductRepository,
)

PRODUCT_NOT_FOUND = "Product not found"

router = APIRouter(tags=["products"])


@router.get("/products", response_model=list[Product])
def list_products(
    page: Page = Depends(page_params),
    session: Session = Depends(get_db_session),
) -> list[Product]:
    """List products, ``count`` at a time starting at ``start``."""
    repository = ProductRepository(session)
    return repository.list_all(limit=page.limit, offset=page.offset)


@router.get("/product/{item_id}", response_model=Product)
def get_product(
    product_id: int = Depends(product_id_param),
    session: Session = Depends(get_db_session),
) -> Product:
    """Get a product by ID."""
    repository = ProductRepository(session)
    product = repository.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=PRODUCT_NOT_FOUND)
    return product


@router.post("/product", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductPayload,
    session: Session = Depends(get_db_session),
) -> Product:
    """Create a new product."""
    repository = ProductRepository(session)
    created_product = repository.create(payload)
    session.commit()
    logger.info("Created product {}", created_product.id)
    return created_product


@router.put("/product/{item_id}", response_model=Product)
def update_product(
    payload: ProductPayload,
    product_id: int = Depends(product_id_param),
    session: Session = Depends(get_db_session),
) -> Product:
    """Update a product's name and price. The ID never changes."""
    repository = ProductRepository(session)
    updated_product = repository.update(product_id, payload)
    if updated_product is None:
        raise HTTPException(status_code=404, detail=PRODUCT_NOT_FOUND)
    session.commit()
    return updated_product


@router.delete("/product/{item_id}")
def delete_product(
    product_id: int = Depends(product_id_param),
    session: Session = Depends(get_db_session),
) -> dict[str, str]:
    """Delete a product."""
    repository = ProductRepository(session)
    deleted = repository.delete(product_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=PRODUCT_NOT_FOUND)
    session.commit()
    logger.info("Deleted product {}", product_id)
    return {"result": "success"}
