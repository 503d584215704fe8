"""Typed parsing of path and query parameters.

Path ids are validated strictly and reject the request with a 400. Listing
parameters are lenient: anything unusable falls back to the default.
"""

import re
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Query

from src.product_api.api.http.deps import get_app_config
from src.product_api.runtime.config.config_data import ConfigData

INVALID_PRODUCT_ID = "Invalid product ID"

# products.id is a 32-bit SERIAL
MAX_PRODUCT_ID = 2**31 - 1

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Page:
    limit: int
    offset: int


def parse_product_id(raw: str) -> int:
    """Parse a product id from a path segment.

    Raises:
        HTTPException: 400 when the value is not a non-negative integer that
            fits the id column.
    """
    if not _DIGITS.fullmatch(raw):
        raise HTTPException(status_code=400, detail=INVALID_PRODUCT_ID)
    product_id = int(raw)
    if product_id > MAX_PRODUCT_ID:
        raise HTTPException(status_code=400, detail=INVALID_PRODUCT_ID)
    return product_id


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def parse_page(
    count: str | None, start: str | None, config: ConfigData
) -> Page:
    """Turn raw ``count``/``start`` query values into a bounded page."""
    default_count = config.products.default_count
    max_count = config.products.max_count

    limit = _parse_int(count)
    if limit is None or limit < 1 or limit > max_count:
        limit = default_count

    offset = _parse_int(start)
    if offset is None or offset < 0:
        offset = 0

    return Page(limit=limit, offset=offset)


def product_id_param(item_id: str) -> int:
    """Dependency resolving the ``{item_id}`` path segment."""
    return parse_product_id(item_id)


def page_params(
    count: str | None = Query(default=None, description="Number of products"),
    start: str | None = Query(default=None, description="Offset of the first product"),
    config: ConfigData = Depends(get_app_config),
) -> Page:
    """Dependency resolving the listing query parameters."""
    return parse_page(count, start, config)
