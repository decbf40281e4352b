from __future__ import annotations

import json
import os
import threading
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..api.models import Product
from ..logging_conf import get_logger

logger = get_logger("service.products")

_PRODUCT_LIST = TypeAdapter(list[Product])

DEFAULT_PRODUCTS: tuple[Product, ...] = (
    Product(id=9, name="Gem Visa", type="CREDIT_CARD", version="v2"),
    Product(id=10, name="28 Degrees", type="CREDIT_CARD", version="v1", code="CC_001"),
    Product(id=11, name="MyFlexiPay", type="PERSONAL_LOAN", version="v1", code="PL_001"),
)


class ProductNotFoundError(LookupError):
    """Raised when no product exists for the requested id."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"product not found: {product_id}")
        self.product_id = product_id


class ProductRepository:
    """In-memory product store keyed by id.

    Reads and writes share one lock. `find_all` returns a snapshot list, so a
    concurrent seed or delete cannot change it under the caller.
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._lock = threading.Lock()
        self._items: dict[int, Product] = {}
        self.save_all(products)

    def find_all(self) -> list[Product]:
        with self._lock:
            items = list(self._items.values())
        return sorted(items, key=lambda p: p.id)

    def find_by_id(self, product_id: int) -> Product | None:
        with self._lock:
            return self._items.get(product_id)

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def save(self, product: Product) -> Product:
        with self._lock:
            self._items[product.id] = product
        return product

    def save_all(self, products: Iterable[Product]) -> None:
        with self._lock:
            for p in products:
                self._items[p.id] = p

    def delete_by_id(self, product_id: int) -> None:
        with self._lock:
            self._items.pop(product_id, None)

    def delete_all(self) -> None:
        with self._lock:
            self._items.clear()


def load_products(path: Path) -> list[Product]:
    """Parse a JSON list of products from `path`.

    Raises:
        ValueError: if the file is not valid JSON or an entry fails validation.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"PRODUCTS_FILE is not valid JSON: {path}") from e
    try:
        return _PRODUCT_LIST.validate_python(data)
    except ValidationError as e:
        raise ValueError(f"PRODUCTS_FILE has invalid entries: {e}") from e


def get_products_from_env() -> list[Product]:
    """Return the seed products: PRODUCTS_FILE if set, else the built-in list."""
    raw = os.getenv("PRODUCTS_FILE")
    if not raw:
        return list(DEFAULT_PRODUCTS)
    path = Path(raw)
    if not path.is_file():
        raise ValueError(f"PRODUCTS_FILE not found: {path}")
    return load_products(path)


# ------------------------
# Use-cases
# ------------------------

def all_products(repo: ProductRepository) -> list[Product]:
    """Return every product, ordered by id."""
    items = repo.find_all()
    logger.info("products.list", extra={"event": "products_list", "count": len(items)})
    return items


def product_by_id(repo: ProductRepository, product_id: int) -> Product:
    """Return one product or raise `ProductNotFoundError`."""
    product = repo.find_by_id(product_id)
    if product is None:
        logger.info(
            "products.not_found",
            extra={"event": "products_not_found", "product_id": product_id},
        )
        raise ProductNotFoundError(product_id)
    return product
