from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class Product(BaseModel):
    """A product as the catalogue sees it; unknown provider fields are ignored."""

    id: int
    name: str
    type: str
    version: Optional[str] = None
    code: Optional[str] = None


class ProductServiceResponse(BaseModel):
    """Body of the provider's product listing."""

    products: list[Product] = []


DEFAULT_CATALOGUE_NAME = "Default Catalogue"


class ProductCatalogue(BaseModel):
    """A named collection of products shown to the user."""

    name: str
    products: list[Product]


class ProductServiceError(RuntimeError):
    """Raised when the product service cannot answer a request."""


class ProductNotFoundError(ProductServiceError):
    """Raised when the product service answers 404 for a product id."""


class UnauthorizedError(ProductServiceError):
    """Raised when the product service rejects our bearer credential."""


class ProductServiceUnavailableError(ProductServiceError):
    """Raised when the product service is unreachable after retries."""
