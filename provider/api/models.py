from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class Product(BaseModel):
    """A single product offered by the provider."""
    id: int
    name: str
    type: str
    version: Optional[str] = None
    code: Optional[str] = None


class ProductsResponse(BaseModel):
    """All products currently known to the provider."""
    products: list[Product]


class ConsoleResponse(BaseModel):
    """Diagnostics snapshot served on the exempt console path."""
    service: str
    version: str
    products: int
    server_time_ms: int
