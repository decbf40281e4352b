from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..logging_conf import get_logger
from ..service import product_service
from ..service.product_service import ProductNotFoundError, ProductRepository
from .models import ConsoleResponse, Product, ProductsResponse

router = APIRouter()
logger = get_logger("api")


def get_repository(request: Request) -> ProductRepository:
    return request.app.state.products


@router.get(
    "/products",
    response_model=ProductsResponse,
    summary="List all products",
)
async def all_products(repo: ProductRepository = Depends(get_repository)) -> ProductsResponse:
    """Return every product known to the service."""
    return ProductsResponse(products=product_service.all_products(repo))


@router.get(
    "/product/{product_id}",
    response_model=Product,
    summary="Fetch one product by id",
)
async def product_by_id(
    product_id: int, repo: ProductRepository = Depends(get_repository)
) -> Product:
    """Return the product with the given id, or 404."""
    try:
        return product_service.product_by_id(repo, product_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="product not found")


@router.get(
    "/console",
    response_model=ConsoleResponse,
    summary="Diagnostics console (no credential required)",
)
async def console(request: Request) -> ConsoleResponse:
    """Report version, product count and the server clock used for token checks."""
    app = request.app
    return ConsoleResponse(
        service=app.title,
        version=app.version,
        products=app.state.products.count(),
        server_time_ms=app.state.clock(),
    )
