"""FastAPI app for the catalogue: renders product data fetched from the product service."""
from __future__ import annotations

import os

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from provider.logging_conf import get_logger, setup_logging
from catalogue.client import ProductServiceClient
from catalogue.types import (
    DEFAULT_CATALOGUE_NAME,
    Product,
    ProductCatalogue,
    ProductNotFoundError,
    ProductServiceError,
)

setup_logging(service="catalogue")
logger = get_logger("catalogue")


def get_base_url_from_env() -> str:
    """Return PRODUCT_SERVICE_URL, defaulting to a local provider."""
    return os.getenv("PRODUCT_SERVICE_URL", "http://127.0.0.1:8000")


def get_client(request: Request) -> ProductServiceClient:
    return request.app.state.client


def _bad_gateway(e: ProductServiceError) -> HTTPException:
    logger.error("catalogue.upstream_error", extra={"event": "upstream_error", "error": str(e)})
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="product service error")


def create_app(*, client: ProductServiceClient | None = None) -> FastAPI:
    app = FastAPI(title="Product Catalogue", version=os.getenv("APP_VERSION", "0.1.0"))
    app.state.client = client or ProductServiceClient(get_base_url_from_env())

    @app.get("/health", summary="Liveness/readiness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    @app.get("/catalogue", response_model=ProductCatalogue, summary="Show the default catalogue")
    async def catalogue(client: ProductServiceClient = Depends(get_client)) -> ProductCatalogue:
        try:
            response = await client.fetch_products()
        except ProductServiceError as e:
            raise _bad_gateway(e)
        return ProductCatalogue(name=DEFAULT_CATALOGUE_NAME, products=response.products)

    @app.get("/catalogue/{product_id}", response_model=Product, summary="Show product details")
    async def details(
        product_id: int, client: ProductServiceClient = Depends(get_client)
    ) -> Product:
        try:
            return await client.get_product_by_id(product_id)
        except ProductNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="product not found")
        except ProductServiceError as e:
            raise _bad_gateway(e)

    return app


# ASGI entrypoint for uvicorn: `uvicorn catalogue.main:app --port 8080`
app = create_app()


def serve() -> None:
    """Run the catalogue under uvicorn (HOST/PORT from the environment)."""
    import uvicorn

    uvicorn.run(
        "catalogue.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8080")),
        log_config=None,
    )
