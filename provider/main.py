"""FastAPI app factory for the product service: health, bearer gate and product routes."""
from __future__ import annotations

import os
import time
from collections.abc import Callable, Iterable
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from provider.api.auth import BearerAuthGate
from provider.api.models import Product
from provider.api.routes import router as api_router
from provider.domain.tokens import Clock, now_ms
from provider.logging_conf import get_logger, setup_logging
from provider.service.product_service import ProductRepository, get_products_from_env

# Configure logging before anything else.
setup_logging(service="provider")
logger = get_logger("provider")


def create_app(
    *, clock: Clock = now_ms, products: Iterable[Product] | None = None
) -> FastAPI:
    """Build the product service.

    `clock` feeds both the bearer gate and the console; `products` seeds the
    repository (defaults to PRODUCTS_FILE or the built-in list).
    """
    app = FastAPI(
        title="Product Service",
        version=os.getenv("APP_VERSION", "0.1.0"),
    )
    app.state.clock = clock
    app.state.products = ProductRepository(
        get_products_from_env() if products is None else products
    )

    @app.on_event("startup")
    async def _on_startup() -> None:
        logger.info(
            "startup",
            extra={"event": "startup", "products": app.state.products.count()},
        )

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        logger.info("shutdown", extra={"event": "shutdown"})

    # Registered first so the request logger below wraps it and sees 401s.
    app.middleware("http")(BearerAuthGate(clock))

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """Minimal JSON request logging with correlation id.

        - If the client sends X-Request-ID we propagate it; otherwise we mint one
        - Logs a start and end event with method/path/status/elapsed_ms
        - Attaches X-Request-ID header on the response for easy tracing
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    @app.get("/health", summary="Liveness/readiness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    app.include_router(api_router)

    return app


# ASGI entrypoint for uvicorn: `uvicorn provider.main:app --port 8000`
app = create_app()


def serve() -> None:
    """Run the product service under uvicorn (HOST/PORT from the environment)."""
    import uvicorn

    uvicorn.run(
        "provider.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )
