from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
from pydantic import ValidationError

from provider.domain.tokens import TokenGenerator
from provider.logging_conf import get_logger
from catalogue.types import (
    Product,
    ProductNotFoundError,
    ProductServiceError,
    ProductServiceResponse,
    ProductServiceUnavailableError,
    UnauthorizedError,
)

logger = get_logger("catalogue.client")


async def wait_for_health(
    base_url: str,
    timeout_s: float = 20.0,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Ping /health until it returns ok or raise after a timeout.

    /health is exempt from the bearer gate, so no credential is sent.
    """
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0, transport=transport) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/health")
                body = r.json() if r.status_code == 200 else None
                if isinstance(body, dict) and body.get("ok") is True:
                    logger.info("health.ok", extra={"event": "health_ok", "base_url": base_url})
                    return
            except (httpx.HTTPError, ValueError):
                pass
            await asyncio.sleep(0.25)
    raise ProductServiceUnavailableError("Health check did not pass within timeout")


class ProductServiceClient:
    """Async client for the product service.

    Every call, including every retry, carries a freshly generated bearer
    credential. Only transport failures are retried; HTTP error statuses map
    straight onto `ProductServiceError` subclasses.
    """

    def __init__(
        self,
        base_url: str,
        *,
        generator: TokenGenerator | None = None,
        timeout: float = 10.0,
        retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self.base_url = base_url
        self.generator = generator or TokenGenerator()
        self.timeout = timeout
        self.retries = retries
        self._transport = transport

    async def fetch_products(self) -> ProductServiceResponse:
        data = await self._call_api("/products")
        return self._parse(ProductServiceResponse, data)

    async def get_product_by_id(self, product_id: int) -> Product:
        data = await self._call_api(f"/product/{product_id}")
        return self._parse(Product, data)

    async def _call_api(self, path: str) -> Any:
        last_err: Exception | None = None
        for attempt in range(self.retries + 1):
            headers = {"Authorization": self.generator.generate()}
            try:
                async with httpx.AsyncClient(
                    base_url=self.base_url, timeout=self.timeout, transport=self._transport
                ) as client:
                    r = await client.get(path, headers=headers)
            except httpx.TransportError as e:
                last_err = e
                logger.warning(
                    "client.retry",
                    extra={
                        "event": "client_retry",
                        "path": path,
                        "attempt": attempt + 1,
                        "error": str(e),
                    },
                )
                continue
            return self._check(path, r)
        raise ProductServiceUnavailableError(
            f"GET {path} failed after {self.retries + 1} attempts: {last_err}"
        )

    def _check(self, path: str, r: httpx.Response) -> Any:
        if r.status_code == httpx.codes.UNAUTHORIZED:
            logger.warning("client.unauthorized", extra={"event": "client_unauthorized", "path": path})
            raise UnauthorizedError(f"GET {path} rejected the bearer credential")
        if r.status_code == httpx.codes.NOT_FOUND:
            raise ProductNotFoundError(f"GET {path}: product not found")
        try:
            r.raise_for_status()
            return r.json()
        except httpx.HTTPStatusError as e:
            raise ProductServiceError(f"GET {path} returned {r.status_code}") from e
        except ValueError as e:
            raise ProductServiceError(f"GET {path} returned a non-JSON body") from e

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ProductServiceError(f"unexpected {model.__name__} payload: {e}") from e
