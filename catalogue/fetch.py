#!/usr/bin/env python3
"""Fetch the catalogue (or one product) from the product service and log it.

Steps:
- optionally wait for provider health
- call the product service with a fresh bearer credential
- emit the result as one JSON log line and exit 0, or log the failure and exit 1
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from provider.logging_conf import get_logger, setup_logging
from catalogue.cli import parse_args
from catalogue.client import ProductServiceClient, wait_for_health
from catalogue.types import DEFAULT_CATALOGUE_NAME, ProductCatalogue, ProductServiceError

setup_logging(service="catalogue")
logger = get_logger("catalogue.fetch")


async def run_fetch(
    *,
    base_url: str,
    product_id: int | None = None,
    timeout_s: float = 10.0,
    retries: int = 2,
    wait_s: float = 0.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    client = ProductServiceClient(
        base_url, timeout=timeout_s, retries=retries, transport=transport
    )
    try:
        if wait_s > 0:
            await wait_for_health(base_url, wait_s, transport=transport)
        if product_id is None:
            response = await client.fetch_products()
            result = ProductCatalogue(name=DEFAULT_CATALOGUE_NAME, products=response.products)
            logger.info(
                "catalogue.fetched",
                extra={"event": "catalogue_fetched", "catalogue": result.model_dump()},
            )
        else:
            product = await client.get_product_by_id(product_id)
            logger.info(
                "product.fetched",
                extra={"event": "product_fetched", "product": product.model_dump()},
            )
    except ProductServiceError as e:
        logger.error(
            "fetch.failed",
            extra={"event": "fetch_failed", "error_type": type(e).__name__, "error": str(e)},
        )
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    code = asyncio.run(
        run_fetch(
            base_url=args.base_url,
            product_id=args.product_id,
            timeout_s=args.timeout,
            retries=args.retries,
            wait_s=args.wait,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
