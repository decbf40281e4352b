from __future__ import annotations

import argparse
import os


def non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the catalogue fetcher."""
    parser = argparse.ArgumentParser(description="Fetch the product catalogue")
    parser.add_argument(
        "--base-url", default=os.getenv("PRODUCT_SERVICE_URL", "http://127.0.0.1:8000")
    )
    parser.add_argument("--product-id", type=int, default=None, help="Fetch a single product")
    parser.add_argument("--timeout", type=float, default=10.0)
    parser.add_argument("--retries", type=non_negative_int, default=2)
    parser.add_argument(
        "--wait", type=float, default=0.0, help="Seconds to wait for /health before fetching"
    )
    return parser.parse_args(argv)
