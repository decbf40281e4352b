"""Shared pytest fixtures: a controllable clock and in-process provider apps."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from provider.main import create_app
from provider.service.product_service import DEFAULT_PRODUCTS

# 2001-09-09T01:46:40Z
T0 = 1_000_000_000_000


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def provider_app(clock):
    return create_app(clock=clock, products=DEFAULT_PRODUCTS)


@pytest.fixture
def provider_client(provider_app) -> TestClient:
    return TestClient(provider_app)
