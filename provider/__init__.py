"""Product service: serves product data behind the time-windowed bearer gate.

`provider.domain` also holds the token codec shared with the catalogue client.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("product-catalogue-auth")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
