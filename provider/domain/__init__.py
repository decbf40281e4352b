"""Pure domain utilities: tokens, exempt paths, the gate decision.

These modules are intentionally free of FastAPI/HTTP concerns so they can be
unit-tested and reused by both the provider and the catalogue client.
"""
__all__ = ["paths", "tokens", "gate"]
