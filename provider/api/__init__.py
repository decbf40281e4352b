"""HTTP surface of the provider: pydantic models, routes and the auth gate adapter."""
