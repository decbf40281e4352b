"""Product use-cases and the in-memory repository backing them."""
