"""Error types and FastAPI handlers."""
