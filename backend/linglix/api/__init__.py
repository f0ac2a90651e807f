"""API layer: FastAPI dependency providers."""
