"""HTTP API layer built on FastAPI."""
