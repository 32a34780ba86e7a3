"""HTTP layer: FastAPI routes, response schemas, and middleware."""
