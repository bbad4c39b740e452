"""API-layer wiring: FastAPI dependencies."""
