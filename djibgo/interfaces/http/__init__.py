"""FastAPI routers, dependencies and error translation."""
