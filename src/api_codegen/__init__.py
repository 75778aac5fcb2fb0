"""Generate typed API clients and routes from OpenAPI documents."""

__version__ = "0.1.0"
