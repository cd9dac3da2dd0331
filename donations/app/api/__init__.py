"""Read and maintenance endpoints for stored donations."""

from .donations import router as donations_router

__all__ = ["donations_router"]
