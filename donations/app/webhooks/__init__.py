"""Webhook handlers for donation platforms."""

from .saweria import router as saweria_router

__all__ = ["saweria_router"]
