"""Mock data providers for donation platforms."""

from .saweria_provider import SaweriaProvider

__all__ = ["SaweriaProvider"]
