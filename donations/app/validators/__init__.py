"""Webhook signature validators."""

from .signatures import (
    compute_saweria_signature,
    find_signature,
    validate_saweria_signature,
)

__all__ = [
    "compute_saweria_signature",
    "find_signature",
    "validate_saweria_signature",
]
