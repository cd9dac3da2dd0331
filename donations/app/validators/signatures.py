"""
HMAC signature validation for Saweria webhook payloads.

Saweria signs each callback with HMAC-SHA256 over the raw request body,
hex encoded. Depending on the integration the signature arrives under one of
several header names (x-saweria-sig, x-saweria-signature, x-signature,
saweria-callback-signature), so header lookup is done against an ordered
list of candidates.
"""

import hashlib
import hmac
import logging
from typing import Iterable, Mapping, Optional

logger = logging.getLogger(__name__)


def compute_saweria_signature(payload: bytes, secret: str) -> str:
    """
    Compute the Saweria signature for a payload.

    Args:
        payload: Raw request body bytes
        secret: Shared webhook secret

    Returns:
        Hex-encoded HMAC-SHA256 signature
    """
    return hmac.new(
        secret.encode("utf-8"),
        payload,
        hashlib.sha256
    ).hexdigest()


def validate_saweria_signature(
    payload: bytes,
    signature: Optional[str],
    secret: str,
) -> bool:
    """
    Validate a Saweria webhook HMAC signature.

    Args:
        payload: Raw request body bytes
        signature: Hex-encoded HMAC from the signature header
        secret: Shared webhook secret

    Returns:
        True if signature is valid, False otherwise
    """
    if not signature:
        return False

    try:
        computed = compute_saweria_signature(payload, secret)

        # Hex digests compare case-insensitively; compare_digest is constant time
        return hmac.compare_digest(computed, signature.strip().lower())
    except (TypeError, ValueError) as e:
        logger.warning(f"Saweria signature validation failed: {e}")
        return False


def find_signature(
    headers: Mapping[str, str],
    header_names: Iterable[str],
) -> Optional[str]:
    """
    Return the first non-empty signature header value.

    Args:
        headers: Request headers (Starlette headers are case-insensitive)
        header_names: Candidate header names, in priority order

    Returns:
        The signature value, or None if no candidate header is set
    """
    for name in header_names:
        value = headers.get(name)
        if value:
            return value
    return None
