"""
Saweria webhook handler.

Receives donation callbacks from Saweria at POST /api/webhook.

Processing order:
1. Read the raw body (the signature covers the exact bytes)
2. Verify the HMAC-SHA256 signature, when a secret is configured
3. Parse the body according to its Content-Type
4. Skip events whose payment status is not PAID
5. Drop donations whose id was already seen
6. Normalize and store
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from .. import metrics
from ..config import Settings
from ..dependencies import get_app_settings, get_store
from ..store import DonationStore
from ..validators import find_signature, validate_saweria_signature
from .payloads import (
    MalformedPayloadError,
    donation_id,
    is_paid,
    normalize_donation,
    parse_payload,
    payment_status,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


def _verify_signature(request: Request, body: bytes, settings: Settings) -> None:
    """
    Reject the request unless it carries a valid signature.

    Raises:
        HTTPException: 401 when the signature header is missing or wrong
    """
    if not settings.signature_verification_enabled:
        logger.warning("SAWERIA_SECRET not set - skipping signature verification")
        return

    signature = find_signature(request.headers, settings.signature_headers)
    if not signature:
        logger.warning("Missing Saweria signature header")
        metrics.record_outcome(metrics.INVALID_SIGNATURE)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature",
        )

    if not validate_saweria_signature(body, signature, settings.saweria_secret):
        logger.warning("Invalid Saweria webhook signature")
        metrics.record_outcome(metrics.INVALID_SIGNATURE)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature",
        )

    logger.info("Saweria signature verified")


@router.post("/webhook")
async def saweria_webhook(
    request: Request,
    store: DonationStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """
    Handle Saweria donation webhooks.

    Accepts JSON or form-urlencoded bodies. Duplicate and non-paid events
    are acknowledged with 200 so Saweria does not retry them.
    """
    logger.info("Incoming donation webhook")
    body = await request.body()

    _verify_signature(request, body, settings)

    # Parse payload
    try:
        payload = parse_payload(body, request.headers.get("content-type"))
    except MalformedPayloadError as e:
        logger.error(f"Invalid JSON payload: {e}")
        metrics.record_outcome(metrics.MALFORMED)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON",
        )

    # Only paid events become donations
    event_status = payment_status(payload)
    if not is_paid(event_status, settings.paid_status):
        logger.info(f"Ignored donation event with payment_status={event_status}")
        metrics.record_outcome(metrics.IGNORED)
        return {"success": True, "ignored": True, "payment_status": event_status}

    record_id = donation_id(payload)
    if store.is_duplicate(record_id):
        logger.info(f"Duplicate donation ignored: {record_id}")
        metrics.record_outcome(metrics.DUPLICATE)
        return {"success": True, "duplicate": True}

    donation = normalize_donation(payload, record_id)

    # add() re-checks the id under the store lock
    if not store.add(donation):
        logger.info(f"Duplicate donation ignored: {record_id}")
        metrics.record_outcome(metrics.DUPLICATE)
        return {"success": True, "duplicate": True}

    metrics.record_outcome(metrics.STORED)
    metrics.record_amount(donation.amount)
    metrics.RECENT_BUFFER_SIZE.set(len(store))

    logger.info(
        f"Donation stored: id={donation.id}, "
        f"donor={donation.donor_name}, amount={donation.amount}"
    )

    return {
        "success": True,
        "message": "Donation received",
        "donation": donation.model_dump(),
    }
