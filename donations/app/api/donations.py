"""
Donation read and maintenance endpoints.

- GET  /api/latest-donations  newest donations first
- GET  /api/top-donators      leaderboard by cumulative amount
- POST /api/test-donation     store a synthetic donation (no signature check)
- POST /api/clear-data        drop all in-memory state
"""

import json
import logging
import random
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request

from .. import metrics
from ..config import Settings
from ..dependencies import get_app_settings, get_store
from ..store import Donation, DonationStore
from ..webhooks.payloads import coerce_amount, generate_donation_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["donations"])

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_limit(raw: Optional[str], default: int, maximum: int) -> int:
    """
    Parse a limit query parameter leniently.

    The leading integer is used ("12abc" -> 12, "3.7" -> 3). Missing,
    unparsable or zero values fall back to `default`; the result is clamped
    to [1, maximum].
    """
    value = default
    if raw is not None:
        match = _LEADING_INT.match(raw)
        if match and int(match.group(1)) != 0:
            value = int(match.group(1))
    return min(max(value, 1), maximum)


@router.get("/latest-donations")
async def latest_donations(
    store: DonationStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Most recent donations, newest first."""
    donations = [d.model_dump() for d in store.latest(settings.latest_donations_limit)]
    return {"success": True, "donations": donations, "count": len(donations)}


@router.get("/top-donators")
async def top_donators(
    limit: Optional[str] = Query(None, description="Max donators to return (1-200)"),
    store: DonationStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Donors ranked by cumulative amount."""
    size = parse_limit(
        limit,
        default=settings.top_donators_default_limit,
        maximum=settings.top_donators_max_limit,
    )
    donators = [
        {"rank": rank, "username": username, "amount": amount}
        for rank, (username, amount) in enumerate(store.top_donators(size), start=1)
    ]
    return {"success": True, "donators": donators, "count": len(donators)}


@router.post("/test-donation")
async def test_donation(
    request: Request,
    store: DonationStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Store a synthetic donation for manual testing.

    Optional JSON body fields: donor_name, amount. Missing values are
    randomized.
    """
    body = await request.body()
    try:
        payload = json.loads(body) if body else {}
    except json.JSONDecodeError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    donation = Donation(
        id=generate_donation_id("test"),
        donor_name=str(payload.get("donor_name") or f"TestUser{random.randint(0, 999)}"),
        amount=coerce_amount(payload.get("amount")) or random.randint(10000, 59999),
        message="Test donation",
    )
    store.add(donation)
    metrics.RECENT_BUFFER_SIZE.set(len(store))

    logger.info(f"Test donation stored: id={donation.id}, donor={donation.donor_name}")
    return {"success": True, "donation": donation.model_dump()}


@router.post("/clear-data")
async def clear_data(store: DonationStore = Depends(get_store)) -> Dict[str, Any]:
    """Reset all in-memory donation state."""
    store.clear()
    metrics.RECENT_BUFFER_SIZE.set(0)
    return {"success": True, "message": "Cleared data"}
