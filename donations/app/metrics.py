"""
Prometheus metrics for donation ingestion.

HTTP request metrics come from prometheus-fastapi-instrumentator; these
counters add the webhook outcomes it cannot see.
"""

import sys

from prometheus_client import Counter, Gauge

WEBHOOK_EVENTS = Counter(
    "donations_webhook_events_total",
    "Donation webhooks received, by outcome",
    ["outcome"],
)

DONATED_AMOUNT = Counter(
    "donations_amount_total",
    "Sum of donation amounts stored",
)

RECENT_BUFFER_SIZE = Gauge(
    "donations_recent_buffer_size",
    "Donations currently held in the recent-donations buffer",
)

# Outcome label values
STORED = "stored"
DUPLICATE = "duplicate"
IGNORED = "ignored"
INVALID_SIGNATURE = "invalid_signature"
MALFORMED = "malformed"


def record_outcome(outcome: str) -> None:
    WEBHOOK_EVENTS.labels(outcome=outcome).inc()


def record_amount(amount: float) -> None:
    # Counter values are floats; amounts beyond float range are not counted.
    if amount <= sys.float_info.max:
        DONATED_AMOUNT.inc(amount)
