"""
Saweria Mock Data Provider

Generates Saweria-style donation webhook payloads for local testing.
"""

import random
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from faker import Faker


class SaweriaProvider:
    """Generate mock Saweria donation callbacks."""

    PAYLOAD_VERSION = "2022.01"
    # Saweria amounts are whole rupiah
    AMOUNTS = [5000, 10000, 15000, 20000, 25000, 50000, 69420, 100000, 250000]
    UNPAID_STATUSES = ["PENDING", "EXPIRED", "FAILED"]
    PLATFORM_CUT = 0.05

    def __init__(self, seed: Optional[int] = None):
        """Initialize with optional seed for reproducibility."""
        self.fake = Faker("id_ID")
        self._random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

        self._donation_counter = 0
        self._donators: List[Dict[str, str]] = []

    def _donator(self, repeat_ratio: float) -> Dict[str, str]:
        """Pick a returning donator or create a new one."""
        if self._donators and self._random.random() < repeat_ratio:
            return self._random.choice(self._donators)

        donator = {
            "name": self.fake.user_name() if self._random.random() > 0.3 else self.fake.first_name(),
            "email": self.fake.email(),
        }
        self._donators.append(donator)
        return donator

    def generate_donation(
        self,
        status: Optional[str] = "PAID",
        repeat_ratio: float = 0.4,
    ) -> Dict[str, Any]:
        """
        Generate a donation callback payload.

        Args:
            status: Payment status to include (None omits the field)
            repeat_ratio: Probability that the donator has donated before
        """
        self._donation_counter += 1
        donator = self._donator(repeat_ratio)
        amount = self._random.choice(self.AMOUNTS)

        payload: Dict[str, Any] = {
            "version": self.PAYLOAD_VERSION,
            "created_at": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "id": str(uuid.UUID(int=self._random.getrandbits(128), version=4)),
            "type": "donation",
            "amount_raw": amount,
            "cut": int(amount * self.PLATFORM_CUT),
            "donator_name": donator["name"],
            "donator_email": donator["email"],
            "donator_is_user": self._random.random() > 0.5,
            "message": self.fake.sentence(nb_words=6) if self._random.random() > 0.2 else "",
            "etc": {"amount_to_display": amount},
        }
        if status is not None:
            payload["status"] = status
        return payload

    def generate_unpaid_donation(self) -> Dict[str, Any]:
        """Generate a callback for a payment that did not complete."""
        return self.generate_donation(status=self._random.choice(self.UNPAID_STATUSES))
