"""
In-memory donation store.

Holds the three pieces of state the API serves from:
- a capped, insertion-ordered buffer of recent donations
- a running total per donor name (never evicted)
- the set of donation ids currently in the buffer, used for deduplication

An id leaves the dedup set when its donation is evicted from the buffer, so a
replay of an evicted donation is accepted again. Everything is lost when the
process exits.
"""

import logging
import threading
from collections import deque
from typing import Deque, Dict, List, Optional, Set, Tuple

from .models import Amount, Donation

logger = logging.getLogger(__name__)


class DonationStore:
    """
    Bounded in-memory storage for donations.

    All reads and writes go through a single lock, so the store is safe to
    share between the event loop and FastAPI's threadpool.
    """

    def __init__(self, capacity: int = 100):
        """
        Initialize the store.

        Args:
            capacity: Max donations kept in the recent buffer
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._recent: Deque[Donation] = deque()
        self._totals: Dict[str, Amount] = {}
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def add(self, donation: Donation) -> bool:
        """
        Store a donation.

        Appends to the recent buffer (evicting the oldest entry past capacity)
        and adds the amount to the donor's running total.

        Args:
            donation: Normalized donation record

        Returns:
            True if stored, False if the id was already seen (nothing changes)
        """
        with self._lock:
            if donation.id in self._seen:
                return False

            self._recent.append(donation)
            self._seen.add(donation.id)
            self._totals[donation.donor_name] = (
                self._totals.get(donation.donor_name, 0) + donation.amount
            )

            while len(self._recent) > self.capacity:
                evicted = self._recent.popleft()
                self._seen.discard(evicted.id)
                logger.debug(f"Evicted donation {evicted.id} from recent buffer")

            return True

    def is_duplicate(self, donation_id: str) -> bool:
        """Whether a donation with this id is currently stored."""
        with self._lock:
            return donation_id in self._seen

    def latest(self, limit: int) -> List[Donation]:
        """Return up to `limit` most recent donations, newest first."""
        if limit < 1:
            return []
        with self._lock:
            recent = list(self._recent)
        return recent[-limit:][::-1]

    def top_donators(self, limit: Optional[int] = None) -> List[Tuple[str, Amount]]:
        """
        Return donors ordered by cumulative amount, highest first.

        Donors with equal totals keep the order in which they first donated.

        Args:
            limit: Max number of donors to return (all when None)
        """
        with self._lock:
            totals = list(self._totals.items())
        ranked = sorted(totals, key=lambda item: item[1], reverse=True)
        if limit is not None:
            ranked = ranked[:max(limit, 0)]
        return ranked

    def total_for(self, donor_name: str) -> Amount:
        """Cumulative amount donated under a donor name (0 if unknown)."""
        with self._lock:
            return self._totals.get(donor_name, 0)

    @property
    def donor_count(self) -> int:
        with self._lock:
            return len(self._totals)

    def clear(self) -> None:
        """Drop all donations, totals and seen ids."""
        with self._lock:
            self._recent.clear()
            self._totals.clear()
            self._seen.clear()
        logger.info("Donation store cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._recent)
