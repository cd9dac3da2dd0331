"""In-memory storage for received donations."""

from .memory import DonationStore
from .models import Amount, Donation, utc_now_iso

__all__ = ["Amount", "Donation", "DonationStore", "utc_now_iso"]
