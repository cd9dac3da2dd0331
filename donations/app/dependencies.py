"""FastAPI dependencies resolving per-app state."""

from fastapi import Request

from .config import Settings
from .store import DonationStore


def get_store(request: Request) -> DonationStore:
    """Donation store created with the app."""
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings
