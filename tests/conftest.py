"""Shared fixtures for the donations API test suite."""

from __future__ import annotations

import hashlib
import hmac

import pytest
from fastapi.testclient import TestClient

from donations.app.config import Settings
from donations.app.main import create_app
from donations.app.store import DonationStore

SECRET = "saweria-test-secret"


def sign(body: bytes, secret: str = SECRET) -> str:
    """Hex HMAC-SHA256 of a body, as Saweria sends it."""
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


@pytest.fixture()
def settings() -> Settings:
    """Settings with signature verification disabled and metrics off."""
    return Settings(saweria_secret="", metrics_enabled=False)


@pytest.fixture()
def store(settings: Settings) -> DonationStore:
    return DonationStore(capacity=settings.recent_donations_capacity)


@pytest.fixture()
def client(settings: Settings, store: DonationStore) -> TestClient:
    """Client for an app without a shared secret."""
    return TestClient(create_app(settings=settings, store=store))


@pytest.fixture()
def signed_settings() -> Settings:
    return Settings(saweria_secret=SECRET, metrics_enabled=False)


@pytest.fixture()
def signed_store(signed_settings: Settings) -> DonationStore:
    return DonationStore(capacity=signed_settings.recent_donations_capacity)


@pytest.fixture()
def signed_client(signed_settings: Settings, signed_store: DonationStore) -> TestClient:
    """Client for an app that requires signed webhooks."""
    return TestClient(create_app(settings=signed_settings, store=signed_store))
