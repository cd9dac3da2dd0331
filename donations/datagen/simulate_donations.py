#!/usr/bin/env python3
"""
Donation Webhook Simulator

Sends generated Saweria donation callbacks to the donations API, signing
them the way Saweria does when a secret is configured.

Usage:
    # Send 10 paid donations (default)
    donations-simulate

    # Signed, form-encoded traffic with some unpaid events
    donations-simulate --secret s3cret --form --unpaid-ratio 0.2 --count 100

    # Continuous mode (sends a donation at intervals)
    donations-simulate --continuous --interval 5
"""

import json
import os
import random
import time
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import click
import requests
from tqdm import tqdm

from donations.app.validators import compute_saweria_signature
from donations.datagen.providers import SaweriaProvider


class DonationSimulator:
    """Simulates Saweria webhook traffic to the donations API."""

    def __init__(
        self,
        api_base_url: str = "http://localhost:8000",
        secret: str = "",
        signature_header: str = "x-saweria-sig",
        form_encoded: bool = False,
        seed: Optional[int] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize the simulator.

        Args:
            api_base_url: Base URL of the donations API
            secret: Shared webhook secret; empty sends unsigned requests
            signature_header: Header carrying the signature
            form_encoded: Send application/x-www-form-urlencoded bodies
            seed: Random seed for reproducibility
            timeout: HTTP request timeout in seconds
        """
        self.api_base_url = api_base_url.rstrip("/")
        self.secret = secret
        self.signature_header = signature_header
        self.form_encoded = form_encoded
        self.timeout = timeout
        self.saweria = SaweriaProvider(seed=seed)
        self._random = random.Random(seed)

    def encode(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Serialize and sign a payload.

        Returns:
            Dict with the body bytes and request headers
        """
        if self.form_encoded:
            flat = {k: v for k, v in payload.items() if not isinstance(v, dict)}
            body = urlencode(flat).encode("utf-8")
            content_type = "application/x-www-form-urlencoded"
        else:
            body = json.dumps(payload).encode("utf-8")
            content_type = "application/json"

        headers = {"Content-Type": content_type}
        if self.secret:
            headers[self.signature_header] = compute_saweria_signature(body, self.secret)
        return {"body": body, "headers": headers}

    def send(self, payload: Dict[str, Any]) -> bool:
        """Post one payload to the webhook endpoint."""
        request = self.encode(payload)
        response = requests.post(
            f"{self.api_base_url}/api/webhook",
            data=request["body"],
            headers=request["headers"],
            timeout=self.timeout,
        )
        return response.status_code == 200

    def send_donation(self, unpaid_ratio: float = 0.0) -> bool:
        """Generate and send a donation callback."""
        if unpaid_ratio and self._random.random() < unpaid_ratio:
            payload = self.saweria.generate_unpaid_donation()
        else:
            payload = self.saweria.generate_donation()
        return self.send(payload)

    def simulate(
        self,
        count: int = 10,
        unpaid_ratio: float = 0.0,
        show_progress: bool = True,
    ) -> Dict[str, int]:
        """
        Send a batch of donation callbacks.

        Args:
            count: Number of callbacks to send
            unpaid_ratio: Share of callbacks with a non-PAID status
            show_progress: Show progress bar

        Returns:
            Dict with success/failure counts
        """
        results = {"success": 0, "failed": 0}

        iterator = range(count)
        if show_progress:
            iterator = tqdm(iterator, desc="Sending donations")

        for _ in iterator:
            try:
                if self.send_donation(unpaid_ratio=unpaid_ratio):
                    results["success"] += 1
                else:
                    results["failed"] += 1
            except requests.RequestException as e:
                results["failed"] += 1
                if not show_progress:
                    click.echo(f"Failed to send donation: {e}", err=True)

        return results


@click.command()
@click.option(
    "--api-url",
    default=os.getenv("DONATIONS_API_URL", "http://localhost:8000"),
    help="Donations API base URL",
)
@click.option(
    "--secret",
    envvar="SAWERIA_SECRET",
    default="",
    help="Shared webhook secret used to sign requests",
)
@click.option(
    "--signature-header",
    default="x-saweria-sig",
    help="Header carrying the signature",
)
@click.option("--form", "form_encoded", is_flag=True, help="Send form-urlencoded bodies")
@click.option(
    "--count",
    type=int,
    default=10,
    help="Number of donations to send",
)
@click.option(
    "--unpaid-ratio",
    type=click.FloatRange(0.0, 1.0),
    default=0.0,
    help="Share of donations sent with a non-PAID status",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for reproducibility",
)
@click.option(
    "--continuous",
    is_flag=True,
    help="Run continuously",
)
@click.option(
    "--interval",
    type=float,
    default=1.0,
    help="Seconds between donations in continuous mode",
)
def main(
    api_url: str,
    secret: str,
    signature_header: str,
    form_encoded: bool,
    count: int,
    unpaid_ratio: float,
    seed: Optional[int],
    continuous: bool,
    interval: float,
):
    """Simulate Saweria donation webhooks against the donations API."""
    click.echo("=" * 60)
    click.echo("Donation Webhook Simulator")
    click.echo("=" * 60)
    click.echo(f"  API URL: {api_url}")
    click.echo(f"  Signed: {'yes' if secret else 'no'}")
    click.echo(f"  Encoding: {'form' if form_encoded else 'json'}")
    click.echo(f"  Count: {count}")
    click.echo(f"  Continuous: {continuous}")
    click.echo("=" * 60)

    simulator = DonationSimulator(
        api_base_url=api_url,
        secret=secret,
        signature_header=signature_header,
        form_encoded=form_encoded,
        seed=seed,
    )

    # Test connectivity
    try:
        response = requests.get(f"{api_url}/api/health", timeout=5)
        if response.status_code != 200:
            click.echo(f"Warning: Health check returned {response.status_code}")
    except requests.RequestException as e:
        click.echo(f"Error: Cannot connect to {api_url}: {e}", err=True)
        click.echo("Make sure the donations API is running.", err=True)
        raise SystemExit(1)

    if continuous:
        click.echo(f"\nRunning continuously (interval: {interval}s). Press Ctrl+C to stop.\n")
        total = {"success": 0, "failed": 0}
        try:
            while True:
                result = simulator.simulate(count=1, unpaid_ratio=unpaid_ratio, show_progress=False)
                total["success"] += result["success"]
                total["failed"] += result["failed"]
                click.echo(
                    f"\rSent: {total['success']} success, {total['failed']} failed",
                    nl=False,
                )
                time.sleep(interval)
        except KeyboardInterrupt:
            click.echo(f"\n\nStopped. Total: {total['success']} success, {total['failed']} failed")
    else:
        result = simulator.simulate(count=count, unpaid_ratio=unpaid_ratio, show_progress=True)
        click.echo(f"\nResults: {result['success']} success, {result['failed']} failed")


if __name__ == "__main__":
    main()
