"""
Command line entry point for the donations API.

Usage:
    # Serve on the configured host/port (DONATIONS_HOST / DONATIONS_PORT)
    donations-api serve

    # Local development with auto-reload
    donations-api serve --port 8090 --reload
"""

from typing import Optional

import click
import uvicorn

from . import __version__
from .config import get_settings


@click.group()
@click.version_option(__version__, prog_name="donations-api")
def main():
    """Saweria donations webhook API."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: DONATIONS_HOST or 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Bind port (default: DONATIONS_PORT or 8000)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development only)")
@click.option(
    "--log-level",
    type=click.Choice(["critical", "error", "warning", "info", "debug"]),
    default=None,
    help="Log level (default: DONATIONS_LOG_LEVEL)",
)
def serve(host: Optional[str], port: Optional[int], reload: bool, log_level: Optional[str]):
    """Run the API under uvicorn."""
    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    log_level = log_level or settings.log_level.lower()

    click.echo(f"Starting {settings.service_name} on {host}:{port}")
    click.echo(
        "Signature validation: "
        f"{'enabled' if settings.signature_verification_enabled else 'disabled (SAWERIA_SECRET not set)'}"
    )

    uvicorn.run(
        "donations.app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
