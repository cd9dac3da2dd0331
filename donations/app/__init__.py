"""
Donations API

FastAPI service for receiving Saweria donation webhooks, validating
signatures, and serving latest-donation and top-donator leaderboards.
"""

__version__ = "0.1.0"
