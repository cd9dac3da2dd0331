"""Mock donation data and webhook traffic simulation."""
