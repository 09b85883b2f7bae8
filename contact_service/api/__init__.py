"""HTTP API for contact service."""
