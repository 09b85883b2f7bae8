"""Configuration module for contact service.

Loads and validates settings from environment variables or .env file.
"""

from contact_service.config.settings import ContactConfig

__all__ = ["ContactConfig"]
