"""Validation module for contact service."""

from contact_service.validation.validator import validate_contact

__all__ = ["validate_contact"]
